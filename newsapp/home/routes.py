from flask import Blueprint, render_template
from ..models import NewsPost

home_bp = Blueprint('home', __name__)

LATEST_POSTS = 10


@home_bp.route('/')
def index():
    posts = (NewsPost.query
             .order_by(NewsPost.created_at.desc(), NewsPost.id.desc())
             .limit(LATEST_POSTS)
             .all())
    return render_template('home/index.html', posts=posts)
