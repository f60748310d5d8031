from flask import Blueprint, render_template, redirect, url_for, session, current_app
from ..auth import admin_required
from ..forms import DeleteForm, NewsPostForm
from ..models import db, NewsPost

news_bp = Blueprint('news', __name__, url_prefix='/NewsPosts')


@news_bp.route('/')
def index():
    posts = NewsPost.query.order_by(NewsPost.created_at.desc(), NewsPost.id.desc()).all()
    return render_template('news/index.html', posts=posts, delete_form=DeleteForm())


@news_bp.route('/<int:id>')
def details(id):
    post = db.get_or_404(NewsPost, id)
    return render_template('news/details.html', post=post)


@news_bp.route('/Create', methods=['GET', 'POST'])
@admin_required
def create():
    form = NewsPostForm()
    if form.validate_on_submit():
        post = NewsPost(title=form.title.data,
                        content=form.content.data,
                        author_id=session['user_id'])
        db.session.add(post)
        db.session.commit()
        current_app.logger.info('News post %s created by %s', post.id, session.get('email'))
        return redirect(url_for('news.details', id=post.id))
    return render_template('news/form.html', form=form, post=None)


@news_bp.route('/Edit/<int:id>', methods=['GET', 'POST'])
@admin_required
def edit(id):
    post = db.get_or_404(NewsPost, id)
    form = NewsPostForm(obj=post)
    if form.validate_on_submit():
        post.title = form.title.data
        post.content = form.content.data
        db.session.commit()
        current_app.logger.info('News post %s updated', post.id)
        return redirect(url_for('news.details', id=post.id))
    return render_template('news/form.html', form=form, post=post)


@news_bp.route('/Delete/<int:id>', methods=['POST'])
@admin_required
def delete(id):
    post = db.get_or_404(NewsPost, id)
    db.session.delete(post)
    db.session.commit()
    current_app.logger.info('News post %s deleted', id)
    return redirect(url_for('news.index'))
