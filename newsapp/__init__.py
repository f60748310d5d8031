import threading

from flask import Flask, render_template
from flask_wtf import CSRFProtect
from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreUnavailable
from .models import db, migrate

csrf = CSRFProtect()


def create_app(config_object='config.DevelopmentConfig', overrides=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)
    if not app.config.get('SECRET_KEY'):
        raise RuntimeError("SECRET_KEY environment variable not set")
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    # One lock per process guards the admin bootstrap path.
    app.extensions['bootstrap_lock'] = threading.Lock()

    from .auth import current_roles, is_signed_in
    app.jinja_env.globals.update(current_roles=current_roles, is_signed_in=is_signed_in)

    from .home.routes import home_bp
    from .account.routes import account_bp
    from .news.routes import news_bp

    app.register_blueprint(home_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(news_bp)

    register_error_handlers(app)
    return app


def register_error_handlers(app):
    @app.errorhandler(403)
    def forbidden(error):
        return render_template('errors/403.html', message=getattr(error, 'description', None)), 403

    @app.errorhandler(404)
    def not_found(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(StoreUnavailable)
    def store_unavailable(error):
        app.logger.error('Store unavailable: %s', error)
        return render_template('errors/503.html', message=error.message), 503

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        app.logger.exception('Database failure')
        return render_template('errors/503.html', message=StoreUnavailable.message), 503
