"""Application entry point.

This small wrapper module creates the Flask application using the factory
defined in ``newsapp/__init__.py``.  For local development the tables are
created on start-up; the first account registered through
``/Account/Register`` becomes the administrator.  Deployed databases are
managed with ``flask db upgrade`` instead.
"""
import os

from newsapp import create_app
from newsapp.models import db

app = create_app(os.environ.get('NEWSAPP_CONFIG', 'config.DevelopmentConfig'))

if __name__ == "__main__":
    # create_all runs inside an application context because the factory
    # does not touch the database at import time.
    with app.app_context():
        db.create_all()
    app.run(debug=True)
