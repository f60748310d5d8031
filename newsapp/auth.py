"""Request-scoped access helpers shared by the blueprints."""
from functools import wraps

from flask import abort, current_app, redirect, session, url_for

from .gate import BootstrapAdminGate
from .identity import AccountStore, PasswordPolicy, SessionIssuer
from .models import ADMIN, db


def build_gate():
    """Wire a gate for the current request around the app's bootstrap lock."""
    store = AccountStore(db.session, PasswordPolicy.from_config(current_app.config))
    return BootstrapAdminGate(store, SessionIssuer(store),
                              current_app.extensions['bootstrap_lock'])


def is_signed_in():
    return 'user_id' in session


def current_roles():
    return tuple(session.get('roles', ()))


def admin_required(f):
    @wraps(f)
    def wrapped(*a, **k):
        if not is_signed_in():
            return redirect(url_for('account.login'))
        if ADMIN not in current_roles():
            abort(403)
        return f(*a, **k)
    return wrapped
