import os
import sys
import pytest
from flask import session

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from newsapp import create_app
from newsapp.errors import InvalidCredentials, RoleAlreadyExists, ValidationFailed
from newsapp.identity import AccountStore, PasswordPolicy, SessionIssuer
from newsapp.models import db, Account, Role, ADMIN, USER


@pytest.fixture
def app(tmp_path):
    db_path = tmp_path / "test.sqlite"
    app = create_app('config.TestingConfig',
                     {'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}'})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def store(app):
    return AccountStore(db.session, PasswordPolicy.from_config(app.config))


def test_password_policy_messages():
    policy = PasswordPolicy(min_length=6)
    assert policy.check('Pw1!xx') == []
    problems = policy.check('abc')
    assert 'Passwords must be at least 6 characters.' in problems
    assert "Passwords must have at least one digit ('0'-'9')." in problems
    assert "Passwords must have at least one uppercase ('A'-'Z')." in problems
    assert 'Passwords must have at least one non alphanumeric character.' in problems
    assert "Passwords must have at least one lowercase ('a'-'z')." not in problems


def test_create_account_normalizes_and_hashes(store):
    with store.transaction():
        account = store.create_account(' A@X.com ', 'Pw1!')
    stored = Account.query.filter_by(email='a@x.com').one()
    assert stored.id == account.id
    assert stored.password != 'Pw1!'
    assert stored.check_password('Pw1!')


def test_duplicate_identifier_rejected(store):
    with store.transaction():
        store.create_account('a@x.com', 'Pw1!')
    with pytest.raises(ValidationFailed) as excinfo:
        with store.transaction():
            store.create_account('A@x.com', 'Pw2!')
    assert excinfo.value.messages == ["Username 'a@x.com' is already taken."]
    assert Account.query.count() == 1


def test_invalid_email_and_weak_password_reported_together(store):
    with pytest.raises(ValidationFailed) as excinfo:
        with store.transaction():
            store.create_account('nobody', 'password')
    messages = excinfo.value.messages
    assert messages[0] == "Email 'nobody' is invalid."
    assert len(messages) == 4
    assert Account.query.count() == 0


def test_create_role_is_idempotent_through_ensure_role(store):
    with store.transaction():
        store.ensure_role(ADMIN)
        store.ensure_role(ADMIN)
    assert Role.query.filter_by(name=ADMIN).count() == 1
    with pytest.raises(RoleAlreadyExists):
        with store.transaction():
            store.create_role(ADMIN)
    assert Role.query.filter_by(name=ADMIN).count() == 1


def test_assign_role_if_unheld_is_exclusive(store):
    with store.transaction():
        first = store.create_account('a@x.com', 'Pw1!')
        second = store.create_account('b@x.com', 'Pw1!')
        store.ensure_role(ADMIN)
        store.ensure_role(USER)
        assert not store.has_account_with_role(ADMIN)
        assert store.assign_role_if_unheld(first, ADMIN)
        assert not store.assign_role_if_unheld(second, ADMIN)
        store.assign_role(second, USER)
    assert store.has_account_with_role(ADMIN)
    assert Account.query.filter_by(email='a@x.com').one().role_names == [ADMIN]
    assert Account.query.filter_by(email='b@x.com').one().role_names == [USER]


def test_verify_credential(app, store):
    with store.transaction():
        store.create_account('a@x.com', 'Pw1!')
    issuer = SessionIssuer(store)
    assert issuer.verify_credential('A@X.COM', 'Pw1!').email == 'a@x.com'
    with pytest.raises(InvalidCredentials):
        issuer.verify_credential('a@x.com', 'wrong')
    with pytest.raises(InvalidCredentials):
        issuer.verify_credential('ghost@x.com', 'Pw1!')


def test_sign_in_and_out_use_cookie_session(app, store):
    with store.transaction():
        account = store.create_account('a@x.com', 'Pw1!')
        store.ensure_role(ADMIN)
        store.assign_role(account, ADMIN)
    issuer = SessionIssuer(store)
    with app.test_request_context('/'):
        handle = issuer.sign_in(account, persistent=True)
        assert handle.roles == (ADMIN,)
        assert session['user_id'] == account.id
        assert session['roles'] == [ADMIN]
        assert session.permanent
        issuer.sign_out(handle)
        issuer.sign_out(handle)
        assert 'user_id' not in session
