"""Account store and session issuer used by the registration gate.

``AccountStore`` owns Account and Role records; ``SessionIssuer`` owns the
signed cookie session. Neither caches records across requests: every
question ("does an Admin exist?") is answered by a fresh query.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache

from email_validator import EmailNotValidError, validate_email
from flask import session as cookie_session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import InvalidCredentials, RoleAlreadyExists, StoreUnavailable, ValidationFailed
from .models import Account, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 4
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True

    @classmethod
    def from_config(cls, config) -> "PasswordPolicy":
        return cls(
            min_length=config.get('PASSWORD_MIN_LENGTH', cls.min_length),
            require_digit=config.get('PASSWORD_REQUIRE_DIGIT', True),
            require_lowercase=config.get('PASSWORD_REQUIRE_LOWERCASE', True),
            require_uppercase=config.get('PASSWORD_REQUIRE_UPPERCASE', True),
            require_non_alphanumeric=config.get('PASSWORD_REQUIRE_NON_ALPHANUMERIC', True),
        )

    def check(self, password: str) -> list[str]:
        """Return the list of rules ``password`` breaks (empty when valid)."""
        problems = []
        if len(password) < self.min_length:
            problems.append(f'Passwords must be at least {self.min_length} characters.')
        if self.require_digit and not any(c.isdigit() for c in password):
            problems.append("Passwords must have at least one digit ('0'-'9').")
        if self.require_lowercase and not any(c.islower() for c in password):
            problems.append("Passwords must have at least one lowercase ('a'-'z').")
        if self.require_uppercase and not any(c.isupper() for c in password):
            problems.append("Passwords must have at least one uppercase ('A'-'Z').")
        if self.require_non_alphanumeric and all(c.isalnum() for c in password):
            problems.append('Passwords must have at least one non alphanumeric character.')
        return problems


def normalize_identifier(identifier: str) -> str:
    return (identifier or '').strip().lower()


class AccountStore:
    """SQLAlchemy backed account and role store.

    Methods only flush; ``transaction()`` decides when work is committed or
    rolled back, so a failed registration leaves no partial records behind.
    """

    def __init__(self, session, policy: PasswordPolicy | None = None):
        self.session = session
        self.policy = policy or PasswordPolicy()

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception('Account store failure')
            raise StoreUnavailable() from exc
        except Exception:
            self.session.rollback()
            raise

    def has_account_with_role(self, name: str) -> bool:
        holder = (self.session.query(Account.id)
                  .join(Account.roles)
                  .filter(Role.name == name)
                  .first())
        return holder is not None

    def find_by_identifier(self, identifier: str) -> Account | None:
        email = normalize_identifier(identifier)
        if not email:
            return None
        return self.session.query(Account).filter_by(email=email).first()

    def create_account(self, identifier: str, credential: str) -> Account:
        email = normalize_identifier(identifier)
        errors = []
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append(f"Email '{identifier}' is invalid.")
        else:
            if self.find_by_identifier(email) is not None:
                errors.append(f"Username '{email}' is already taken.")
        errors.extend(self.policy.check(credential or ''))
        if errors:
            raise ValidationFailed(errors)

        account = Account(email=email)
        account.set_password(credential)
        self.session.add(account)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise ValidationFailed(f"Username '{email}' is already taken.") from exc
        logger.debug('Created account %s', email)
        return account

    def role_exists(self, name: str) -> bool:
        return self.session.query(Role.id).filter_by(name=name).first() is not None

    def create_role(self, name: str) -> Role:
        if self.role_exists(name):
            raise RoleAlreadyExists(name)
        role = Role(name=name)
        self.session.add(role)
        self.session.flush()
        logger.info('Declared role %s', name)
        return role

    def ensure_role(self, name: str) -> None:
        if not self.role_exists(name):
            try:
                self.create_role(name)
            except RoleAlreadyExists:
                pass

    def assign_role(self, account: Account, name: str) -> None:
        role = self.session.query(Role).filter_by(name=name).one()
        if role not in account.roles:
            account.roles.append(role)
        self.session.flush()

    def assign_role_if_unheld(self, account: Account, name: str) -> bool:
        """Give ``account`` the role only when no other account holds it.

        The role row is locked ``FOR UPDATE`` first, so on databases with row
        locks two transactions claiming the same role are serialized.
        """
        role = self.session.query(Role).filter_by(name=name).with_for_update().one()
        holder = (self.session.query(Account.id)
                  .join(Account.roles)
                  .filter(Role.id == role.id, Account.id != account.id)
                  .first())
        if holder is not None:
            return False
        account.roles.append(role)
        self.session.flush()
        return True


@dataclass(frozen=True)
class SessionHandle:
    account_id: int
    email: str
    roles: tuple
    persistent: bool = False


@lru_cache(maxsize=1)
def _dummy_hash():
    return generate_password_hash('not-a-real-password')


class SessionIssuer:
    """Issues authenticated sessions in Flask's signed session cookie."""

    def __init__(self, store: AccountStore):
        self.store = store

    def verify_credential(self, identifier: str, credential: str) -> Account:
        account = self.store.find_by_identifier(identifier)
        if account is None:
            # Spend the same hashing work as a real comparison.
            check_password_hash(_dummy_hash(), credential or '')
            raise InvalidCredentials()
        if not account.check_password(credential or ''):
            raise InvalidCredentials()
        return account

    def sign_in(self, account: Account, persistent: bool = False) -> SessionHandle:
        cookie_session.clear()
        cookie_session['user_id'] = account.id
        cookie_session['email'] = account.email
        cookie_session['roles'] = account.role_names
        cookie_session.permanent = bool(persistent)
        return SessionHandle(account.id, account.email, tuple(account.role_names), bool(persistent))

    def sign_out(self, handle: SessionHandle | None = None) -> None:
        cookie_session.clear()
