"""Single administrator bootstrap for self-registration.

The first account registered on an empty store becomes ``Admin``; from then
on the registration door is closed for good. "Does an Admin exist?" is
always a fresh query over role memberships, never a cached flag.

The check, account creation and role claim run under one process-wide lock
and inside one store transaction, and the claim itself is a store-level
compare-and-set (``assign_role_if_unheld``). Two concurrent registrations on
an empty store therefore cannot both end up as ``Admin``.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from .errors import InvalidCredentials, RegistrationClosed
from .identity import SessionHandle
from .models import ADMIN, ROLE_NAMES, USER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    session: SessionHandle
    role: str


class BootstrapAdminGate:

    def __init__(self, store, issuer, lock=None):
        self.store = store
        self.issuer = issuer
        self.lock = lock if lock is not None else threading.Lock()

    def registration_open(self) -> bool:
        with self.store.transaction():
            return not self.store.has_account_with_role(ADMIN)

    def attempt_register(self, identifier: str, credential: str) -> RegistrationResult:
        """Create an account and sign it in.

        Raises ``RegistrationClosed`` when an Admin already exists (nothing is
        created), ``ValidationFailed`` when the store rejects the input and
        ``StoreUnavailable`` when persistence fails.
        """
        with self.lock:
            with self.store.transaction():
                if self.store.has_account_with_role(ADMIN):
                    logger.info('Registration attempt for %s rejected: admin exists', identifier)
                    raise RegistrationClosed()

                account = self.store.create_account(identifier, credential)
                for name in ROLE_NAMES:
                    self.store.ensure_role(name)

                if self.store.assign_role_if_unheld(account, ADMIN):
                    role = ADMIN
                    logger.info('Admin slot claimed by %s', account.email)
                else:
                    self.store.assign_role(account, USER)
                    role = USER
                    logger.info('Account %s registered with role %s', account.email, role)

        handle = self.issuer.sign_in(account, persistent=False)
        return RegistrationResult(session=handle, role=role)

    def login(self, identifier: str, credential: str, remember_me: bool = False) -> SessionHandle:
        try:
            with self.store.transaction():
                account = self.issuer.verify_credential(identifier, credential)
        except InvalidCredentials:
            logger.info('Failed login for %s', identifier)
            raise
        return self.issuer.sign_in(account, persistent=remember_me)

    def logout(self, handle: SessionHandle | None = None) -> None:
        self.issuer.sign_out(handle)
