"""
Account Store

Holds every known account plus the active-account pointer. State is read from
the backend once, at construction, and written back after each mutation.
There is no transactional isolation: read-modify-write cycles assume a single
event loop, and the last write wins.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from linklens.config import settings
from linklens.exceptions import NotSignedInError
from linklens.schemas import Account, SecurityAnalysis
from linklens.services.account_backend import AccountBackend

logger = logging.getLogger(__name__)


class AuthFailure(str, Enum):
    ALREADY_EXISTS = "already_exists"
    WEAK_CREDENTIAL = "weak_credential"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class AuthResult:
    account: Optional[Account] = None
    failure: Optional[AuthFailure] = None

    @property
    def ok(self) -> bool:
        return self.account is not None

    def __bool__(self) -> bool:
        return self.ok


class AccountStore:
    def __init__(
        self,
        backend: AccountBackend,
        history_limit: Optional[int] = None,
        min_password_length: Optional[int] = None,
    ):
        self.backend = backend
        self.history_limit = settings.history_limit if history_limit is None else history_limit
        self.min_password_length = (
            settings.min_password_length if min_password_length is None else min_password_length
        )

        self._accounts: Dict[str, Account] = {
            account.id: account for account in backend.load_accounts()
        }
        active_id = backend.load_active_id()
        self._active_id = active_id if active_id in self._accounts else None

    @property
    def accounts(self) -> List[Account]:
        return list(self._accounts.values())

    @property
    def active_account(self) -> Optional[Account]:
        if self._active_id is None:
            return None
        return self._accounts.get(self._active_id)

    def find_by_email(self, email: str) -> Optional[Account]:
        for account in self._accounts.values():
            if account.email == email:
                return account
        return None

    def get_account(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Sign in. A known email is activated whatever the password; an unknown
        one creates an account when the password meets the length rule.
        """
        existing = self.find_by_email(email)
        if existing is not None:
            self._activate(existing)
            logger.info("Account %s signed in", existing.id)
            return AuthResult(account=existing)

        if not email:
            return self._fail("login", AuthFailure.INVALID_INPUT)
        if len(password or "") < self.min_password_length:
            return self._fail("login", AuthFailure.WEAK_CREDENTIAL)

        account = self._create(email, email.split("@")[0])
        return AuthResult(account=account)

    def register(self, email: str, password: str, name: str) -> AuthResult:
        if email and self.find_by_email(email) is not None:
            return self._fail("register", AuthFailure.ALREADY_EXISTS)
        if not email or not name:
            return self._fail("register", AuthFailure.INVALID_INPUT)
        if len(password or "") < self.min_password_length:
            return self._fail("register", AuthFailure.WEAK_CREDENTIAL)

        account = self._create(email, name)
        return AuthResult(account=account)

    def logout(self) -> None:
        if self._active_id is not None:
            logger.info("Account %s signed out", self._active_id)
        self.backend.save_active_id(None)
        self._active_id = None

    def record_scan(self, analysis: SecurityAnalysis) -> Account:
        """
        Prepend an analysis to the active account's history, keeping only the
        most recent ``history_limit`` entries.
        """
        account = self.active_account
        if account is None:
            raise NotSignedInError("No active account to record the scan on")

        history = [analysis, *account.scan_history][: self.history_limit]
        updated = account.model_copy(update={"scan_history": history})
        # Persist first so a failed write leaves the in-memory view untouched
        self.backend.save_account(updated)
        self._accounts[updated.id] = updated
        logger.info(
            "Recorded scan %s for account %s (%d in history)",
            analysis.id,
            updated.id,
            len(history),
        )
        return updated

    def _create(self, email: str, name: str) -> Account:
        account = Account(id=uuid.uuid4().hex, email=email, name=name, scan_history=[])
        self.backend.save_account(account)
        self._accounts[account.id] = account
        self._activate(account)
        logger.info("Created account %s", account.id)
        return account

    def _activate(self, account: Account) -> None:
        self.backend.save_active_id(account.id)
        self._active_id = account.id

    @staticmethod
    def _fail(operation: str, failure: AuthFailure) -> AuthResult:
        logger.warning("%s rejected: %s", operation, failure.value)
        return AuthResult(failure=failure)
