"""
Persistence backends for the account store.

Both backends keep two independent entries: the list of all accounts and the
active-account pointer. Accounts are written one at a time, replaced by id;
the last writer wins.
"""

import json
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from linklens.models import AccountRecord, ActiveAccount
from linklens.schemas import Account


class AccountBackend(Protocol):
    def load_accounts(self) -> List[Account]: ...

    def save_account(self, account: Account) -> None: ...

    def load_active_id(self) -> Optional[str]: ...

    def save_active_id(self, account_id: Optional[str]) -> None: ...


def _dump_history(account: Account) -> list:
    return [scan.model_dump(mode="json", by_alias=True) for scan in account.scan_history]


class MemoryAccountBackend:
    """Keeps both entries as serialized JSON strings in memory."""

    def __init__(self):
        self._accounts: Optional[str] = None
        self._active_id: Optional[str] = None

    def load_accounts(self) -> List[Account]:
        if not self._accounts:
            return []
        return [Account.model_validate(item) for item in json.loads(self._accounts)]

    def save_account(self, account: Account) -> None:
        stored = json.loads(self._accounts) if self._accounts else []
        record = account.model_dump(mode="json", by_alias=True)
        for index, item in enumerate(stored):
            if item["id"] == account.id:
                stored[index] = record
                break
        else:
            stored.append(record)
        self._accounts = json.dumps(stored)

    def load_active_id(self) -> Optional[str]:
        return self._active_id

    def save_active_id(self, account_id: Optional[str]) -> None:
        self._active_id = account_id


class SqlAccountBackend:
    """Stores accounts in the ``accounts`` table and the pointer in ``active_account``."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load_accounts(self) -> List[Account]:
        with self.session_factory() as db:
            rows = db.query(AccountRecord).order_by(AccountRecord.created_at, AccountRecord.id).all()
            return [
                Account.model_validate(
                    {
                        "id": row.id,
                        "email": row.email,
                        "name": row.name,
                        "scanHistory": row.scan_history or [],
                    }
                )
                for row in rows
            ]

    def save_account(self, account: Account) -> None:
        with self.session_factory() as db:
            db.merge(
                AccountRecord(
                    id=account.id,
                    email=account.email,
                    name=account.name,
                    scan_history=_dump_history(account),
                )
            )
            db.commit()

    def load_active_id(self) -> Optional[str]:
        with self.session_factory() as db:
            row = db.get(ActiveAccount, 1)
            return row.account_id if row else None

    def save_active_id(self, account_id: Optional[str]) -> None:
        with self.session_factory() as db:
            self._write_pointer(db, account_id)
            db.commit()

    @staticmethod
    def _write_pointer(db: Session, account_id: Optional[str]) -> None:
        row = db.get(ActiveAccount, 1)
        if row is None:
            db.add(ActiveAccount(slot=1, account_id=account_id))
        else:
            row.account_id = account_id
