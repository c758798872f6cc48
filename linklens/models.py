from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.sql import func

from linklens.database import Base


class AccountRecord(Base):
    __tablename__ = "accounts"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)  # case-sensitive as submitted
    name = Column(String, nullable=False)
    scan_history = Column(JSON, nullable=False, default=list)  # serialized SecurityAnalysis list
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ActiveAccount(Base):
    __tablename__ = "active_account"

    # Single-row table; the pointer lives in slot 1
    slot = Column(Integer, primary_key=True, default=1)
    account_id = Column(String, nullable=True)
