from functools import lru_cache

from linklens.database import SessionLocal
from linklens.services.account_backend import SqlAccountBackend
from linklens.services.account_store import AccountStore
from linklens.services.analysis_engine import AnalysisEngine


@lru_cache(maxsize=None)
def get_account_store() -> AccountStore:
    return AccountStore(SqlAccountBackend(SessionLocal))


@lru_cache(maxsize=None)
def get_analysis_engine() -> AnalysisEngine:
    return AnalysisEngine()
