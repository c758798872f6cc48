from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScanStatus(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGEROUS = "dangerous"
    UNKNOWN = "unknown"


class StatusFilter(str, Enum):
    ALL = "all"
    SAFE = "safe"
    WARNING = "warning"
    DANGEROUS = "dangerous"


class HistorySort(str, Enum):
    DATE = "date"
    SCORE = "score"
    URL = "url"


class SSLInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    issuer: str
    expires: Optional[datetime] = None


class ThreatFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    phishing: bool = False
    malware: bool = False
    suspicious: bool = False


class SecurityAnalysis(BaseModel):
    """
    Result of one URL evaluation. Serialized with camelCase keys
    (``safetyScore``, ``aiAnalysis``) both for persistence and for the API.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    url: str
    timestamp: datetime
    safety_score: int = Field(alias="safetyScore", ge=0, le=100)
    status: ScanStatus
    ssl: SSLInfo
    threats: ThreatFlags
    ai_analysis: str = Field(alias="aiAnalysis")
    recommendations: List[str] = Field(default_factory=list)


class Account(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    scan_history: List[SecurityAnalysis] = Field(default_factory=list, alias="scanHistory")


class AccountSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    scan_count: int = Field(alias="scanCount")

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(
            id=account.id,
            email=account.email,
            name=account.name,
            scan_count=len(account.scan_history),
        )


class HistorySummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    safe: int
    warning: int
    dangerous: int
    unknown: int
    average_score: float = Field(alias="averageScore")


class URLScanRequest(BaseModel):
    url: str


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
