"""
Analysis Engine

Runs a URL through the fixed six-stage pipeline and materializes a
SecurityAnalysis. Certificate and reputation lookups are simulated; every
random draw comes from the engine's single random source.
"""

import asyncio
import inspect
import itertools
import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional, Union
from urllib.parse import urlparse

import validators

from linklens.config import settings
from linklens.exceptions import ValidationError
from linklens.schemas import SSLInfo, SecurityAnalysis
from linklens.services import scoring_policy

logger = logging.getLogger(__name__)


STAGES = [
    "Validating URL format...",
    "Checking SSL certificate...",
    "Scanning with Google Safe Browsing...",
    "Running VirusTotal analysis...",
    "Performing AI pattern analysis...",
    "Generating security report...",
]

SSL_ISSUERS = ("Let's Encrypt", "DigiCert Inc")
SSL_VALID_PROBABILITY = 0.9
SSL_MAX_LIFETIME_DAYS = 365

_id_sequence = itertools.count()


@dataclass(frozen=True)
class StageProgress:
    index: int
    stage: str
    progress: float  # fraction of the pipeline completed, 0 < progress <= 1


ProgressCallback = Callable[[StageProgress], Union[None, Awaitable[None]]]


def normalize_url(raw_url: str, default_scheme: Optional[str] = None) -> str:
    """
    Strip the input and prefix the default scheme when none is present.
    """
    url = (raw_url or "").strip()
    if url and not url.lower().startswith(("http://", "https://")):
        url = f"{default_scheme or settings.default_scheme}://{url}"
    return url


def extract_hostname(url: str) -> str:
    """
    Return the hostname of a normalized URL, raising ValidationError when the
    URL is malformed or has no host component.
    """
    # simple_host admits single-label hosts such as "localhost" or "intranet"
    if not url or not validators.url(url, simple_host=True):
        raise ValidationError(f"Invalid URL format: {url!r}")
    try:
        hostname = urlparse(url).hostname
    except ValueError as exc:
        raise ValidationError(f"Invalid URL format: {url!r}") from exc
    if not hostname:
        raise ValidationError(f"URL has no hostname: {url!r}")
    return hostname


def new_analysis_id() -> str:
    # Millisecond clock keeps ids ordered; the sequence keeps them unique
    return f"{int(time.time() * 1000)}-{next(_id_sequence)}"


class AnalysisEngine:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        stage_delay: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.rng = rng or random.Random(settings.random_seed)
        self.stage_delay = settings.stage_delay_seconds if stage_delay is None else stage_delay
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def analyze(
        self, raw_url: str, on_progress: Optional[ProgressCallback] = None
    ) -> SecurityAnalysis:
        """
        Analyze a URL.

        Validation happens before the first stage, so a rejected URL never
        emits progress. ``on_progress`` is called after each stage completes
        and may be a plain function or a coroutine function.
        """
        url = normalize_url(raw_url)
        hostname = extract_hostname(url)

        for index, stage in enumerate(STAGES):
            logger.debug("Stage %d/%d for %s: %s", index + 1, len(STAGES), url, stage)
            await asyncio.sleep(self.stage_delay)
            if on_progress is not None:
                result = on_progress(StageProgress(index, stage, (index + 1) / len(STAGES)))
                if inspect.isawaitable(result):
                    await result

        analysis = self._build_analysis(url, hostname)
        logger.info(
            "Analyzed %s: status=%s score=%d",
            url,
            analysis.status.value,
            analysis.safety_score,
        )
        return analysis

    def _simulate_ssl(self, now: datetime) -> SSLInfo:
        valid = self.rng.random() < SSL_VALID_PROBABILITY
        issuer = self.rng.choice(SSL_ISSUERS)
        expires = now + timedelta(days=SSL_MAX_LIFETIME_DAYS * self.rng.random())
        return SSLInfo(valid=valid, issuer=issuer, expires=expires)

    def _build_analysis(self, url: str, hostname: str) -> SecurityAnalysis:
        now = self.clock()
        verdict = scoring_policy.classify(hostname, self.rng)
        ssl_info = self._simulate_ssl(now)
        threats = scoring_policy.draw_threats(verdict.status, self.rng)

        return SecurityAnalysis(
            id=new_analysis_id(),
            url=url,
            timestamp=now,
            safety_score=verdict.score,
            status=verdict.status,
            ssl=ssl_info,
            threats=threats,
            ai_analysis=verdict.narrative,
            recommendations=verdict.recommendations,
        )
