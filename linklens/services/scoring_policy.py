"""
Scoring Policy

Maps a hostname onto a safety score, status, narrative and recommendations.
Classification is deterministic (allow-list, deny-list, unknown domain); the
score inside each branch and the threat flags are drawn from the random
source passed in, so callers control every draw.
"""

import random
from dataclasses import dataclass, field
from typing import List

from linklens.schemas import ScanStatus, ThreatFlags


# Well-known domains that short-circuit to a safe verdict
ALLOW_LIST = [
    "google.com",
    "github.com",
    "stackoverflow.com",
    "wikipedia.org",
]

# Known-bad hostname fragments
DENY_LIST = [
    "suspicious-site.com",
    "malware-test.com",
    "phishing-example.com",
]

SAFE_SCORE_RANGE = (90, 99)
DANGEROUS_SCORE_RANGE = (10, 39)
UNKNOWN_SCORE_RANGE = (50, 89)
# Lowest score that may carry a "safe" status
SAFE_SCORE_FLOOR = 60

# Probability that an unknown domain is flagged "warning" despite its score
UNKNOWN_WARNING_PROBABILITY = 0.3
PHISHING_PROBABILITY = 0.5
MALWARE_PROBABILITY = 0.6
SUSPICIOUS_PROBABILITY = 0.4

SAFE_NARRATIVE = (
    "This website appears to be legitimate and safe to visit. Our AI analysis found "
    "no suspicious patterns or security concerns. The domain has a strong reputation "
    "and uses proper security measures."
)
DANGEROUS_NARRATIVE = (
    "WARNING: This website shows multiple red flags including suspicious URL patterns, "
    "potential phishing indicators, and malware signatures. Our AI detected patterns "
    "commonly associated with malicious websites."
)
MIXED_NARRATIVE = (
    "This website appears to have mixed security indicators. While not definitively "
    "malicious, some caution is advised. Our AI detected minor inconsistencies that "
    "warrant attention."
)
LEGITIMATE_NARRATIVE = (
    "This website appears to be legitimate with good security practices. Our "
    "comprehensive analysis found no significant security concerns."
)

SAFE_RECOMMENDATIONS = [
    "Website is safe to visit",
    "SSL certificate is valid and up-to-date",
    "No malicious activity detected",
    "Domain has good reputation",
]
DANGEROUS_RECOMMENDATIONS = [
    "Do not visit this website",
    "Block this domain in your browser",
    "Report as malicious if encountered",
    "Scan your device if you visited this site",
]
MIXED_RECOMMENDATIONS = [
    "Proceed with caution",
    "Verify website authenticity before entering personal information",
    "Use updated antivirus software",
    "Check URL spelling carefully",
]
LEGITIMATE_RECOMMENDATIONS = [
    "Website appears safe to visit",
    "SSL certificate is properly configured",
    "No suspicious activity detected",
    "Standard security precautions recommended",
]


@dataclass(frozen=True)
class Verdict:
    score: int
    status: ScanStatus
    narrative: str
    recommendations: List[str] = field(default_factory=list)


def is_allow_listed(hostname: str) -> bool:
    host = hostname.lower()
    return any(domain in host for domain in ALLOW_LIST)


def is_deny_listed(hostname: str) -> bool:
    host = hostname.lower()
    return any(fragment in host for fragment in DENY_LIST)


def classify(hostname: str, rng: random.Random) -> Verdict:
    """
    Classify a hostname.

    Allow-list wins over deny-list. Unknown domains are marked ``warning``
    part of the time even when the score is in the safe range; status is
    therefore not a pure function of the score on that branch. Unknown
    domains scoring below the safe floor are always ``warning``.
    """
    if is_allow_listed(hostname):
        return Verdict(
            score=rng.randint(*SAFE_SCORE_RANGE),
            status=ScanStatus.SAFE,
            narrative=SAFE_NARRATIVE,
            recommendations=list(SAFE_RECOMMENDATIONS),
        )

    if is_deny_listed(hostname):
        return Verdict(
            score=rng.randint(*DANGEROUS_SCORE_RANGE),
            status=ScanStatus.DANGEROUS,
            narrative=DANGEROUS_NARRATIVE,
            recommendations=list(DANGEROUS_RECOMMENDATIONS),
        )

    score = rng.randint(*UNKNOWN_SCORE_RANGE)
    mixed_signals = rng.random() < UNKNOWN_WARNING_PROBABILITY
    if mixed_signals or score < SAFE_SCORE_FLOOR:
        return Verdict(
            score=score,
            status=ScanStatus.WARNING,
            narrative=MIXED_NARRATIVE,
            recommendations=list(MIXED_RECOMMENDATIONS),
        )
    return Verdict(
        score=score,
        status=ScanStatus.SAFE,
        narrative=LEGITIMATE_NARRATIVE,
        recommendations=list(LEGITIMATE_RECOMMENDATIONS),
    )


def draw_threats(status: ScanStatus, rng: random.Random) -> ThreatFlags:
    # Phishing and malware only ever accompany a dangerous verdict
    phishing = False
    malware = False
    suspicious = False
    if status == ScanStatus.DANGEROUS:
        phishing = rng.random() < PHISHING_PROBABILITY
        malware = rng.random() < MALWARE_PROBABILITY
    if status != ScanStatus.SAFE:
        suspicious = rng.random() < SUSPICIOUS_PROBABILITY
    return ThreatFlags(phishing=phishing, malware=malware, suspicious=suspicious)
