import random
import unittest

from linklens.schemas import ScanStatus
from linklens.services.scoring_policy import (
    DANGEROUS_RECOMMENDATIONS,
    MIXED_NARRATIVE,
    SAFE_NARRATIVE,
    classify,
    draw_threats,
    is_allow_listed,
    is_deny_listed,
)


class FixedRandom(random.Random):
    """Random source whose draws are pinned: random() returns ``value`` and
    randint() returns the low or the high bound."""

    def __init__(self, value=0.5, high=False):
        super().__init__(0)
        self.value = value
        self.high = high

    def random(self):
        return self.value

    def randint(self, a, b):
        return b if self.high else a


class TestScoringPolicy(unittest.TestCase):
    def test_allow_and_deny_lists(self):
        self.assertTrue(is_allow_listed("www.google.com"))
        self.assertTrue(is_allow_listed("GitHub.com"))
        self.assertFalse(is_allow_listed("example.org"))
        self.assertTrue(is_deny_listed("login.phishing-example.com"))
        self.assertFalse(is_deny_listed("example.org"))

    def test_allow_listed_host_is_safe(self):
        for high in (False, True):
            verdict = classify("google.com", FixedRandom(high=high))
            self.assertEqual(verdict.status, ScanStatus.SAFE)
            self.assertIn(verdict.score, range(90, 100))
            self.assertEqual(verdict.narrative, SAFE_NARRATIVE)

    def test_deny_listed_host_is_dangerous(self):
        for high in (False, True):
            verdict = classify("malware-test.com", FixedRandom(high=high))
            self.assertEqual(verdict.status, ScanStatus.DANGEROUS)
            self.assertIn(verdict.score, range(10, 40))
            self.assertEqual(verdict.recommendations, DANGEROUS_RECOMMENDATIONS)

    def test_allow_list_checked_before_deny_list(self):
        verdict = classify("google.com.malware-test.com", FixedRandom())
        self.assertEqual(verdict.status, ScanStatus.SAFE)

    def test_unknown_domain_warning_despite_high_score(self):
        verdict = classify("example.org", FixedRandom(value=0.1, high=True))
        self.assertEqual(verdict.status, ScanStatus.WARNING)
        self.assertEqual(verdict.score, 89)
        self.assertEqual(verdict.narrative, MIXED_NARRATIVE)

    def test_unknown_domain_safe_branch(self):
        verdict = classify("example.org", FixedRandom(value=0.9, high=True))
        self.assertEqual(verdict.status, ScanStatus.SAFE)
        self.assertEqual(verdict.score, 89)

    def test_unknown_domain_below_safe_floor_is_warning(self):
        verdict = classify("example.org", FixedRandom(value=0.9))
        self.assertEqual(verdict.score, 50)
        self.assertEqual(verdict.status, ScanStatus.WARNING)

    def test_threats_never_flag_safe_status(self):
        threats = draw_threats(ScanStatus.SAFE, FixedRandom(value=0.0))
        self.assertFalse(threats.phishing)
        self.assertFalse(threats.malware)
        self.assertFalse(threats.suspicious)

    def test_dangerous_threat_draws(self):
        flagged = draw_threats(ScanStatus.DANGEROUS, FixedRandom(value=0.0))
        self.assertTrue(flagged.phishing and flagged.malware and flagged.suspicious)

        # 0.55 is above the phishing threshold but below the malware one
        mixed = draw_threats(ScanStatus.DANGEROUS, FixedRandom(value=0.55))
        self.assertFalse(mixed.phishing)
        self.assertTrue(mixed.malware)
        self.assertFalse(mixed.suspicious)

    def test_warning_only_draws_suspicious(self):
        threats = draw_threats(ScanStatus.WARNING, FixedRandom(value=0.0))
        self.assertFalse(threats.phishing)
        self.assertFalse(threats.malware)
        self.assertTrue(threats.suspicious)

    def test_seeded_classification_respects_invariants(self):
        rng = random.Random(1234)
        for host in ("example.org", "malware-test.com", "wikipedia.org"):
            for _ in range(200):
                verdict = classify(host, rng)
                threats = draw_threats(verdict.status, rng)
                self.assertTrue(0 <= verdict.score <= 100)
                if verdict.status == ScanStatus.DANGEROUS:
                    self.assertLess(verdict.score, 60)
                if threats.phishing or threats.malware:
                    self.assertNotEqual(verdict.status, ScanStatus.SAFE)


if __name__ == "__main__":
    unittest.main()
