import asyncio
import json
import random
import unittest

from fastapi.testclient import TestClient

from linklens.dependencies import get_account_store, get_analysis_engine
from linklens.main import app
from linklens.routers import url_scanner
from linklens.services.account_backend import MemoryAccountBackend
from linklens.services.account_store import AccountStore
from linklens.services.analysis_engine import AnalysisEngine


class TestApi(unittest.TestCase):
    def setUp(self):
        self.store = AccountStore(MemoryAccountBackend())
        self.engine = AnalysisEngine(rng=random.Random(42), stage_delay=0)
        app.dependency_overrides[get_account_store] = lambda: self.store
        app.dependency_overrides[get_analysis_engine] = lambda: self.engine
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def register(self, email="a@b.com", password="secret1", name="A"):
        return self.client.post("/auth/register", json={"email": email, "password": password, "name": name})

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_scan_anonymous_returns_analysis(self):
        resp = self.client.post("/scan/url", json={"url": "google.com"})
        self.assertEqual(resp.status_code, 200)

        data = resp.json()
        self.assertEqual(data["url"], "https://google.com")
        self.assertEqual(data["status"], "safe")
        self.assertTrue(90 <= data["safetyScore"] <= 99)
        self.assertIn("aiAnalysis", data)
        self.assertEqual(self.store.accounts, [])

    def test_scan_invalid_url(self):
        resp = self.client.post("/scan/url", json={"url": "https://"})
        self.assertEqual(resp.status_code, 422)

    def test_scan_rejected_while_another_runs(self):
        asyncio.run(url_scanner._analysis_lock.acquire())
        try:
            resp = self.client.post("/scan/url", json={"url": "google.com"})
        finally:
            url_scanner._analysis_lock.release()
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json(), {"detail": "Another analysis is already running"})

    def test_register_login_logout(self):
        resp = self.register()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["scanCount"], 0)

        self.assertEqual(self.register().status_code, 409)
        self.assertEqual(self.register(email="x@y.com", password="short").status_code, 400)

        self.assertEqual(self.client.post("/auth/logout").json(), {"status": "signed_out"})
        self.assertEqual(self.client.get("/auth/me").status_code, 401)

        resp = self.client.post("/auth/login", json={"email": "a@b.com", "password": "anything"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/auth/me").json()["email"], "a@b.com")

    def test_scans_recorded_and_queried(self):
        self.register()
        for url in ("google.com", "malware-test.com", "github.com"):
            self.assertEqual(self.client.post("/scan/url", json={"url": url}).status_code, 200)

        history = self.client.get("/history/").json()
        self.assertEqual(len(history), 3)

        dangerous = self.client.get("/history/", params={"status": "dangerous"}).json()
        self.assertEqual([scan["url"] for scan in dangerous], ["https://malware-test.com"])

        by_url = self.client.get("/history/", params={"sort": "url"}).json()
        self.assertEqual(by_url[0]["url"], "https://github.com")

        searched = self.client.get("/history/", params={"q": "GOOGLE"}).json()
        self.assertEqual(len(searched), 1)

        summary = self.client.get("/history/summary").json()
        self.assertEqual(summary["total"], 3)
        self.assertEqual(summary["dangerous"], 1)

    def test_history_requires_sign_in(self):
        self.assertEqual(self.client.get("/history/").status_code, 401)

    def test_bad_history_options_rejected(self):
        self.register()
        self.assertEqual(self.client.get("/history/", params={"sort": "name"}).status_code, 422)

    def test_export_analysis(self):
        self.register()
        scan = self.client.post("/scan/url", json={"url": "example.org"}).json()

        self.assertEqual(self.client.get(f"/history/{scan['id']}").json()["id"], scan["id"])

        resp = self.client.get(f"/history/{scan['id']}/export")
        self.assertEqual(resp.status_code, 200)
        self.assertRegex(
            resp.headers["content-disposition"],
            r"attachment; filename=linklens-report-\d+\.json",
        )
        report = json.loads(resp.text)
        self.assertEqual(report["url"], "https://example.org")
        self.assertNotIn("id", report)

        self.assertEqual(self.client.get("/history/missing/export").status_code, 404)


if __name__ == "__main__":
    unittest.main()
