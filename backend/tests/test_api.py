import os
import tempfile
import unittest

import structlog
from fastapi.testclient import TestClient

from crisis_updates.core.config import Settings
from crisis_updates.main import create_app
from crisis_updates.services.crisis_store import CrisisUpdateStore

BASE = "/api/v1/crisis-updates"

FLOOD = {"title": "Flood", "description": "Rising waters", "location": "Riverdale"}
LANDSLIDE = {"title": "Landslide", "description": "Road blocked", "location": "Hilltop"}


class TestCrisisUpdatesApi(unittest.TestCase):

    def setUp(self):
        self.store = CrisisUpdateStore()
        self.app = create_app(settings=Settings(), store=self.store)
        self.client = TestClient(self.app)
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")
        self.assertEqual(resp.json()["records"], 0)

    def test_create_returns_201_with_record(self):
        resp = self.client.post(f"{BASE}/", json=FLOOD)
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["id"], 1)
        self.assertEqual(data["title"], "Flood")
        self.assertGreater(data["timestamp"], 0)
        self.assertEqual(len(self.store), 1)

    def test_create_rejects_missing_field(self):
        resp = self.client.post(f"{BASE}/", json={"title": "Flood", "location": "Riverdale"})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["detail"], "Validation error")

    def test_create_rejects_caller_supplied_id(self):
        resp = self.client.post(f"{BASE}/", json=dict(FLOOD, id=50, timestamp=1))
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(len(self.store), 0)

    def test_get_and_not_found(self):
        created = self.client.post(f"{BASE}/", json=FLOOD).json()
        resp = self.client.get(f"{BASE}/{created['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), created)

        resp = self.client.get(f"{BASE}/999")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("id=999", resp.json()["detail"])

    def test_invalid_ids_rejected(self):
        self.assertEqual(self.client.get(f"{BASE}/-1").status_code, 422)
        self.assertEqual(self.client.get(f"{BASE}/{2**64}").status_code, 422)
        self.assertEqual(self.client.get(f"{BASE}/abc").status_code, 422)

    def test_latest_is_null_when_empty(self):
        resp = self.client.get(f"{BASE}/latest")
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json())

    def test_full_lifecycle(self):
        self.client.post(f"{BASE}/", json=FLOOD)
        hilltop = self.client.post(f"{BASE}/", json=LANDSLIDE).json()
        self.assertEqual(hilltop["id"], 2)

        self.assertEqual(self.client.get(f"{BASE}/latest").json()["id"], 2)

        found = self.client.get(f"{BASE}/", params={"location": "Riverdale"}).json()
        self.assertEqual([r["id"] for r in found], [1])
        self.assertEqual(self.client.get(f"{BASE}/", params={"location": "riverdale"}).json(), [])

        deleted = self.client.delete(f"{BASE}/1")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json()["title"], "Flood")
        self.assertEqual(self.client.get(f"{BASE}/1").status_code, 404)
        self.assertEqual(self.client.delete(f"{BASE}/1").status_code, 404)

        update = {"title": "Flood Update", "description": "Waters receding", "location": "Hilltop"}
        resp = self.client.put(f"{BASE}/2", json=update)
        self.assertEqual(resp.status_code, 200)
        updated = resp.json()
        self.assertEqual(updated["id"], 2)
        self.assertEqual(updated["title"], "Flood Update")
        self.assertGreaterEqual(updated["timestamp"], hilltop["timestamp"])

        self.assertEqual(self.client.get(f"{BASE}/").json(), [updated])

    def test_update_missing_is_404(self):
        resp = self.client.put(f"{BASE}/3", json=FLOOD)
        self.assertEqual(resp.status_code, 404)
        self.assertIn("id=3", resp.json()["detail"])

    def test_range_endpoints(self):
        created = [self.client.post(f"{BASE}/", json=FLOOD).json() for _ in range(3)]
        first_ts, last_ts = created[0]["timestamp"], created[-1]["timestamp"]

        in_range = self.client.get(f"{BASE}/range", params={"start": first_ts, "end": last_ts}).json()
        self.assertEqual([r["id"] for r in in_range], [1, 2, 3])

        before = self.client.get(f"{BASE}/before", params={"end": first_ts}).json()
        self.assertEqual(before, [])

        after = self.client.get(f"{BASE}/after", params={"start": 0}).json()
        self.assertEqual(len(after), 3)

        by_id = self.client.get(f"{BASE}/by-id", params={"start_id": 2, "end_id": 10}).json()
        self.assertEqual([r["id"] for r in by_id], [2, 3])

    def test_inverted_ranges_rejected(self):
        resp = self.client.get(f"{BASE}/range", params={"start": 10, "end": 1})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.get(f"{BASE}/by-id", params={"start_id": 5, "end_id": 2})
        self.assertEqual(resp.status_code, 422)

    def test_each_app_owns_its_store(self):
        self.client.post(f"{BASE}/", json=FLOOD)
        with TestClient(create_app(settings=Settings())) as other:
            self.assertEqual(other.get(f"{BASE}/").json(), [])
            self.assertEqual(other.post(f"{BASE}/", json=FLOOD).json()["id"], 1)


class TestSnapshotPersistence(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self.tmpdir.name, "crisis.db")
        self.settings = Settings(
            PERSISTENCE_ENABLED=True,
            DATABASE_URL=f"sqlite+aiosqlite:///{db_path}",
        )

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_store_survives_restart(self):
        with TestClient(create_app(settings=self.settings)) as client:
            client.post(f"{BASE}/", json=FLOOD)
            client.post(f"{BASE}/", json=LANDSLIDE)
            client.delete(f"{BASE}/2")

        with TestClient(create_app(settings=self.settings)) as client:
            records = client.get(f"{BASE}/").json()
            self.assertEqual([r["id"] for r in records], [1])
            self.assertEqual(records[0]["location"], "Riverdale")
            # Deleted id 2 is never issued again
            self.assertEqual(client.post(f"{BASE}/", json=LANDSLIDE).json()["id"], 3)


class TestLoggingSetup(unittest.TestCase):

    def tearDown(self):
        create_app(settings=Settings())

    def test_production_app_renders_json(self):
        create_app(settings=Settings(ENVIRONMENT="production"))
        processors = structlog.get_config()["processors"]
        self.assertTrue(any(isinstance(p, structlog.processors.JSONRenderer) for p in processors))

    def test_development_app_renders_console(self):
        create_app(settings=Settings(ENVIRONMENT="development"))
        config = structlog.get_config()
        self.assertTrue(any(isinstance(p, structlog.dev.ConsoleRenderer) for p in config["processors"]))
        self.assertFalse(config["cache_logger_on_first_use"])


if __name__ == "__main__":
    unittest.main()
