"""Tests for lenient catalog payload parsing."""

import sys
import unittest
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ApiCatalog.catalog.parser import parse_api, parse_deployment, parse_page, parse_server


class TestParsePage(unittest.TestCase):
    def test_envelope_with_next_link(self) -> None:
        page = parse_page(
            {"value": [{"name": "a"}, "junk", {"name": "b"}], "nextLink": "https://x/next"},
            parse_api,
        )
        self.assertEqual([api.name for api in page.items], ["a", "b"])
        self.assertEqual(page.next_link, "https://x/next")
        self.assertFalse(page.is_last)

    def test_next_link_is_kept_verbatim(self) -> None:
        link = " https://x/apis?$skipToken=a%20b "
        self.assertEqual(parse_page({"value": [], "nextLink": link}, parse_api).next_link, link)
        for bad in ("", 42, None):
            self.assertIsNone(parse_page({"value": [], "nextLink": bad}, parse_api).next_link)

    def test_missing_value_is_empty_last_page(self) -> None:
        for payload in (None, {}, {"value": None}, {"value": "oops"}, []):
            page = parse_page(payload, parse_api)
            self.assertEqual(page.items, ())
            self.assertTrue(page.is_last)


class TestParseRecords(unittest.TestCase):
    def test_api_fields_and_extra(self) -> None:
        api = parse_api(
            {
                "name": "petstore",
                "title": " Pet Store ",
                "kind": "rest",
                "lifecycleStage": "production",
                "lastUpdated": "2024-05-01T10:00:00Z",
                "contacts": [{"name": "team"}, 3],
                "x-owner": "platform",
            }
        )
        self.assertEqual(api.title, "Pet Store")
        self.assertEqual(api.lifecycle_stage, "production")
        self.assertEqual(api.last_updated.utcoffset(), timedelta(0))
        self.assertEqual(api.contacts, ({"name": "team"},))
        self.assertEqual(dict(api.extra), {"x-owner": "platform"})

    def test_wrong_types_degrade(self) -> None:
        api = parse_api({"name": 5, "title": None, "lastUpdated": "not a date", "customProperties": []})
        self.assertEqual(api.name, "")
        self.assertEqual(api.title, "")
        self.assertIsNone(api.last_updated)
        self.assertEqual(api.custom_properties, {})

    def test_deployment_host(self) -> None:
        deployment = parse_deployment(
            {"name": "prod", "server": {"runtimeUri": ["https://pets.example.com", "https://b"]}, "recommended": True}
        )
        self.assertEqual(deployment.host, "https://pets.example.com")
        self.assertTrue(deployment.recommended)
        self.assertIsNone(parse_deployment({"name": "bare"}).host)

    def test_server_envelope(self) -> None:
        server = parse_server(
            {
                "server": {
                    "name": "io.example/weather",
                    "packages": [{"registryType": "npm", "identifier": "weather", "version": "1.0.0"}],
                    "remotes": [{"transport_type": "sse", "url": "https://w.example.com/sse"}],
                },
                "_meta": {},
            }
        )
        self.assertEqual(server.name, "io.example/weather")
        self.assertEqual(server.packages[0].identifier, "weather")
        self.assertEqual(server.remotes[0].transport_type, "sse")
        self.assertIsNone(parse_server({"_meta": {}}))


if __name__ == "__main__":
    unittest.main()
