"""Tests for the table layout HTTP API."""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fakes import FakeTextMeasurer, make_geometry  # noqa: E402
from web.app import create_app  # noqa: E402
from web.services.layout_service import LayoutService  # noqa: E402


class TestLayoutApi(unittest.TestCase):
    def setUp(self):
        service = LayoutService(
            config={
                "strategy": "weighting",
                "min_percent": 6.5,
                "column_class_prefix": "col",
            },
            engine=FakeTextMeasurer(),
            geometry=make_geometry(100.0),
        )
        self.client = create_app(service).test_client()

    def test_strategies(self):
        response = self.client.get("/api/strategies")
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["strategies"], ["evenly", "minimum", "weighting"])
        self.assertEqual(data["default"], "weighting")

    def test_weighting_layout(self):
        response = self.client.post(
            "/api/layout", json={"header": ["a" * 5, "a" * 5, "a" * 90]}
        )
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["strategy"], "weighting")
        self.assertEqual(data["percentages"], {"0": 6.5, "1": 6.5, "2": 87.0})
        self.assertIn(".col2 { width: 87.00% }", data["css"])
        self.assertTrue(data["report"]["valid"])
        self.assertTrue(data["html"].startswith("<table><thead>"))

    def test_request_overrides_config(self):
        response = self.client.post(
            "/api/layout",
            json={
                "header": ["a", "b"],
                "strategy": "evenly",
                "column_widths": {"0": "25pt"},
                "column_class_prefix": "w",
            },
        )
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["percentages"], {"0": 25.0, "1": 75.0})
        self.assertIn(".w1 { width: 75.00% }", data["css"])

    def test_row_length_mismatch(self):
        response = self.client.post(
            "/api/layout", json={"header": ["a", "b"], "rows": [["1", "2"], ["3"]]}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["row"], 1)

    def test_unknown_strategy(self):
        response = self.client.post(
            "/api/layout", json={"header": ["a"], "strategy": "golden-ratio"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("golden-ratio", response.get_json()["error"])

    def test_wrongly_typed_overrides_are_rejected(self):
        bodies = [
            {"header": ["a"], "strategy": "minimum", "pad_string": 5},
            {"header": ["a", "b"], "strategy": "evenly", "column_widths": 5},
            {"header": ["a"], "min_percent": [1]},
            {"header": ["a"], "min_percent": True},
            {"header": ["a"], "header_classes_on_cells": "yes"},
            {"header": ["a"], "strategy": 3},
        ]
        for body in bodies:
            response = self.client.post("/api/layout", json=body)
            self.assertEqual(response.status_code, 400, msg=repr(body))
            self.assertIn("must", response.get_json()["error"])

    def test_bad_column_width_entry(self):
        response = self.client.post(
            "/api/layout",
            json={"header": ["a", "b"], "strategy": "evenly", "column_widths": [[1], None]},
        )
        self.assertEqual(response.status_code, 400)

    def test_missing_header(self):
        response = self.client.post("/api/layout", json={"rows": []})
        self.assertEqual(response.status_code, 400)

    def test_body_must_be_json_object(self):
        response = self.client.post(
            "/api/layout", data="not json", content_type="text/plain"
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post("/api/layout", json=["a", "b"])
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
