"""Tests for table loading, the pipeline helpers and the CLI."""

import json
import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import fitz  # noqa: E402

import tablefit  # noqa: E402
from builders.table_content import Cell  # noqa: E402
from fakes import FakeTextMeasurer, make_geometry  # noqa: E402
from utils.table_loader import load_table, table_from_dict  # noqa: E402


class TempDirTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write(self, name, text):
        path = os.path.join(self.temp_dir, name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
        return path


class TestTableLoader(TempDirTestCase):
    def test_csv(self):
        path = self.write("t.csv", "Item,Amount\nConsulting,\"1,250.00\"\nTravel,80.00\n")
        content = load_table(path)
        self.assertEqual(content.column_count, 2)
        self.assertEqual(content.rows[0][1], Cell("1,250.00"))

    def test_json_with_classes(self):
        path = self.write(
            "t.json",
            json.dumps(
                {
                    "header": ["Item", {"content": "Amount", "class": "num"}],
                    "rows": [["Consulting", {"content": "1.00", "class": "money"}]],
                }
            ),
        )
        content = load_table(path)
        self.assertEqual(content.header[1], Cell("Amount", "num"))
        self.assertEqual(content.rows[0][1], Cell("1.00", "money"))

    def test_unsupported_extension(self):
        with self.assertRaises(ValueError):
            load_table(self.write("t.txt", "a"))

    def test_empty_csv(self):
        with self.assertRaises(ValueError):
            load_table(self.write("t.csv", ""))

    def test_bad_structures(self):
        for data in ([], {"rows": []}, {"header": []}, {"header": ["a"], "rows": ["x"]}):
            with self.assertRaises(ValueError, msg=repr(data)):
                table_from_dict(data)


class TestLoadConfig(TempDirTestCase):
    def test_defaults_updated_from_file(self):
        path = self.write("settings.json", json.dumps({"strategy": "minimum", "min_percent": 3}))
        config = tablefit._load_config(path)
        self.assertEqual(config["strategy"], "minimum")
        self.assertEqual(config["min_percent"], 3)
        self.assertEqual(config["column_class_prefix"], "col")

    def test_unreadable_file_falls_back(self):
        path = self.write("settings.json", "{not json")
        with self.assertLogs("tablefit", level="WARNING"):
            config = tablefit._load_config(path)
        self.assertEqual(config["strategy"], "weighting")

    def test_non_object_file_falls_back(self):
        for text in ("[1, 2]", "3", '"weighting"'):
            path = self.write("settings.json", text)
            with self.assertLogs("tablefit", level="WARNING"):
                config = tablefit._load_config(path)
            self.assertEqual(config["strategy"], "weighting")

    def test_shipped_settings(self):
        config = tablefit._load_config()
        self.assertEqual(config["font_family"], "helv")
        self.assertEqual(config["page"]["size"], "a4")


class TestSizeTable(unittest.TestCase):
    def test_min_string_sets_floor(self):
        content = table_from_dict({"header": ["a" * 5, "a" * 5, "a" * 90]})
        config = {"strategy": "weighting", "min_string": "a" * 10}
        optimizer, allocation = tablefit.size_table(
            content, config, engine=FakeTextMeasurer(), geometry=make_geometry()
        )
        self.assertAlmostEqual(optimizer.min_percent, 10.0)
        self.assertEqual(allocation.percentages(), {0: 10.0, 1: 10.0, 2: 80.0})

    def test_column_widths_from_config(self):
        content = table_from_dict({"header": ["a", "b"]})
        config = {"strategy": "evenly", "column_widths": {"1": "20pt"}}
        _, allocation = tablefit.size_table(
            content, config, engine=FakeTextMeasurer(), geometry=make_geometry()
        )
        self.assertEqual(allocation.percentages(), {0: 80.0, 1: 20.0})


class TestCli(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.csv_path = self.write(
            "invoice.csv",
            "Item,Description,Amount\n"
            "Consulting,Architecture review and recommendations,\"1,250.00\"\n"
            "Travel,Train,80.00\n",
        )

    def test_evenly_writes_css_and_html(self):
        css_path = os.path.join(self.temp_dir, "out.css")
        html_path = os.path.join(self.temp_dir, "out.html")
        code = tablefit.main(
            [self.csv_path, "--strategy", "evenly", "--css", css_path, "--html", html_path]
        )
        self.assertEqual(code, 0)
        with open(css_path, encoding="utf-8") as fh:
            self.assertEqual(
                fh.read().splitlines(),
                [
                    ".col0 { width: 33.33% }",
                    ".col1 { width: 33.33% }",
                    ".col2 { width: 33.33% }",
                ],
            )
        with open(html_path, encoding="utf-8") as fh:
            self.assertIn('<td class="col1">Train</td>', fh.read())

    def test_fixed_column_width(self):
        css_path = os.path.join(self.temp_dir, "out.css")
        code = tablefit.main(
            [
                self.csv_path, "--strategy", "evenly",
                "--column-width", "2=25%", "--css", css_path,
            ]
        )
        self.assertEqual(code, 0)
        with open(css_path, encoding="utf-8") as fh:
            self.assertIn(".col2 { width: 25.00% }", fh.read())

    def test_weighting_with_real_font_metrics(self):
        css_path = os.path.join(self.temp_dir, "out.css")
        self.assertEqual(tablefit.main([self.csv_path, "--css", css_path]), 0)
        with open(css_path, encoding="utf-8") as fh:
            lines = fh.read().splitlines()
        percents = [float(line.split("width: ")[1].rstrip("% }")) for line in lines]
        self.assertEqual(len(percents), 3)
        self.assertAlmostEqual(sum(percents), 100.0, delta=0.02)
        self.assertEqual(max(percents), percents[1])

    def test_pdf_output(self):
        pdf_path = os.path.join(self.temp_dir, "out.pdf")
        css_path = os.path.join(self.temp_dir, "out.css")
        code = tablefit.main(
            [self.csv_path, "--strategy", "minimum", "--css", css_path, "--pdf", pdf_path]
        )
        self.assertEqual(code, 0)
        with fitz.open(pdf_path) as doc:
            self.assertGreaterEqual(doc.page_count, 1)
            self.assertIn("Consulting", doc[0].get_text())

    def test_row_length_mismatch_fails(self):
        bad = self.write("bad.csv", "a,b\n1\n")
        self.assertEqual(tablefit.main([bad, "--css", os.path.join(self.temp_dir, "x.css")]), 1)

    def test_strict_unbalanced_fails(self):
        empty = self.write("empty.csv", ",,\n,,\n")
        css_path = os.path.join(self.temp_dir, "x.css")
        self.assertEqual(tablefit.main([empty, "--css", css_path]), 0)
        self.assertEqual(tablefit.main([empty, "--strict", "--css", css_path]), 1)

    def test_missing_input(self):
        self.assertEqual(tablefit.main([os.path.join(self.temp_dir, "nope.csv")]), 1)

    def test_bad_column_width_argument(self):
        with self.assertRaises(SystemExit):
            tablefit.main([self.csv_path, "--column-width", "first=10mm"])

    def test_batch(self):
        self.write("second.json", json.dumps({"header": ["x", "y"], "rows": [["1", "2"]]}))
        self.write("broken.csv", "a,b\n1\n")
        out_dir = os.path.join(self.temp_dir, "out")
        code = tablefit.main(["--batch", self.temp_dir, "--output-dir", out_dir])
        self.assertEqual(code, 1)
        produced = sorted(os.listdir(out_dir))
        self.assertEqual(
            produced, ["invoice.css", "invoice.html", "second.css", "second.html"]
        )


if __name__ == "__main__":
    unittest.main()
