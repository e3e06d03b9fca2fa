#!/usr/bin/env python3
"""Table column sizing tool — main entry point.

Reads a table (CSV or JSON), allocates its column widths with one of the
strategies and writes the width CSS, the table HTML and optionally a PDF.

Usage
-----
    python tablefit.py invoice.csv --css invoice.css --html invoice.html
    python tablefit.py invoice.json --strategy minimum --pad-string "aaaa"
    python tablefit.py invoice.csv --strategy evenly --column-width 0=20mm
    python tablefit.py invoice.csv --min-string "Subtotal:" --pdf invoice.pdf
    python tablefit.py --batch tables/ --output-dir out/
"""

import argparse
import glob
import json
import logging
import os
import sys
from typing import Any

from allocators import STRATEGIES, AllocationError, WidthAllocation
from allocators.optimizer import TableOptimizer
from builders.pdf_builder import PdfBuilder
from builders.table_content import TableContent
from utils.table_loader import SUPPORTED_EXTENSIONS, load_table

logger = logging.getLogger("tablefit")

# Path to the default config file shipped alongside this script.
_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config", "settings.json")


# ------------------------------------------------------------------ #
#  Helpers                                                            #
# ------------------------------------------------------------------ #

def _load_config(config_path: str | None = None) -> dict[str, Any]:
    """Load configuration from a JSON file, falling back to defaults."""
    path = config_path or _CONFIG_PATH
    defaults: dict[str, Any] = {
        "font_family": "helv",
        "font_style": "",
        "font_size": "10pt",
        "min_percent": 6.5,
        "min_string": None,
        "column_class_prefix": "col",
        "header_classes_on_cells": False,
        "strict": False,
        "strategy": "weighting",
        "table_width": "100%",
        "pad_string": "aaa",
        "column_widths": None,
        "page": {
            "size": "a4",
            "orientation": "portrait",
            "margins": {"left": "15mm", "right": "15mm", "top": "15mm", "bottom": "15mm"},
        },
    }
    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as fh:
                user = json.load(fh)
        except (OSError, ValueError):
            logger.warning("Could not load config from '%s'; using defaults.", path)
        else:
            if isinstance(user, dict):
                defaults.update(user)
            else:
                logger.warning(
                    "Config file '%s' must hold a JSON object; using defaults.", path
                )
    elif config_path:
        logger.warning("Config file '%s' not found; using defaults.", path)
    return defaults


def _parse_column_widths(values: list[str] | None) -> dict[int, str] | None:
    """Parse ``INDEX=LENGTH`` pairs from the command line."""
    if not values:
        return None
    widths: dict[int, str] = {}
    for item in values:
        index, sep, length = item.partition("=")
        if not sep or not index.strip().isdigit() or not length.strip():
            raise ValueError(f"Invalid --column-width '{item}'. Use INDEX=LENGTH, e.g. 1=10mm.")
        widths[int(index)] = length.strip()
    return widths


# ------------------------------------------------------------------ #
#  Core pipeline                                                      #
# ------------------------------------------------------------------ #

def size_table(
    content: TableContent,
    config: dict[str, Any],
    engine: Any = None,
    geometry: Any = None,
) -> tuple[TableOptimizer, WidthAllocation]:
    """Allocate column widths for *content* according to *config*.

    Returns the optimizer (holding the content, for rendering) and the
    allocation.
    """
    optimizer = TableOptimizer.from_config(config, engine=engine, geometry=geometry)
    optimizer.content = content

    table_width = config.get("table_width", "100%")
    if config.get("min_string"):
        optimizer.set_minimum_percentage_based_on_string(config["min_string"], table_width)

    allocation = optimizer.determine_column_widths(
        config.get("strategy", "weighting"),
        table_width=table_width,
        column_widths=config.get("column_widths"),
        pad_string=config.get("pad_string", "aaa"),
    )
    logger.info(
        "Sized %d columns with '%s': %s",
        content.column_count,
        allocation.strategy,
        ", ".join(f"{pct:.2f}%" for pct in allocation.percentages().values()),
    )
    return optimizer, allocation


def convert_table(
    input_path: str,
    config: dict[str, Any],
    css_path: str | None = None,
    html_path: str | None = None,
    pdf_path: str | None = None,
) -> WidthAllocation:
    """Run the full pipeline for one table file.

    Without *css_path* and *html_path* the combined ``<style>`` block and
    table markup are printed to stdout.
    """
    content = load_table(input_path)
    optimizer, allocation = size_table(content, config)
    html = optimizer.render_html()

    if css_path:
        with open(css_path, "w", encoding="utf-8") as fh:
            fh.write(allocation.css)
        logger.info("Wrote CSS to '%s'", css_path)
    if html_path:
        with open(html_path, "w", encoding="utf-8") as fh:
            fh.write(html)
        logger.info("Wrote HTML to '%s'", html_path)
    if not css_path and not html_path:
        print(optimizer.render(allocation), flush=True)

    if pdf_path:
        PdfBuilder(optimizer.geometry, optimizer.measurer.font_size).build(
            html, allocation.css, pdf_path
        )

    if not allocation.is_balanced:
        logger.warning("'%s': %s", input_path, allocation.report["summary"])
    return allocation


# ------------------------------------------------------------------ #
#  Batch conversion                                                   #
# ------------------------------------------------------------------ #

def convert_batch(input_dir: str, output_dir: str, config: dict[str, Any]) -> int:
    """Size every table file in *input_dir*; returns the number of failures."""
    table_files = sorted(
        path
        for ext in SUPPORTED_EXTENSIONS
        for path in glob.glob(os.path.join(input_dir, f"*{ext}"))
    )
    if not table_files:
        logger.error("No table files found in '%s'.", input_dir)
        return 1

    os.makedirs(output_dir, exist_ok=True)
    total = len(table_files)
    failures = 0
    print(f"Batch sizing {total} table(s)…")

    for i, path in enumerate(table_files, 1):
        base = os.path.splitext(os.path.basename(path))[0]
        print(f"[{i}/{total}] {os.path.basename(path)}")
        try:
            convert_table(
                path,
                config,
                css_path=os.path.join(output_dir, f"{base}.css"),
                html_path=os.path.join(output_dir, f"{base}.html"),
            )
        except (AllocationError, ValueError, OSError) as exc:
            failures += 1
            logger.error("Skipping '%s': %s", path, exc)

    print(f"\nBatch complete — {total - failures}/{total} table(s) sized → {output_dir}")
    return failures


# ------------------------------------------------------------------ #
#  CLI entry point                                                    #
# ------------------------------------------------------------------ #

def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the sizing."""
    parser = argparse.ArgumentParser(
        prog="tablefit",
        description="Compute relative column widths for HTML tables rendered to PDF.",
    )

    parser.add_argument("input", nargs="?", help="Input table file (.csv or .json).")

    parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        default=None,
        help="Width allocation strategy (default from config: weighting).",
    )
    parser.add_argument(
        "--table-width",
        default=None,
        help="Table width as a CSS length relative to the printable page width (e.g. 100%%).",
    )
    parser.add_argument(
        "--column-width",
        action="append",
        metavar="INDEX=LENGTH",
        help="Fixed width for a column (evenly strategy). Repeatable.",
    )
    parser.add_argument(
        "--pad-string",
        default=None,
        help="Padding string added to every sample (minimum strategy).",
    )
    parser.add_argument(
        "--min-percent",
        type=float,
        default=None,
        help="Minimum column width in percent (weighting strategy).",
    )
    parser.add_argument(
        "--min-string",
        default=None,
        help="Derive the minimum column width from the width of this text.",
    )
    parser.add_argument(
        "--font-family",
        default=None,
        help="Font family or font file path used for measurement.",
    )
    parser.add_argument(
        "--font-size",
        default=None,
        help="Font size as a CSS length (e.g. 10pt).",
    )
    parser.add_argument(
        "--header-classes-on-cells",
        action="store_true",
        help="Copy header cell classes onto the body cells of each column.",
    )
    parser.add_argument("--css", default=None, help="Write the width CSS to this file.")
    parser.add_argument("--html", default=None, help="Write the table HTML to this file.")
    parser.add_argument("--pdf", default=None, help="Render the sized table to this PDF file.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when the widths do not add up to 100%%.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a custom configuration JSON file.",
    )
    parser.add_argument(
        "--batch",
        type=str,
        default=None,
        help="Directory containing table files for batch sizing.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for batch results.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging.",
    )

    args = parser.parse_args(argv)

    # ── Logging ──────────────────────────────────────────────────────
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    # ── Config ───────────────────────────────────────────────────────
    config = _load_config(args.config)
    overrides = {
        "strategy": args.strategy,
        "table_width": args.table_width,
        "pad_string": args.pad_string,
        "min_percent": args.min_percent,
        "min_string": args.min_string,
        "font_family": args.font_family,
        "font_size": args.font_size,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    if args.header_classes_on_cells:
        config["header_classes_on_cells"] = True
    if args.strict:
        config["strict"] = True

    try:
        column_widths = _parse_column_widths(args.column_width)
    except ValueError as exc:
        parser.error(str(exc))
    if column_widths:
        config["column_widths"] = column_widths

    # ── Batch mode ───────────────────────────────────────────────────
    if args.batch:
        out_dir = args.output_dir or os.path.join(args.batch, "tablefit_output")
        return 1 if convert_batch(args.batch, out_dir, config) else 0

    if not args.input:
        parser.error("an input table file is required (or use --batch)")
    if not os.path.isfile(args.input):
        logger.error("Input file not found: '%s'", args.input)
        return 1

    try:
        convert_table(args.input, config, css_path=args.css, html_path=args.html, pdf_path=args.pdf)
    except (AllocationError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
