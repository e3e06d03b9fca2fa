"""Allocation validation module.

Checks a column width allocation for the properties the CSS relies on:
one fraction per column, no negative widths, and a total of 100% of the
table span.
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Fractions must sum to 1 within this tolerance.
SUM_TOLERANCE = 1e-6
# Columns narrower than this fraction are reported as warnings.
NARROW_COLUMN_FRACTION = 0.01


class AllocationValidator:
    """Validates width-fraction maps produced by the allocators."""

    def __init__(self, tolerance: float = SUM_TOLERANCE) -> None:
        self.tolerance = tolerance

    def validate(
        self,
        fractions: Dict[int, float],
        column_count: Optional[int] = None,
        notes: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Validate a fraction map and return a report.

        Args:
            fractions: Column index → fraction of the table span.
            column_count: Expected number of columns, if known.
            notes: Strategy diagnostics, copied into the warnings.

        Returns:
            A report dict with the following keys:
                - ``valid`` (bool): No issues were found.
                - ``total`` (float): Sum of all fractions.
                - ``overflow`` (bool): The total exceeds 100%.
                - ``issues`` (list[str]): Problems that make the CSS wrong.
                - ``warnings`` (list[str]): Non-fatal observations.
                - ``summary`` (str): Human-readable one-line summary.
        """
        issues: List[str] = []
        warnings: List[str] = list(notes or [])
        total = sum(fractions.values())

        report: Dict[str, Any] = {
            "valid": False,
            "total": total,
            "overflow": total > 1.0 + self.tolerance,
            "issues": issues,
            "warnings": warnings,
            "summary": "",
        }

        # 1. Column coverage ------------------------------------------------
        if column_count is not None:
            missing = sorted(set(range(column_count)) - set(fractions))
            for column in missing:
                issues.append(f"Column {column} has no width.")

        # 2. Sign and size --------------------------------------------------
        for column, fraction in sorted(fractions.items()):
            if fraction < 0:
                issues.append(
                    f"Column {column} has a negative width ({fraction * 100:.2f}%)."
                )
            elif fraction < NARROW_COLUMN_FRACTION:
                warnings.append(
                    f"Column {column} is narrower than "
                    f"{NARROW_COLUMN_FRACTION * 100:g}% ({fraction * 100:.2f}%)."
                )

        # 3. Total ----------------------------------------------------------
        if abs(total - 1.0) > self.tolerance:
            issues.append(
                f"Column widths add up to {total * 100:.4f}% instead of 100%."
            )

        report["valid"] = len(issues) == 0
        report["summary"] = self._build_summary(report)

        log_fn = logger.debug if report["valid"] else logger.warning
        log_fn("Allocation check: %s", report["summary"])
        return report

    @staticmethod
    def _build_summary(report: Dict[str, Any]) -> str:
        issues = report["issues"]
        warnings = report["warnings"]
        total_pct = report["total"] * 100

        if report["valid"]:
            parts = [f"Balanced allocation ({total_pct:.2f}%)"]
            if warnings:
                parts.append(f"{len(warnings)} warning(s)")
            return "; ".join(parts) + "."
        return (
            f"Unbalanced allocation ({total_pct:.2f}%): {len(issues)} issue(s), "
            f"{len(warnings)} warning(s)."
        )
