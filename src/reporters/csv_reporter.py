"""
CSV Reporter Module
===================

Exports the enriched credential report to CSV for spreadsheet analysis.

The output keeps one line per user, in report order, with the access key
slots spread over their own columns and a ``virtual mfa`` column that the
raw IAM report does not have.

Example
-------
>>> from src.reporters import CSVReporter
>>>
>>> reporter = CSVReporter(output_path="credential_report.csv")
>>> filepath = reporter.report(state)
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.core.base_resource import ResourceState

# Module logger
logger = logging.getLogger(__name__)


class CSVReporter:
    """
    Reporter for exporting resource state to CSV format.

    Parameters
    ----------
    output_path : str, optional
        Path for the output file. If not provided, generates a
        timestamped filename in the current directory.
    """

    COLUMNS = [
        "User",
        "Password Enabled",
        "Password Last Used",
        "Password Last Changed",
        "MFA Active",
        "Virtual MFA",
        "Access Key 1 Active",
        "Access Key 1 Last Used",
        "Access Key 1 Last Rotated",
        "Access Key 2 Active",
        "Access Key 2 Last Used",
        "Access Key 2 Last Rotated",
    ]

    def __init__(self, output_path: Optional[str] = None) -> None:
        """Initialize the CSV reporter with an optional output path."""
        self.output_path = output_path
        logger.debug(f"Initialized CSVReporter (output_path={output_path})")

    def _get_output_path(self) -> Path:
        if self.output_path:
            return Path(self.output_path)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return Path(f"credential_report_{timestamp}.csv")

    def report(self, state: ResourceState) -> str:
        """
        Export resource state to a CSV file.

        Returns
        -------
        str
            Path to the created CSV file.
        """
        output_path = self._get_output_path()
        rows = state.attributes.get("report") or []

        logger.info(f"Exporting {len(rows)} report rows to {output_path}")

        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile, quoting=csv.QUOTE_MINIMAL)

            writer.writerow(["# Resource:", state.resource_id])
            writer.writerow(["# Read Time:", state.read_time.isoformat()])
            writer.writerow([])

            writer.writerow(self.COLUMNS)
            for row in rows:
                writer.writerow(self._format_row(row))

        logger.info(f"CSV export complete: {output_path}")
        return str(output_path)

    def _format_row(self, row: Dict[str, Any]) -> List[Any]:
        """Format a flattened report row for CSV output."""
        values = [
            row["user"],
            self._format_bool(row["password_enabled"]),
            row["password_last_used"],
            row["password_last_changed"],
            self._format_bool(row["mfa_active"]),
            self._format_bool(row["mfa_virtual"]),
        ]
        for key in row["access_keys"]:
            values.extend(
                [
                    self._format_bool(key["active"]),
                    key["last_used_date"],
                    key["last_rotated"],
                ]
            )
        return values

    @staticmethod
    def _format_bool(value: bool) -> str:
        return "Yes" if value else "No"

    def __repr__(self) -> str:
        """Return string representation."""
        return f"CSVReporter(output_path={self.output_path!r})"
