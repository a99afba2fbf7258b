"""
JSON Reporter Module
====================

Exports credential report state to JSON for programmatic access.

Output Structure
----------------
::

    {
      "resource_type": "aws_iam_credential_report",
      "id": "iam-credential-report",
      "attributes": {
        "report": [
          {
            "user": "alice",
            "password_enabled": true,
            ...
            "access_keys": [{"active": true, ...}, {"active": false, ...}]
          }
        ]
      },
      "read_time": "2024-01-15T10:30:00+00:00"
    }

Classes
-------
JSONReporter
    Main reporter class for JSON export.

See Also
--------
CLIReporter : For terminal display.
CSVReporter : For spreadsheet export.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from src.core.base_resource import ResourceState

# Module logger
logger = logging.getLogger(__name__)


class JSONReporter:
    """
    Reporter for exporting resource state to JSON format.

    Parameters
    ----------
    output_path : str, optional
        Path for the output file. If not provided, generates a
        timestamped filename in the current directory.
    indent : int, default=2
        JSON indentation level. Set to None for compact output.

    Examples
    --------
    >>> reporter = JSONReporter(output_path="report.json")
    >>> filepath = reporter.report(state)

    >>> json_str = JSONReporter(indent=None).to_string(state)
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        indent: Optional[int] = 2,
    ) -> None:
        self.output_path = output_path
        self.indent = indent
        logger.debug(f"Initialized JSONReporter (output_path={output_path})")

    def _get_output_path(self) -> Path:
        if self.output_path:
            return Path(self.output_path)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return Path(f"credential_report_{timestamp}.json")

    def report(self, state: ResourceState) -> str:
        """
        Export resource state to a JSON file.

        Returns
        -------
        str
            Path to the created JSON file.
        """
        output_path = self._get_output_path()
        rows = state.attributes.get("report") or []

        logger.info(f"Exporting {len(rows)} report rows to {output_path}")

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(state), f, indent=self.indent, default=str)

        logger.info(f"JSON export complete: {output_path}")
        return str(output_path)

    def to_string(self, state: ResourceState) -> str:
        """Convert resource state to a JSON string without writing a file."""
        return json.dumps(self.to_dict(state), indent=self.indent, default=str)

    def to_dict(self, state: ResourceState) -> Dict[str, Any]:
        return state.to_dict()

    def __repr__(self) -> str:
        """Return string representation."""
        return f"JSONReporter(output_path={self.output_path!r}, indent={self.indent})"
