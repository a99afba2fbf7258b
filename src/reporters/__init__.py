"""
Report Generators
=================

Output formatters for credential report state.

Available Reporters
-------------------
CLIReporter
    Rich terminal output with a summary and a per-user table.
CSVReporter
    CSV export for spreadsheet analysis.
JSONReporter
    JSON export of the full state record.

Example
-------
>>> from src.reporters import CLIReporter, JSONReporter
>>>
>>> state = resource.read()
>>> CLIReporter().report(state)
>>> json_str = JSONReporter().to_string(state)

See Also
--------
src.core.base_resource.ResourceState : Input data structure.
"""

from src.reporters.cli_reporter import CLIReporter
from src.reporters.csv_reporter import CSVReporter
from src.reporters.json_reporter import JSONReporter

__all__ = [
    "CLIReporter",
    "CSVReporter",
    "JSONReporter",
]
