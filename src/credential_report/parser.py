"""
CSV Credential Report Parser
============================

Decodes the CSV payload returned by ``GetCredentialReport`` into
:class:`ReportRow` values.

Columns are looked up by header name, so the order in which IAM emits
them does not matter. Only the literal ``true`` is a true boolean; every
other token (``false``, ``TRUE``, empty, garbage) decodes to False.
Dates and sentinels such as ``N/A`` or ``no_information`` are passed
through as strings.

Example
-------
>>> content = (
...     b"user,password_enabled,password_last_used,...\\n"
...     b"alice,true,2024-01-15T10:30:00+00:00,...\\n"
... )
>>> rows = parse_credential_report(content)
>>> rows[0].user
'alice'
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Dict, List, Sequence, Union

from src.core.exceptions import MissingColumnError, ReportParseError
from src.credential_report.models import AccessKey, ReportRow

# Module logger
logger = logging.getLogger(__name__)

TRUE_TOKEN = "true"

USER = "user"
PASSWORD_ENABLED = "password_enabled"
PASSWORD_LAST_USED = "password_last_used"
PASSWORD_LAST_CHANGED = "password_last_changed"
MFA_ACTIVE = "mfa_active"

# access_key_<slot>_<field> columns, slot 1 then slot 2
ACCESS_KEY_COLUMNS = [
    (
        f"access_key_{slot}_active",
        f"access_key_{slot}_last_used_date",
        f"access_key_{slot}_last_rotated",
    )
    for slot in (1, 2)
]

REQUIRED_COLUMNS = [
    USER,
    PASSWORD_ENABLED,
    PASSWORD_LAST_USED,
    PASSWORD_LAST_CHANGED,
    MFA_ACTIVE,
] + [column for columns in ACCESS_KEY_COLUMNS for column in columns]


def parse_csv_bool(token: str) -> bool:
    """Return True only for the exact token ``true``."""
    return token == TRUE_TOKEN


def build_header_index(header: Sequence[str]) -> Dict[str, int]:
    """
    Map column names to their positions.

    Raises
    ------
    MissingColumnError
        If any required column is absent.
    """
    index = {name: position for position, name in enumerate(header)}
    missing = [column for column in REQUIRED_COLUMNS if column not in index]
    if missing:
        raise MissingColumnError(missing)
    return index


def _decode(content: Union[bytes, str]) -> str:
    if isinstance(content, str):
        return content
    try:
        # utf-8-sig drops a leading BOM if one is present
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ReportParseError(f"Credential report is not valid UTF-8: {e}") from e


def _parse_row(line: List[str], header: Dict[str, int]) -> ReportRow:
    access_keys = tuple(
        AccessKey(
            active=parse_csv_bool(line[header[active]]),
            last_used_date=line[header[last_used]],
            last_rotated=line[header[rotated]],
        )
        for active, last_used, rotated in ACCESS_KEY_COLUMNS
    )
    return ReportRow(
        user=line[header[USER]],
        password_enabled=parse_csv_bool(line[header[PASSWORD_ENABLED]]),
        password_last_used=line[header[PASSWORD_LAST_USED]],
        password_last_changed=line[header[PASSWORD_LAST_CHANGED]],
        mfa_active=parse_csv_bool(line[header[MFA_ACTIVE]]),
        access_keys=access_keys,
    )


def parse_credential_report(content: Union[bytes, str]) -> List[ReportRow]:
    """
    Parse a credential report CSV payload.

    Parameters
    ----------
    content : bytes or str
        Raw report content. Bytes are decoded as UTF-8.

    Returns
    -------
    list of ReportRow
        One row per data line, in input order.

    Raises
    ------
    ReportParseError
        If the payload is empty, has invalid quoting, or a data line has
        a different number of fields than the header.
    MissingColumnError
        If the header lacks a required column.
    """
    reader = csv.reader(io.StringIO(_decode(content), newline=""), strict=True)

    try:
        header_line = next(reader)
        while not header_line:
            header_line = next(reader)
    except StopIteration:
        raise ReportParseError("Credential report is empty", line=1)
    except csv.Error as e:
        raise ReportParseError(f"Invalid credential report header: {e}", line=1) from e

    header = build_header_index(header_line)

    rows: List[ReportRow] = []
    try:
        for line in reader:
            if not line:
                continue  # blank line
            if len(line) != len(header_line):
                raise ReportParseError(
                    f"Wrong number of fields: expected {len(header_line)}, got {len(line)}",
                    line=reader.line_num,
                )
            rows.append(_parse_row(line, header))
    except csv.Error as e:
        raise ReportParseError(
            f"Invalid credential report CSV: {e}", line=reader.line_num
        ) from e

    logger.debug(f"Parsed {len(rows)} credential report rows")
    return rows
