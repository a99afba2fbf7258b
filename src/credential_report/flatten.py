"""
Projection of report rows into the state record shape.

The ``report`` attribute of the resource is a list of plain dictionaries
with fixed snake_case keys; each carries a nested ``access_keys`` list.
:func:`expand_credential_report` maps such records back to rows.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from src.core.exceptions import ReportParseError
from src.credential_report.models import AccessKey, ReportRow

ROW_FIELDS = (
    "user",
    "password_enabled",
    "password_last_used",
    "password_last_changed",
    "mfa_active",
    "mfa_virtual",
    "access_keys",
)

ACCESS_KEY_FIELDS = ("active", "last_used_date", "last_rotated")


def flatten_access_keys(access_keys: Iterable[AccessKey]) -> List[Dict[str, Any]]:
    return [key.to_dict() for key in access_keys]


def flatten_credential_report(rows: Iterable[ReportRow]) -> List[Dict[str, Any]]:
    """Convert rows to a list of dictionaries, one per row, in order."""
    return [row.to_dict() for row in rows]


def _require(record: Any, fields: Iterable[str], position: int) -> None:
    if not isinstance(record, Mapping):
        raise ReportParseError(
            f"Report record {position} is not a mapping: {type(record).__name__}"
        )
    missing = [name for name in fields if name not in record]
    if missing:
        raise ReportParseError(
            f"Report record {position} is missing fields: {', '.join(missing)}",
            details={"missing_fields": missing},
        )


def expand_credential_report(records: Iterable[Mapping[str, Any]]) -> List[ReportRow]:
    """
    Rebuild rows from flattened records.

    Raises
    ------
    ReportParseError
        If a record or one of its access keys lacks a field, or a record
        does not carry exactly two access keys.
    """
    rows: List[ReportRow] = []
    for position, record in enumerate(records):
        _require(record, ROW_FIELDS, position)
        if not isinstance(record["access_keys"], (list, tuple)):
            raise ReportParseError(
                f"Report record {position} has invalid access_keys: "
                f"{type(record['access_keys']).__name__}"
            )
        for key in record["access_keys"]:
            _require(key, ACCESS_KEY_FIELDS, position)

        try:
            rows.append(
                ReportRow(
                    user=record["user"],
                    password_enabled=record["password_enabled"],
                    password_last_used=record["password_last_used"],
                    password_last_changed=record["password_last_changed"],
                    mfa_active=record["mfa_active"],
                    mfa_virtual=record["mfa_virtual"],
                    access_keys=tuple(
                        AccessKey(
                            active=key["active"],
                            last_used_date=key["last_used_date"],
                            last_rotated=key["last_rotated"],
                        )
                        for key in record["access_keys"]
                    ),
                )
            )
        except ValueError as e:
            raise ReportParseError(f"Report record {position} is invalid: {e}") from e
    return rows
