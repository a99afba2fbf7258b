"""
Credential report data model.

Rows are immutable values rebuilt on every read. Enrichment produces new
rows with :func:`dataclasses.replace` rather than mutating existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

# AWS allows at most two access keys per user
ACCESS_KEY_SLOTS = 2

# User name the credential report uses for the account root
ROOT_ACCOUNT_USER = "<root_account>"


@dataclass(frozen=True)
class AccessKey:
    """
    One access key slot of a report row.

    Attributes:
        active: Whether the key is active
        last_used_date: Last use timestamp or a sentinel such as 'N/A'
        last_rotated: Last rotation timestamp or a sentinel such as 'N/A'
    """

    active: bool = False
    last_used_date: str = ""
    last_rotated: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active": self.active,
            "last_used_date": self.last_used_date,
            "last_rotated": self.last_rotated,
        }


def _empty_access_keys() -> Tuple[AccessKey, AccessKey]:
    return (AccessKey(), AccessKey())


@dataclass(frozen=True)
class ReportRow:
    """
    One user entry of the credential report.

    Attributes:
        user: User name, or '<root_account>' for the account root
        password_enabled: Whether console password login is enabled
        password_last_used: Timestamp or sentinel, passed through untouched
        password_last_changed: Timestamp or sentinel, passed through untouched
        mfa_active: MFA flag as reported by IAM
        mfa_virtual: True when a virtual MFA device is registered for the user
        access_keys: Exactly two slots, access key 1 then access key 2
    """

    user: str
    password_enabled: bool = False
    password_last_used: str = ""
    password_last_changed: str = ""
    mfa_active: bool = False
    mfa_virtual: bool = False
    access_keys: Tuple[AccessKey, AccessKey] = field(default_factory=_empty_access_keys)

    def __post_init__(self) -> None:
        keys = tuple(self.access_keys)
        if len(keys) != ACCESS_KEY_SLOTS:
            raise ValueError(
                f"ReportRow requires exactly {ACCESS_KEY_SLOTS} access key slots, "
                f"got {len(keys)}"
            )
        # Accept lists from callers but always store a tuple
        object.__setattr__(self, "access_keys", keys)

    @property
    def has_active_access_key(self) -> bool:
        return any(key.active for key in self.access_keys)

    @property
    def is_root(self) -> bool:
        return self.user == ROOT_ACCOUNT_USER

    def to_dict(self) -> Dict[str, Any]:
        """Convert the row to the state record shape."""
        return {
            "user": self.user,
            "password_enabled": self.password_enabled,
            "password_last_used": self.password_last_used,
            "password_last_changed": self.password_last_changed,
            "mfa_active": self.mfa_active,
            "mfa_virtual": self.mfa_virtual,
            "access_keys": [key.to_dict() for key in self.access_keys],
        }


@dataclass
class CredentialReport:
    """
    A parsed credential report snapshot.

    Attributes:
        rows: Report rows in the order of the source CSV
        generated_time: When IAM generated the report, if known
    """

    rows: List[ReportRow] = field(default_factory=list)
    generated_time: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[ReportRow]:
        return iter(self.rows)

    @property
    def users(self) -> List[str]:
        return [row.user for row in self.rows]

    def get(self, user: str) -> Optional[ReportRow]:
        """Return the row for ``user`` or None."""
        for row in self.rows:
            if row.user == user:
                return row
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the report to a dictionary for serialization.

        Returns
        -------
        dict
            ``generated_time`` as an ISO 8601 string (or None) and ``rows``
            as a list of state records.
        """
        return {
            "generated_time": (
                self.generated_time.isoformat() if self.generated_time else None
            ),
            "rows": [row.to_dict() for row in self.rows],
        }

