"""
IAM credential report resource.

Read-only resource exposing the whole credential report as a single
computed ``report`` attribute. The resource is a singleton snapshot, so
its identifier is a constant rather than anything derived from AWS.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict

from src.core.base_resource import BaseResource, ResourceState
from src.credential_report.fetcher import CredentialReportFetcher
from src.credential_report.flatten import flatten_credential_report
from src.credential_report.poller import DEFAULT_INTERVAL, DEFAULT_TIMEOUT

# Module logger
logger = logging.getLogger(__name__)

ACCESS_KEY_SCHEMA = {
    "active": {"type": "bool", "computed": True},
    "last_used_date": {"type": "string", "computed": True},
    "last_rotated": {"type": "string", "computed": True},
}

REPORT_ROW_SCHEMA = {
    "user": {"type": "string", "computed": True},
    "password_enabled": {"type": "bool", "computed": True},
    "password_last_used": {"type": "string", "computed": True},
    "password_last_changed": {"type": "string", "computed": True},
    "mfa_active": {"type": "bool", "computed": True},
    "mfa_virtual": {"type": "bool", "computed": True},
    "access_keys": {"type": "list", "computed": True, "elem": ACCESS_KEY_SCHEMA},
}

SCHEMA = {
    "report": {
        "type": "list",
        "optional": True,
        "computed": True,
        "elem": REPORT_ROW_SCHEMA,
    },
}


class CredentialReportResource(BaseResource):
    """
    The ``aws_iam_credential_report`` resource.

    Args:
        aws_client: AWSClient (or bare IAM client) used for the fetch
        timeout: Seconds to wait for report generation
        poll_interval: Seconds between report requests
        sleep: Sleep function used while polling
        clock: Monotonic clock bounding the wait
    """

    RESOURCE_ID = "iam-credential-report"

    def __init__(
        self,
        aws_client: Any,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(aws_client)
        self.fetcher = CredentialReportFetcher(
            aws_client,
            timeout=timeout,
            poll_interval=poll_interval,
            sleep=sleep,
            clock=clock,
        )

    def get_resource_type(self) -> str:
        return "aws_iam_credential_report"

    def get_schema(self) -> Dict[str, Any]:
        return SCHEMA

    def read(self) -> ResourceState:
        """Fetch a fresh report and return it as the ``report`` attribute."""
        report = self.fetcher.fetch()
        return self._state({"report": flatten_credential_report(report.rows)})
