"""
Credential Report Fetcher
=========================

Retrieves the IAM credential report and enriches it with virtual MFA
information.

A fetch runs these steps, in order, every time it is called:

1. ``GenerateCredentialReport`` starts (or restarts) report generation.
2. ``GetCredentialReport`` is polled until the report is ready.
3. The CSV payload is parsed into :class:`ReportRow` values.
4. ``ListVirtualMFADevices`` is read and matching rows are flagged.

Nothing is cached between calls, and any failure aborts the fetch
without a partial result.

Classes
-------
CredentialReportFetcher
    Runs the fetch against an IAM client.

Example
-------
>>> from src.core import AWSClient
>>> from src.credential_report import CredentialReportFetcher
>>>
>>> fetcher = CredentialReportFetcher(AWSClient(profile="audit"), timeout=120)
>>> report = fetcher.fetch()
>>> for row in report:
...     print(row.user, row.mfa_active, row.mfa_virtual)
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from src.core.exceptions import ReportFetchError, ReportGenerationError
from src.credential_report.mfa import apply_virtual_mfa, virtual_mfa_accounts
from src.credential_report.models import CredentialReport
from src.credential_report.parser import parse_credential_report
from src.credential_report.poller import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEOUT,
    PollResult,
    ReportPoller,
)

# Module logger
logger = logging.getLogger(__name__)


def _error_code(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "Unknown")
    return "Unknown"


class CredentialReportFetcher:
    """
    Fetch and enrich the IAM credential report.

    Parameters
    ----------
    aws_client : AWSClient or IAM client
        Either an :class:`AWSClient` or an object exposing the IAM
        operations ``generate_credential_report``, ``get_credential_report``
        and ``get_paginator("list_virtual_mfa_devices")``.
    timeout : float, default=60.0
        Seconds to wait for the report to be generated.
    poll_interval : float, default=2.0
        Seconds between ``GetCredentialReport`` attempts.
    sleep : callable, default=time.sleep
        Sleep function used between attempts.
    clock : callable, default=time.monotonic
        Monotonic clock bounding the wait.

    Attributes
    ----------
    iam : IAM.Client
        The IAM client requests are made with.
    timeout : float
        Report generation time budget.
    poll_interval : float
        Delay between poll attempts.
    """

    def __init__(
        self,
        aws_client: Any,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if hasattr(aws_client, "get_iam_client"):
            self.iam = aws_client.get_iam_client()
        else:
            self.iam = aws_client
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def generate_report(self) -> str:
        """
        Ask IAM to start generating a credential report.

        Returns
        -------
        str
            The generation state reported by IAM ('STARTED', 'INPROGRESS'
            or 'COMPLETE').

        Raises
        ------
        ReportGenerationError
            If the request fails. Not retried.
        """
        try:
            response = self.iam.generate_credential_report()
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate credential report: {e}")
            raise ReportGenerationError(
                f"Failed to generate credential report: {e}",
                operation="GenerateCredentialReport",
                error_code=_error_code(e),
            ) from e

        state = response.get("State", "UNKNOWN")
        logger.info(f"Credential report generation state: {state}")
        return state

    def wait_for_report(self) -> PollResult:
        """Poll ``GetCredentialReport`` until the report is ready."""
        poller = ReportPoller(
            self.iam.get_credential_report,
            timeout=self.timeout,
            interval=self.poll_interval,
            sleep=self._sleep,
            clock=self._clock,
        )
        return poller.poll()

    def list_virtual_mfa_devices(self) -> List[Dict[str, Any]]:
        """
        List every virtual MFA device in the account.

        Raises
        ------
        ReportFetchError
            If the listing fails.
        """
        devices: List[Dict[str, Any]] = []
        paginator = self.iam.get_paginator("list_virtual_mfa_devices")

        try:
            for page in paginator.paginate():
                devices.extend(page.get("VirtualMFADevices", []))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list virtual MFA devices: {e}")
            raise ReportFetchError(
                f"Failed to list virtual MFA devices: {e}",
                operation="ListVirtualMFADevices",
                error_code=_error_code(e),
            ) from e

        logger.debug(f"Found {len(devices)} virtual MFA devices")
        return devices

    def fetch(self) -> CredentialReport:
        """
        Generate, retrieve, parse and enrich the credential report.

        Returns
        -------
        CredentialReport
            Rows in report order with ``mfa_virtual`` set.

        Raises
        ------
        ReportGenerationError
            If report generation could not be started.
        ReportTimeoutError
            If the report was not ready within ``timeout`` seconds.
        ReportFetchError
            If any other IAM call failed.
        ReportParseError
            If the report payload is malformed.
        """
        self.generate_report()
        result = self.wait_for_report()

        logger.debug(f"Credential report content: {len(result.content)} bytes")
        rows = parse_credential_report(result.content)

        accounts = virtual_mfa_accounts(self.list_virtual_mfa_devices())
        rows = apply_virtual_mfa(rows, accounts)

        logger.info(
            f"Read credential report: {len(rows)} users, "
            f"{sum(row.mfa_virtual for row in rows)} with virtual MFA"
        )
        return CredentialReport(rows=rows, generated_time=result.generated_time)

    def __repr__(self) -> str:
        return (
            f"CredentialReportFetcher(timeout={self.timeout:g}, "
            f"poll_interval={self.poll_interval:g})"
        )
