"""
Polling retrieval of a generated credential report.

Each ``GetCredentialReport`` attempt is classified into a tagged
:class:`PollResult` (ready, not ready yet, or fatal) and
:class:`ReportPoller` retries only the "not ready yet" case until the
time budget is spent.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from src.core.exceptions import ReportFetchError, ReportTimeoutError

# Module logger
logger = logging.getLogger(__name__)

OPERATION = "GetCredentialReport"

# Error codes meaning the report is still being generated
RETRYABLE_ERROR_CODES = frozenset({"ReportInProgress"})

DEFAULT_TIMEOUT = 60.0
DEFAULT_INTERVAL = 2.0


class PollStatus(Enum):
    """Outcome of a single report request."""

    READY = "ready"
    NOT_READY = "not_ready"
    FATAL = "fatal"


@dataclass
class PollResult:
    """
    Result of a single ``GetCredentialReport`` attempt.

    Attributes:
        status: Outcome of the attempt
        content: Raw report payload, set when READY
        generated_time: When IAM generated the report, set when READY
        error: The AWS error, set when NOT_READY or FATAL
    """

    status: PollStatus
    content: Optional[bytes] = None
    generated_time: Optional[datetime] = None
    error: Optional[Exception] = None

    @classmethod
    def ready(
        cls, content: bytes, generated_time: Optional[datetime] = None
    ) -> PollResult:
        return cls(PollStatus.READY, content=content, generated_time=generated_time)

    @classmethod
    def not_ready(cls, error: Optional[Exception] = None) -> PollResult:
        return cls(PollStatus.NOT_READY, error=error)

    @classmethod
    def fatal(cls, error: Exception) -> PollResult:
        return cls(PollStatus.FATAL, error=error)

    @property
    def is_terminal(self) -> bool:
        return self.status is not PollStatus.NOT_READY

    @property
    def error_code(self) -> Optional[str]:
        if isinstance(self.error, ClientError):
            return self.error.response.get("Error", {}).get("Code")
        return None


def classify_report_response(get_report: Callable[[], Dict[str, Any]]) -> PollResult:
    """
    Perform one report request and classify the outcome.

    Parameters
    ----------
    get_report : callable
        Zero-argument callable performing ``GetCredentialReport``
        (typically ``iam.get_credential_report``).

    Returns
    -------
    PollResult
        READY with the payload, NOT_READY for ``ReportInProgress``,
        FATAL for any other botocore error.
    """
    try:
        response = get_report()
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        if code in RETRYABLE_ERROR_CODES:
            return PollResult.not_ready(e)
        return PollResult.fatal(e)
    except BotoCoreError as e:
        return PollResult.fatal(e)

    content = response["Content"]
    if isinstance(content, str):
        content = content.encode("utf-8")
    return PollResult.ready(content, response.get("GeneratedTime"))


class ReportPoller:
    """
    Poll for a credential report until it is ready or the timeout elapses.

    State machine: ``Pending -> Pending | Ready | Failed``. An attempt is
    only issued while time remains in the budget; between attempts the
    poller sleeps ``min(interval, remaining)``.

    Parameters
    ----------
    get_report : callable
        Zero-argument callable performing ``GetCredentialReport``.
    timeout : float, default=60.0
        Total time budget in seconds.
    interval : float, default=2.0
        Seconds to wait between attempts.
    sleep : callable, default=time.sleep
        Sleep function, replaceable in tests.
    clock : callable, default=time.monotonic
        Monotonic clock, replaceable in tests.

    Example
    -------
    >>> poller = ReportPoller(iam.get_credential_report, timeout=30)
    >>> result = poller.poll()
    >>> result.content[:4]
    b'user'
    """

    def __init__(
        self,
        get_report: Callable[[], Dict[str, Any]],
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if interval < 0:
            raise ValueError(f"interval must not be negative, got {interval}")

        self.get_report = get_report
        self.timeout = timeout
        self.interval = interval
        self._sleep = sleep
        self._clock = clock
        self.attempts = 0

    def poll(self) -> PollResult:
        """
        Request the report until it is ready.

        Returns
        -------
        PollResult
            The READY result carrying the payload.

        Raises
        ------
        ReportFetchError
            On any error other than "report in progress".
        ReportTimeoutError
            If the report is still being generated when the budget is spent.
        """
        self.attempts = 0
        deadline = self._clock() + self.timeout

        while True:
            self.attempts += 1
            result = classify_report_response(self.get_report)

            if result.status is PollStatus.READY:
                logger.debug(f"Credential report ready after {self.attempts} attempt(s)")
                return result

            if result.status is PollStatus.FATAL:
                logger.error(f"Failed to get credential report: {result.error}")
                raise ReportFetchError(
                    f"Failed to get credential report: {result.error}",
                    operation=OPERATION,
                    error_code=result.error_code,
                ) from result.error

            remaining = deadline - self._clock()
            if remaining <= 0:
                break

            wait = min(self.interval, remaining)
            logger.debug(
                f"Credential report still being generated "
                f"(attempt {self.attempts}), retrying in {wait:.1f}s"
            )
            self._sleep(wait)

            if self._clock() >= deadline:
                break

        logger.error(
            f"Credential report not ready after {self.timeout:g} seconds "
            f"({self.attempts} attempts)"
        )
        raise ReportTimeoutError(
            f"Credential report not ready after {self.timeout:g} seconds",
            operation=OPERATION,
            error_code=result.error_code,
            details={"timeout_seconds": self.timeout, "attempts": self.attempts},
        ) from result.error
