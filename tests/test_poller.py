"""
Tests for the credential report poller.
"""

from datetime import datetime, timezone

import pytest
from botocore.exceptions import EndpointConnectionError

from src.core.exceptions import ReportFetchError, ReportTimeoutError
from src.credential_report.poller import (
    PollResult,
    PollStatus,
    ReportPoller,
    classify_report_response,
)


class TestPollResult:
    """Tests for the PollResult tagged result."""

    def test_ready(self):
        result = PollResult.ready(b"user\n")
        assert result.status is PollStatus.READY
        assert result.content == b"user\n"
        assert result.is_terminal

    def test_not_ready(self, make_client_error):
        result = PollResult.not_ready(make_client_error("ReportInProgress"))
        assert result.status is PollStatus.NOT_READY
        assert not result.is_terminal
        assert result.error_code == "ReportInProgress"

    def test_fatal(self, make_client_error):
        result = PollResult.fatal(make_client_error("AccessDenied"))
        assert result.is_terminal
        assert result.error_code == "AccessDenied"


class TestClassifyReportResponse:
    """Tests for classifying one GetCredentialReport call."""

    def test_success(self):
        generated = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        result = classify_report_response(
            lambda: {"Content": b"user\n", "GeneratedTime": generated}
        )
        assert result.status is PollStatus.READY
        assert result.content == b"user\n"
        assert result.generated_time == generated

    def test_str_content_is_encoded(self):
        result = classify_report_response(lambda: {"Content": "user\n"})
        assert result.content == b"user\n"

    def test_report_in_progress_is_retryable(self, make_client_error):
        def get_report():
            raise make_client_error("ReportInProgress")

        assert classify_report_response(get_report).status is PollStatus.NOT_READY

    @pytest.mark.parametrize(
        "code", ["AccessDenied", "ReportExpired", "ReportNotPresent", "Throttling"]
    )
    def test_other_codes_are_fatal(self, make_client_error, code):
        def get_report():
            raise make_client_error(code)

        result = classify_report_response(get_report)
        assert result.status is PollStatus.FATAL
        assert result.error_code == code

    def test_transport_error_is_fatal(self):
        def get_report():
            raise EndpointConnectionError(endpoint_url="https://iam.amazonaws.com")

        result = classify_report_response(get_report)
        assert result.status is PollStatus.FATAL
        assert result.error_code is None


class TestReportPoller:
    """Tests for the polling loop."""

    def _poller(self, iam, clock, timeout=60.0, interval=2.0):
        return ReportPoller(
            iam.get_credential_report,
            timeout=timeout,
            interval=interval,
            sleep=clock.sleep,
            clock=clock,
        )

    def test_ready_on_first_attempt(self, make_iam, report_response, fake_clock):
        poller = self._poller(make_iam([report_response]), fake_clock)

        result = poller.poll()

        assert result.status is PollStatus.READY
        assert poller.attempts == 1
        assert fake_clock.sleeps == []

    def test_ready_after_retries(
        self, make_iam, make_client_error, report_response, fake_clock
    ):
        in_progress = make_client_error("ReportInProgress")
        iam = make_iam([in_progress, in_progress, in_progress, report_response])
        poller = self._poller(iam, fake_clock)

        result = poller.poll()

        assert result.content == report_response["Content"]
        assert poller.attempts == 4
        assert fake_clock.sleeps == [2.0, 2.0, 2.0]

    def test_timeout(self, make_iam, make_client_error, fake_clock):
        iam = make_iam([make_client_error("ReportInProgress")])
        poller = self._poller(iam, fake_clock, timeout=10.0, interval=3.0)

        with pytest.raises(ReportTimeoutError) as exc_info:
            poller.poll()

        # attempts at t=0, 3, 6, 9; the last wait is cut to the 1s left
        assert poller.attempts == 4
        assert fake_clock.sleeps == [3.0, 3.0, 3.0, 1.0]
        assert fake_clock.now == 10.0
        assert exc_info.value.details["timeout_seconds"] == 10.0
        assert exc_info.value.details["attempts"] == 4
        assert exc_info.value.error_code == "ReportInProgress"

    def test_no_attempt_after_deadline(self, make_iam, make_client_error, fake_clock):
        iam = make_iam([make_client_error("ReportInProgress")])
        poller = self._poller(iam, fake_clock, timeout=5.0, interval=5.0)

        with pytest.raises(ReportTimeoutError):
            poller.poll()

        assert iam.calls == ["GetCredentialReport"]
        assert sum(fake_clock.sleeps) == 5.0

    def test_success_just_before_deadline(
        self, make_iam, make_client_error, report_response, fake_clock
    ):
        in_progress = make_client_error("ReportInProgress")
        iam = make_iam([in_progress, in_progress, report_response])
        poller = self._poller(iam, fake_clock, timeout=5.0, interval=2.0)

        assert poller.poll().status is PollStatus.READY
        assert fake_clock.now == 4.0

    def test_fatal_error_is_not_retried(self, make_iam, make_client_error, fake_clock):
        iam = make_iam([make_client_error("AccessDenied")])
        poller = self._poller(iam, fake_clock)

        with pytest.raises(ReportFetchError) as exc_info:
            poller.poll()

        assert not isinstance(exc_info.value, ReportTimeoutError)
        assert exc_info.value.error_code == "AccessDenied"
        assert exc_info.value.details["operation"] == "GetCredentialReport"
        assert exc_info.value.__cause__ is not None
        assert poller.attempts == 1
        assert fake_clock.sleeps == []

    def test_fatal_error_after_retries(
        self, make_iam, make_client_error, fake_clock
    ):
        iam = make_iam(
            [make_client_error("ReportInProgress"), make_client_error("ReportExpired")]
        )
        poller = self._poller(iam, fake_clock)

        with pytest.raises(ReportFetchError) as exc_info:
            poller.poll()

        assert exc_info.value.error_code == "ReportExpired"
        assert poller.attempts == 2

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ValueError):
            ReportPoller(lambda: {}, timeout=timeout)

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            ReportPoller(lambda: {}, interval=-1)
