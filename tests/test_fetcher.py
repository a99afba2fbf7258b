"""
Tests for CredentialReportFetcher.
"""

import pytest

from src.core.exceptions import (
    MissingColumnError,
    ReportFetchError,
    ReportGenerationError,
    ReportParseError,
    ReportTimeoutError,
)
from src.credential_report.fetcher import CredentialReportFetcher
from src.credential_report.models import CredentialReport


def make_fetcher(iam, clock, **kwargs):
    return CredentialReportFetcher(iam, sleep=clock.sleep, clock=clock, **kwargs)


class TestCredentialReportFetcher:
    """Tests against a fake IAM client."""

    def test_fetch(self, fake_iam, fake_clock):
        report = make_fetcher(fake_iam, fake_clock).fetch()

        assert isinstance(report, CredentialReport)
        assert report.users == ["<root_account>", "alice", "bob", "carol"]
        assert report.get("alice").mfa_virtual is True
        assert report.get("<root_account>").mfa_virtual is True
        assert report.get("bob").mfa_virtual is False
        assert report.get("carol").mfa_virtual is False
        assert report.get("nobody") is None

    def test_call_sequence(self, fake_iam, fake_clock):
        make_fetcher(fake_iam, fake_clock).fetch()
        assert fake_iam.calls == [
            "GenerateCredentialReport",
            "GetCredentialReport",
            "ListVirtualMFADevices",
        ]

    def test_each_fetch_regenerates(self, fake_iam, fake_clock):
        fetcher = make_fetcher(fake_iam, fake_clock)
        first = fetcher.fetch()
        second = fetcher.fetch()

        assert first.rows == second.rows
        assert fake_iam.calls.count("GenerateCredentialReport") == 2
        assert fake_iam.calls.count("GetCredentialReport") == 2

    def test_waits_for_report(
        self, make_iam, make_client_error, report_response, fake_clock
    ):
        in_progress = make_client_error("ReportInProgress")
        iam = make_iam([in_progress, in_progress, report_response])

        report = make_fetcher(iam, fake_clock, poll_interval=1.5).fetch()

        assert len(report) == 4
        assert fake_clock.sleeps == [1.5, 1.5]

    def test_timeout(self, make_iam, make_client_error, fake_clock):
        iam = make_iam([make_client_error("ReportInProgress")])

        with pytest.raises(ReportTimeoutError):
            make_fetcher(iam, fake_clock, timeout=6, poll_interval=2).fetch()

        assert "ListVirtualMFADevices" not in iam.calls
        assert fake_clock.now == 6

    def test_generate_failure(self, make_iam, make_client_error, report_response, fake_clock):
        iam = make_iam(
            [report_response],
            generate_error=make_client_error(
                "AccessDenied", operation="GenerateCredentialReport"
            ),
        )

        with pytest.raises(ReportGenerationError) as exc_info:
            make_fetcher(iam, fake_clock).fetch()

        assert exc_info.value.error_code == "AccessDenied"
        assert iam.calls == ["GenerateCredentialReport"]

    def test_get_report_failure(self, make_iam, make_client_error, fake_clock):
        iam = make_iam([make_client_error("AccessDenied")])

        with pytest.raises(ReportFetchError) as exc_info:
            make_fetcher(iam, fake_clock).fetch()

        assert exc_info.value.details["operation"] == "GetCredentialReport"
        assert fake_clock.sleeps == []

    def test_list_mfa_failure(
        self, make_iam, make_client_error, report_response, fake_clock
    ):
        iam = make_iam(
            [report_response],
            list_error=make_client_error(
                "AccessDenied", operation="ListVirtualMFADevices"
            ),
        )

        with pytest.raises(ReportFetchError) as exc_info:
            make_fetcher(iam, fake_clock).fetch()

        assert exc_info.value.details["operation"] == "ListVirtualMFADevices"

    def test_parse_failure(self, make_iam, make_report, fake_clock):
        iam = make_iam([{"Content": make_report(["alice"], header="user,arn")}])

        with pytest.raises(MissingColumnError):
            make_fetcher(iam, fake_clock).fetch()

        assert "ListVirtualMFADevices" not in iam.calls

    def test_malformed_csv(self, make_iam, report_csv, fake_clock):
        iam = make_iam([{"Content": report_csv + b"dave,true\n"}])

        with pytest.raises(ReportParseError):
            make_fetcher(iam, fake_clock).fetch()

    def test_mfa_devices_across_pages(self, make_iam, report_response, fake_clock):
        iam = make_iam(
            [report_response],
            mfa_pages=[
                {"VirtualMFADevices": [{"SerialNumber": "arn:aws:iam::1:mfa/bob"}]},
                {"VirtualMFADevices": [{"SerialNumber": "arn:aws:iam::1:mfa/carol"}]},
                {"VirtualMFADevices": [{"SerialNumber": "GAHT12345678"}]},
            ],
        )

        report = make_fetcher(iam, fake_clock).fetch()

        assert [r.user for r in report if r.mfa_virtual] == ["bob", "carol"]

    def test_accepts_aws_client(self, fake_iam):
        class StubAWSClient:
            def get_iam_client(self):
                return fake_iam

        fetcher = CredentialReportFetcher(StubAWSClient())
        assert fetcher.iam is fake_iam


class TestCredentialReportFetcherMoto:
    """End-to-end tests against moto's IAM."""

    def test_fetch(self, aws_client, iam_users):
        report = CredentialReportFetcher(aws_client, poll_interval=0.1).fetch()

        alice = report.get("alice")
        bob = report.get("bob")

        assert alice is not None and bob is not None
        assert alice.mfa_virtual is True
        assert bob.mfa_virtual is False
        assert alice.access_keys[0].active is True
        assert bob.access_keys[0].active is False
        assert len(bob.access_keys) == 2

    def test_list_virtual_mfa_devices(self, aws_client, iam_users):
        devices = CredentialReportFetcher(aws_client).list_virtual_mfa_devices()
        assert [d["SerialNumber"] for d in devices] == [
            "arn:aws:iam::123456789012:mfa/alice"
        ]

    def test_generate_report(self, aws_client):
        state = CredentialReportFetcher(aws_client).generate_report()
        assert state in ("STARTED", "INPROGRESS", "COMPLETE")
