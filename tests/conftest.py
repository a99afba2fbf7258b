"""
Pytest configuration and shared fixtures for testing.
"""

import os

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from src.core.aws_client import AWSClient

REPORT_HEADER = (
    "user,arn,user_creation_time,password_enabled,password_last_used,"
    "password_last_changed,password_next_rotation,mfa_active,"
    "access_key_1_active,access_key_1_last_rotated,access_key_1_last_used_date,"
    "access_key_1_last_used_region,access_key_1_last_used_service,"
    "access_key_2_active,access_key_2_last_rotated,access_key_2_last_used_date,"
    "access_key_2_last_used_region,access_key_2_last_used_service,"
    "cert_1_active,cert_1_last_rotated,cert_2_active,cert_2_last_rotated"
)

REPORT_LINES = [
    "<root_account>,arn:aws:iam::123456789012:root,2019-01-01T00:00:00+00:00,"
    "not_supported,2024-01-10T08:00:00+00:00,not_supported,not_supported,true,"
    "false,N/A,N/A,N/A,N/A,false,N/A,N/A,N/A,N/A,false,N/A,false,N/A",
    "alice,arn:aws:iam::123456789012:user/alice,2020-03-01T12:00:00+00:00,"
    "true,2024-01-14T09:30:00+00:00,2023-11-01T10:00:00+00:00,N/A,true,"
    "true,2023-06-01T00:00:00+00:00,2024-01-15T10:00:00+00:00,us-east-1,s3,"
    "false,N/A,N/A,N/A,N/A,false,N/A,false,N/A",
    "bob,arn:aws:iam::123456789012:user/bob,2021-05-05T05:05:05+00:00,"
    "false,N/A,N/A,N/A,false,"
    "true,2022-01-01T00:00:00+00:00,N/A,N/A,N/A,"
    "true,2023-02-02T00:00:00+00:00,2023-12-24T18:00:00+00:00,eu-west-1,ec2,"
    "false,N/A,false,N/A",
    "carol,arn:aws:iam::123456789012:user/carol,2022-07-07T07:07:07+00:00,"
    "true,no_information,2022-07-07T07:10:00+00:00,N/A,false,"
    "false,N/A,N/A,N/A,N/A,false,N/A,N/A,N/A,N/A,false,N/A,false,N/A",
]


def client_error(code, operation="GetCredentialReport", message="error"):
    """Build a botocore ClientError with the given code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeClock:
    """Monotonic clock that only advances when sleep is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakePaginator:
    def __init__(self, pages, error=None):
        self.pages = pages
        self.error = error

    def paginate(self):
        for page in self.pages:
            yield page
        if self.error is not None:
            raise self.error


class FakeIAM:
    """
    Stand-in for a boto3 IAM client.

    ``report_responses`` is consumed one item per GetCredentialReport call:
    exceptions are raised, dicts are returned. The last item repeats.
    """

    def __init__(
        self,
        report_responses,
        mfa_pages=None,
        generate_error=None,
        list_error=None,
    ):
        self.report_responses = list(report_responses)
        self.mfa_pages = mfa_pages if mfa_pages is not None else [{"VirtualMFADevices": []}]
        self.generate_error = generate_error
        self.list_error = list_error
        self.calls = []

    def generate_credential_report(self):
        self.calls.append("GenerateCredentialReport")
        if self.generate_error is not None:
            raise self.generate_error
        return {"State": "STARTED", "Description": "No report exists. Starting a new report generation task"}

    def get_credential_report(self):
        self.calls.append("GetCredentialReport")
        if len(self.report_responses) > 1:
            response = self.report_responses.pop(0)
        else:
            response = self.report_responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def get_paginator(self, operation_name):
        assert operation_name == "list_virtual_mfa_devices"
        self.calls.append("ListVirtualMFADevices")
        return FakePaginator(self.mfa_pages, self.list_error)


@pytest.fixture
def report_csv():
    """A realistic credential report payload as returned by IAM."""
    return ("\n".join([REPORT_HEADER] + REPORT_LINES) + "\n").encode("utf-8")


@pytest.fixture
def make_report():
    """Build a CSV payload from a header string and data lines."""

    def _make(lines, header=REPORT_HEADER):
        return ("\n".join([header] + list(lines)) + "\n").encode("utf-8")

    return _make


@pytest.fixture
def make_client_error():
    """Factory for botocore ClientErrors."""
    return client_error


@pytest.fixture
def make_iam():
    """Factory for FakeIAM clients."""
    return FakeIAM


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def report_response(report_csv):
    return {"Content": report_csv, "ReportFormat": "text/csv"}


@pytest.fixture
def fake_iam(report_response):
    """FakeIAM that returns the sample report on the first request."""
    return FakeIAM(
        [report_response],
        mfa_pages=[
            {
                "VirtualMFADevices": [
                    {"SerialNumber": "arn:aws:iam::123456789012:mfa/alice"},
                    {"SerialNumber": "arn:aws:iam::123456789012:mfa/root-account-mfa-device"},
                ]
            }
        ],
    )


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def aws_client(mock_aws_environment):
    """Create an AWSClient instance for testing."""
    return AWSClient(region="us-east-1")


@pytest.fixture
def iam_client(mock_aws_environment):
    """Create a boto3 IAM client for setting up test resources."""
    return boto3.client("iam", region_name="us-east-1")


@pytest.fixture
def iam_users(iam_client):
    """Create users alice (access key + virtual MFA) and bob (nothing)."""
    iam_client.create_user(UserName="alice")
    iam_client.create_access_key(UserName="alice")
    iam_client.create_virtual_mfa_device(VirtualMFADeviceName="alice")
    iam_client.create_user(UserName="bob")
    return ["alice", "bob"]
