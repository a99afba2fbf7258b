"""
IAM Credential Report
=====================

Retrieval, parsing and virtual MFA enrichment of the IAM credential report,
and the read-only resource that exposes it as state.

Modules
-------
models
    ReportRow, AccessKey and CredentialReport value types.
parser
    CSV payload decoding.
mfa
    Virtual MFA serial matching and row enrichment.
flatten
    Projection to and from the state record shape.
poller
    Tagged poll results and the bounded polling loop.
fetcher
    CredentialReportFetcher, the end-to-end read.
resource
    CredentialReportResource, the state-facing resource.

Example
-------
>>> from src.core import AWSClient
>>> from src.credential_report import CredentialReportResource
>>>
>>> resource = CredentialReportResource(AWSClient(profile="audit"))
>>> state = resource.create()
>>> state.attributes["report"][0]["user"]
'<root_account>'
"""

from src.credential_report.fetcher import CredentialReportFetcher
from src.credential_report.flatten import (
    expand_credential_report,
    flatten_access_keys,
    flatten_credential_report,
)
from src.credential_report.mfa import (
    ROOT_MFA_DEVICE_NAME,
    apply_virtual_mfa,
    extract_mfa_account_name,
    virtual_mfa_accounts,
)
from src.credential_report.models import (
    ROOT_ACCOUNT_USER,
    AccessKey,
    CredentialReport,
    ReportRow,
)
from src.credential_report.parser import (
    REQUIRED_COLUMNS,
    parse_credential_report,
    parse_csv_bool,
)
from src.credential_report.poller import (
    PollResult,
    PollStatus,
    ReportPoller,
    classify_report_response,
)
from src.credential_report.resource import CredentialReportResource

__all__ = [
    # Models
    "AccessKey",
    "ReportRow",
    "CredentialReport",
    "ROOT_ACCOUNT_USER",
    # Parsing
    "REQUIRED_COLUMNS",
    "parse_credential_report",
    "parse_csv_bool",
    # Enrichment
    "ROOT_MFA_DEVICE_NAME",
    "extract_mfa_account_name",
    "virtual_mfa_accounts",
    "apply_virtual_mfa",
    # Projection
    "flatten_access_keys",
    "flatten_credential_report",
    "expand_credential_report",
    # Polling
    "PollStatus",
    "PollResult",
    "ReportPoller",
    "classify_report_response",
    # Fetch and resource
    "CredentialReportFetcher",
    "CredentialReportResource",
]
