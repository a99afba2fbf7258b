"""
IAM Credential Report: read-only AWS IAM credential report resource
===================================================================

Generates the AWS IAM credential report, parses it into typed rows,
flags users that have a virtual MFA device, and exposes the result as
a computed ``report`` attribute for an infrastructure-as-code state store.

Modules
-------
core
    Core infrastructure components (AWS client, base resource, exceptions)
credential_report
    Report polling, parsing, MFA enrichment and the resource itself
reporters
    Output formatters (CLI, CSV, JSON)

Example
-------
>>> from src.core import AWSClient
>>> from src.credential_report import CredentialReportResource
>>>
>>> client = AWSClient(region="us-east-1")
>>> resource = CredentialReportResource(client)
>>> state = resource.create()
>>> print(f"Report has {len(state.attributes['report'])} users")

Notes
-----
Requires AWS credentials configured via:
- Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)
- AWS credentials file (~/.aws/credentials)
- IAM role (when running on AWS infrastructure)

The credentials need ``iam:GenerateCredentialReport``,
``iam:GetCredentialReport`` and ``iam:ListVirtualMFADevices``.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Public API
from src.core.aws_client import AWSClient
from src.core.base_resource import BaseResource, ResourceState
from src.core.exceptions import CredentialReportError
from src.credential_report import (
    CredentialReport,
    CredentialReportFetcher,
    CredentialReportResource,
    ReportRow,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Core classes
    "AWSClient",
    "BaseResource",
    "ResourceState",
    "CredentialReportError",
    # Credential report
    "CredentialReport",
    "CredentialReportFetcher",
    "CredentialReportResource",
    "ReportRow",
]
