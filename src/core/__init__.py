"""
Core Infrastructure Components
==============================

This module provides the foundational components for the credential
report tool:

- :class:`AWSClient` - Manages AWS connections and client creation
- :class:`BaseResource` - Abstract base class for computed resources
- Exception hierarchy for error handling

Classes
-------
AWSClient
    AWS client wrapper with retry logic and credential management.
BaseResource
    Abstract base class defining the resource lifecycle interface.
ResourceState
    Data class containing the state of a resource read.

Exceptions
----------
CredentialReportError
    Base exception for all errors.
AWSClientError
    Base exception for AWS client errors.
CredentialsError
    Raised when credentials are invalid or missing.
RegionError
    Raised when region is invalid.
ServiceError
    Raised when AWS service access fails.
ReportFetchError
    Raised when an IAM call made while reading the report fails.
ReportGenerationError
    Raised when report generation cannot be started.
ReportTimeoutError
    Raised when the report is not ready in time.
ReportParseError
    Raised when the report payload is malformed.
MissingColumnError
    Raised when the report header lacks a required column.

Example
-------
>>> from src.core import AWSClient
>>>
>>> client = AWSClient(profile="audit")
>>> client.validate_credentials()
True
"""

from src.core.aws_client import AWSClient
from src.core.base_resource import BaseResource, ResourceState
from src.core.exceptions import (
    AWSClientError,
    CredentialReportError,
    CredentialsError,
    MissingColumnError,
    RegionError,
    ReportFetchError,
    ReportGenerationError,
    ReportParseError,
    ReportTimeoutError,
    ServiceError,
)

__all__ = [
    # Client
    "AWSClient",
    # Resource base
    "BaseResource",
    "ResourceState",
    # Exceptions - Base
    "CredentialReportError",
    # Exceptions - AWS Client
    "AWSClientError",
    "CredentialsError",
    "RegionError",
    "ServiceError",
    # Exceptions - Report retrieval
    "ReportFetchError",
    "ReportGenerationError",
    "ReportTimeoutError",
    # Exceptions - Parsing
    "ReportParseError",
    "MissingColumnError",
]
