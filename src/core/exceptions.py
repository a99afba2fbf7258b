"""
Custom Exceptions for the Credential Report Adapter
===================================================

This module defines a hierarchy of custom exceptions used throughout
the application for consistent error handling and reporting.

Exception Hierarchy
-------------------
::

    CredentialReportError (base)
    ├── AWSClientError
    │   ├── CredentialsError
    │   ├── RegionError
    │   └── ServiceError
    ├── ReportFetchError
    │   ├── ReportGenerationError
    │   └── ReportTimeoutError
    └── ReportParseError
        └── MissingColumnError

Only the "report still being generated" condition is ever retried, and that
is handled inside the poller. Every exception raised from this hierarchy
aborts the whole read.

Example
-------
>>> from src.core.exceptions import ReportFetchError, ReportTimeoutError
>>>
>>> try:
...     report = fetcher.fetch()
... except ReportTimeoutError as e:
...     print(f"Report not ready in time: {e}")
... except ReportFetchError as e:
...     print(f"AWS error: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class CredentialReportError(Exception):
    """
    Base exception for all credential report errors.

    All custom exceptions in the application inherit from this class,
    allowing for broad exception catching when needed.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context about the error.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Additional error details.

    Example
    -------
    >>> raise CredentialReportError("Something went wrong", details={"code": 500})
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation of the error.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# AWS Client Exceptions
# =============================================================================


class AWSClientError(CredentialReportError):
    """
    Base exception for AWS client-related errors.

    Raised when there's an issue with AWS connectivity, authentication,
    or service access.

    Parameters
    ----------
    message : str
        Human-readable error message.
    service : str, optional
        The AWS service that caused the error.
    region : str, optional
        The AWS region where the error occurred.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        full_details = details or {}
        if service:
            full_details["service"] = service
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class CredentialsError(AWSClientError):
    """
    Raised when AWS credentials are invalid, missing, or expired.

    Example
    -------
    >>> raise CredentialsError(
    ...     "AWS credentials not found",
    ...     details={"hint": "Run 'aws configure' to set up credentials"}
    ... )
    """

    pass


class RegionError(AWSClientError):
    """
    Raised when there's an issue with the specified AWS region.

    Example
    -------
    >>> raise RegionError(
    ...     "Invalid region specified",
    ...     region="us-invalid-1"
    ... )
    """

    pass


class ServiceError(AWSClientError):
    """
    Raised when there's an error accessing a specific AWS service.

    Example
    -------
    >>> raise ServiceError(
    ...     "Failed to create iam client",
    ...     service="iam",
    ...     region="us-east-1"
    ... )
    """

    pass


# =============================================================================
# Report Retrieval Exceptions
# =============================================================================


class ReportFetchError(CredentialReportError):
    """
    Raised when a call to the IAM API fails while reading the report.

    Covers transport and authorization failures of GetCredentialReport
    and ListVirtualMFADevices. These are never retried.

    Parameters
    ----------
    message : str
        Human-readable error message.
    operation : str, optional
        The IAM API operation that failed (e.g. 'GetCredentialReport').
    error_code : str, optional
        The AWS error code returned by the service.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        self.error_code = error_code
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        if error_code:
            full_details["error_code"] = error_code
        super().__init__(message, full_details)


class ReportGenerationError(ReportFetchError):
    """
    Raised when the request to start report generation fails.

    Example
    -------
    >>> raise ReportGenerationError(
    ...     "Failed to generate credential report: AccessDenied",
    ...     operation="GenerateCredentialReport",
    ...     error_code="AccessDenied",
    ... )
    """

    pass


class ReportTimeoutError(ReportFetchError):
    """
    Raised when the report is still being generated after the time budget.

    Example
    -------
    >>> raise ReportTimeoutError(
    ...     "Credential report not ready after 60 seconds",
    ...     operation="GetCredentialReport",
    ...     details={"timeout_seconds": 60, "attempts": 30}
    ... )
    """

    pass


# =============================================================================
# Parser Exceptions
# =============================================================================


class ReportParseError(CredentialReportError):
    """
    Raised when the report payload is not valid CSV.

    Parameters
    ----------
    message : str
        Human-readable error message.
    line : int, optional
        1-based line number in the payload where parsing failed.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.line = line
        full_details = details or {}
        if line is not None:
            full_details["line"] = line
        super().__init__(message, full_details)


class MissingColumnError(ReportParseError):
    """
    Raised when the report header lacks one or more required columns.

    Example
    -------
    >>> raise MissingColumnError(["user", "mfa_active"])
    """

    def __init__(
        self,
        columns: List[str],
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.columns = list(columns)
        full_details = details or {}
        full_details["missing_columns"] = self.columns
        super().__init__(
            f"Credential report is missing required columns: {', '.join(self.columns)}",
            line=1,
            details=full_details,
        )
