"""
AWS Client Module
=================

Connection context for the credential report adapter.

An ``AWSClient`` owns one boto3 session and the IAM and STS clients made
from it. The caller creates it and hands it to the report fetcher, so no
connection state lives at module level.

Classes
-------
AWSClient
    Session holder with IAM and STS accessors.

Example
-------
>>> from src.core.aws_client import AWSClient
>>>
>>> with AWSClient(profile="audit") as client:
...     client.validate_credentials()
...     iam = client.get_iam_client()

Notes
-----
IAM is a global service. The region only picks the endpoint that requests
are signed for, so the default of us-east-1 works for every account.

See Also
--------
boto3 : AWS SDK for Python
botocore : Low-level AWS client library
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    NoRegionError,
    ProfileNotFound,
)

from src.core.exceptions import (
    AWSClientError,
    CredentialsError,
    RegionError,
    ServiceError,
)

# Module logger
logger = logging.getLogger(__name__)

# STS error codes that mean the key pair itself is wrong
INVALID_CREDENTIAL_CODES = ("InvalidClientTokenId", "SignatureDoesNotMatch")


class AWSClient:
    """
    Lazily created boto3 session plus cached IAM and STS clients.

    Parameters
    ----------
    region : str, default="us-east-1"
        Region the IAM and STS endpoints are resolved for.
    profile : str, optional
        Named profile from the shared AWS config files.
    max_retries : int, default=3
        botocore retry attempts for throttled or dropped requests.
    timeout : int, default=30
        Connect and read timeout of each request, in seconds.

    Attributes
    ----------
    region : str
        The configured region.
    profile : str or None
        The configured profile name.

    Raises
    ------
    CredentialsError
        If the profile does not exist or no credentials can be found.
    RegionError
        If no usable region is configured.
    ServiceError
        If a service client cannot be created.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        profile: Optional[str] = None,
        max_retries: int = 3,
        timeout: int = 30,
    ) -> None:
        self.region = region
        self.profile = profile
        self.max_retries = max_retries
        self.timeout = timeout

        self._session: Optional[boto3.Session] = None
        self._clients: dict[str, Any] = {}

        self._config = self._create_config()

        logger.debug(f"Initialized AWSClient (region={region}, profile={profile})")

    def _create_config(self) -> Config:
        """
        Build the botocore config shared by every client.

        Notes
        -----
        Adaptive retries cover throttling and transport errors only. A report
        that is still being generated is retried by the report poller.
        """
        return Config(
            retries={
                "max_attempts": self.max_retries,
                "mode": "adaptive",
            },
            connect_timeout=self.timeout,
            read_timeout=self.timeout,
        )

    @property
    def session(self) -> boto3.Session:
        """The boto3 session, created on first access."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> boto3.Session:
        session_kwargs = {"region_name": self.region}
        if self.profile:
            session_kwargs["profile_name"] = self.profile

        try:
            session = boto3.Session(**session_kwargs)
        except ProfileNotFound as e:
            raise CredentialsError(
                f"AWS profile '{self.profile}' not found",
                details={
                    "profile": self.profile,
                    "hint": "Check ~/.aws/config and ~/.aws/credentials",
                },
            ) from e
        except NoRegionError as e:
            raise RegionError(
                f"Invalid or missing region: {self.region}",
                region=self.region,
            ) from e

        logger.debug(f"Created boto3 session for region {self.region}")
        return session

    def _get_client(self, service_name: str) -> Any:
        """
        Return the cached client for ``service_name``, creating it if needed.

        Raises
        ------
        CredentialsError
            If no credentials are configured.
        ServiceError
            If botocore cannot build the client.
        """
        if service_name in self._clients:
            return self._clients[service_name]

        try:
            client = self.session.client(service_name, config=self._config)
        except CredentialsError:
            raise
        except NoCredentialsError as e:
            raise CredentialsError(
                "AWS credentials not found",
                details={
                    "hint": (
                        "Run 'aws configure', pass --profile, or set "
                        "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY"
                    ),
                },
            ) from e
        except Exception as e:
            logger.exception(f"Failed to create {service_name} client")
            raise ServiceError(
                f"Failed to create {service_name} client: {e}",
                service=service_name,
                region=self.region,
            ) from e

        self._clients[service_name] = client
        logger.debug(f"Created {service_name} client for {self.region}")
        return client

    def get_iam_client(self) -> Any:
        """
        Get the IAM client the credential report is read with.

        Example
        -------
        >>> iam = client.get_iam_client()
        >>> iam.generate_credential_report()["State"]
        'STARTED'
        """
        return self._get_client("iam")

    def get_sts_client(self) -> Any:
        return self._get_client("sts")

    def validate_credentials(self) -> bool:
        """
        Check the credentials with STS GetCallerIdentity.

        Returns
        -------
        bool
            True when STS accepts the credentials.

        Raises
        ------
        CredentialsError
            If the credentials are missing, invalid or expired.
        """
        try:
            identity = self.get_sts_client().get_caller_identity()
        except CredentialsError:
            raise
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in INVALID_CREDENTIAL_CODES:
                raise CredentialsError(
                    "Invalid AWS credentials",
                    details={
                        "error_code": error_code,
                        "hint": "Check your access key and secret key",
                    },
                ) from e
            raise CredentialsError(f"Failed to validate credentials: {e}") from e
        except NoCredentialsError as e:
            raise CredentialsError("AWS credentials not found") from e
        except BotoCoreError as e:
            raise CredentialsError(f"Failed to validate credentials: {e}") from e

        logger.info(f"Credentials valid for {identity['Arn']}")
        return True

    def get_account_id(self) -> str:
        """Return the 12-digit account id of the current credentials."""
        return self.get_caller_identity()["Account"]

    def get_caller_identity(self) -> dict[str, str]:
        """
        Return the STS caller identity ('Account', 'Arn' and 'UserId').

        Raises
        ------
        AWSClientError
            If STS rejects the call.
        """
        try:
            return self.get_sts_client().get_caller_identity()
        except AWSClientError:
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get caller identity: {e}")
            raise AWSClientError(
                f"Failed to get caller identity: {e}", service="sts"
            ) from e

    def __enter__(self) -> AWSClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Drop the cached clients and session."""
        self._clients.clear()
        self._session = None

    def __repr__(self) -> str:
        return (
            f"AWSClient(region='{self.region}', "
            f"profile={self.profile!r}, "
            f"max_retries={self.max_retries})"
        )
