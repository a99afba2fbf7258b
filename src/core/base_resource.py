"""
Base Resource Module
====================

Provides the abstract base class for computed, read-only resources whose
state is handed to an infrastructure-as-code engine.

The engine owns diffing and reconciliation. A resource only answers the
lifecycle calls the engine makes (create, read, update, delete, import)
and returns a :class:`ResourceState` snapshot that can be stored as-is.

Classes
-------
ResourceState
    Data class holding the identifier and attributes of a resource read.
BaseResource
    Abstract base class for computed resources.

Example
-------
>>> from src.core.base_resource import BaseResource
>>>
>>> class AccountAliasResource(BaseResource):
...     RESOURCE_ID = "account-alias"
...
...     def get_resource_type(self) -> str:
...         return "aws_account_alias"
...
...     def get_schema(self) -> dict:
...         return {"alias": {"type": "string", "computed": True}}
...
...     def read(self) -> ResourceState:
...         return self._state({"alias": "prod"})

See Also
--------
CredentialReportResource : Concrete implementation for the IAM credential report.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Module logger
logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResourceState:
    """
    Snapshot of a resource as returned by a read.

    Parameters
    ----------
    resource_type : str
        Type of the resource (e.g., 'aws_iam_credential_report').
    resource_id : str
        Identifier the engine stores the state under.
    attributes : dict
        Attribute values matching the resource schema.
    read_time : datetime, optional
        When the read was performed (defaults to current UTC time).

    Examples
    --------
    >>> state = resource.read()
    >>> state.resource_id
    'iam-credential-report'
    >>> len(state.attributes["report"])
    12
    """

    resource_type: str
    resource_id: str
    attributes: Dict[str, Any]
    read_time: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the state to a dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation suitable for JSON serialization.
        """
        return {
            "resource_type": self.resource_type,
            "id": self.resource_id,
            "attributes": self.attributes,
            "read_time": self.read_time.isoformat(),
        }

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"ResourceState(resource_type='{self.resource_type}', "
            f"id='{self.resource_id}', "
            f"attributes={sorted(self.attributes)})"
        )


class BaseResource(ABC):
    """
    Abstract base class for computed resources.

    Subclasses describe a singleton snapshot with a fixed synthetic
    identifier. Create and update both just assign that identifier and
    perform a read, so repeated calls always run the identical steps.
    Delete never touches AWS.

    Parameters
    ----------
    aws_client : AWSClient
        Instance of AWSClient for AWS API access.

    Attributes
    ----------
    aws_client : AWSClient
        The AWS client instance.
    resource_id : str or None
        Identifier assigned by the last create, update or import.
    """

    #: Fixed identifier of the singleton resource.
    RESOURCE_ID: str = ""

    def __init__(self, aws_client) -> None:
        self.aws_client = aws_client
        self.resource_id: Optional[str] = None
        logger.debug(f"Initialized {self.__class__.__name__}")

    @abstractmethod
    def get_resource_type(self) -> str:
        """
        Get the type of resource this class handles.

        Returns
        -------
        str
            Lowercase identifier with underscores (e.g., 'aws_iam_credential_report').
        """
        pass

    @abstractmethod
    def get_schema(self) -> Dict[str, Any]:
        """
        Describe the attributes stored in the state record.

        Returns
        -------
        dict
            Mapping of attribute name to its schema description.
        """
        pass

    @abstractmethod
    def read(self) -> ResourceState:
        """
        Read the resource from AWS.

        Returns
        -------
        ResourceState
            Freshly built state; nothing is cached between reads.
        """
        pass

    def create(self) -> ResourceState:
        """Assign the fixed identifier and read the resource."""
        self.resource_id = self.RESOURCE_ID
        logger.info(f"Creating {self.get_resource_type()} '{self.resource_id}'")
        return self.read()

    def update(self) -> ResourceState:
        """Same as :meth:`create`; computed resources have nothing to update."""
        return self.create()

    def delete(self) -> None:
        """
        Forget the resource.

        No AWS call is made; the data source the snapshot was read from
        is left untouched.
        """
        logger.info(f"Deleting {self.get_resource_type()} '{self.resource_id}' (no-op)")
        self.resource_id = None

    def import_state(self, resource_id: str) -> str:
        """
        Accept an existing identifier unchanged.

        The engine is expected to call :meth:`read` afterwards.
        """
        self.resource_id = resource_id
        logger.debug(f"Imported {self.get_resource_type()} '{resource_id}'")
        return resource_id

    def _state(self, attributes: Dict[str, Any]) -> ResourceState:
        """Wrap attributes in a ResourceState for this resource."""
        return ResourceState(
            resource_type=self.get_resource_type(),
            resource_id=self.resource_id or self.RESOURCE_ID,
            attributes=attributes,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"{self.__class__.__name__}("
            f"resource_type='{self.get_resource_type()}', "
            f"id={self.resource_id!r})"
        )
