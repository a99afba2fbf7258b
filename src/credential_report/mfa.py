"""
Virtual MFA enrichment.

The credential report only says whether MFA is active. Whether the device
is virtual comes from ``ListVirtualMFADevices``: each device serial is an
ARN ending in the name of the user it belongs to, which is matched back
against the report rows.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Set

from src.credential_report.models import ROOT_ACCOUNT_USER, ReportRow

# Module logger
logger = logging.getLogger(__name__)

# Device name IAM assigns to the root account's virtual MFA device
ROOT_MFA_DEVICE_NAME = "root-account-mfa-device"

MFA_SERIAL_PATTERN = re.compile(r"^arn:aws:iam::[0-9]+:mfa/(.*)$")


def extract_mfa_account_name(serial_number: str) -> Optional[str]:
    """
    Get the report user name a virtual MFA serial number belongs to.

    Returns None when the serial is not an IAM MFA ARN.

    >>> extract_mfa_account_name("arn:aws:iam::123456789012:mfa/alice")
    'alice'
    >>> extract_mfa_account_name("arn:aws:iam::123456789012:mfa/root-account-mfa-device")
    '<root_account>'
    >>> extract_mfa_account_name("not-an-arn") is None
    True
    """
    match = MFA_SERIAL_PATTERN.fullmatch(serial_number)
    if match is None:
        return None

    account_name = match.group(1)
    if account_name == ROOT_MFA_DEVICE_NAME:
        account_name = ROOT_ACCOUNT_USER
    return account_name


def virtual_mfa_accounts(devices: Iterable[Dict[str, Any]]) -> Set[str]:
    """
    Build the set of report user names that have a virtual MFA device.

    Devices whose serial number does not match are skipped.
    """
    accounts: Set[str] = set()
    for device in devices:
        serial_number = device.get("SerialNumber", "")
        account_name = extract_mfa_account_name(serial_number)
        if account_name is None:
            logger.debug(f"Skipping unrecognized MFA serial number: {serial_number!r}")
            continue
        accounts.add(account_name)
    return accounts


def apply_virtual_mfa(rows: Iterable[ReportRow], accounts: Set[str]) -> List[ReportRow]:
    """
    Flag rows whose user has a virtual MFA device.

    Rows for other users are returned unchanged. Order is preserved.
    """
    return [
        replace(row, mfa_virtual=True) if row.user in accounts else row
        for row in rows
    ]
