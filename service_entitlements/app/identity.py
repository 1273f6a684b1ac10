"""
Identity extraction from the ``x-rh-identity`` header.

The gateway in front of this service authenticates the caller and forwards
the identity as base64-encoded JSON. Only decoding happens here.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict

from fastapi import Request

from shared.errors import ValidationError
from shared.logging import set_identity_context


IDENTITY_HEADER = "x-rh-identity"


@dataclass(frozen=True)
class Identity:
    """Caller identity."""
    org_id: str
    account_number: str = ""


def decode_identity(header_value: str) -> Identity:
    """Decode an ``x-rh-identity`` header value."""
    try:
        decoded = base64.b64decode(header_value, validate=True)
        document = json.loads(decoded)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(
            "Unable to decode identity header",
            details={"header": IDENTITY_HEADER, "error": str(e)}
        ) from e

    identity = document.get("identity") if isinstance(document, dict) else None
    if not isinstance(identity, dict):
        raise ValidationError("Identity header is missing the identity object", details={"header": IDENTITY_HEADER})

    internal: Dict[str, Any] = identity.get("internal") or {}
    if not isinstance(internal, dict):
        internal = {}
    org_id = internal.get("org_id") or identity.get("org_id")
    if not org_id or not isinstance(org_id, str):
        raise ValidationError("Identity header is missing org_id", details={"header": IDENTITY_HEADER})

    account_number = identity.get("account_number") or ""
    if not isinstance(account_number, str):
        account_number = str(account_number)

    return Identity(org_id=org_id, account_number=account_number)


def encode_identity(org_id: str, account_number: str = "") -> str:
    """Build a header value for an identity."""
    document = {
        "identity": {
            "account_number": account_number,
            "org_id": org_id,
            "internal": {"org_id": org_id},
        }
    }
    return base64.b64encode(json.dumps(document).encode("utf-8")).decode("ascii")


async def get_identity(request: Request) -> Identity:
    """FastAPI dependency that resolves the caller identity."""
    header_value = request.headers.get(IDENTITY_HEADER)
    if not header_value:
        raise ValidationError("Missing identity header", details={"header": IDENTITY_HEADER})

    identity = decode_identity(header_value)
    set_identity_context(org_id=identity.org_id, account_number=identity.account_number)
    return identity
