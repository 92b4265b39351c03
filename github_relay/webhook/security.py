"""
Webhook Security Module

This module handles verification of GitHub webhook payloads. GitHub signs
each delivery with HMAC-SHA256 over the raw body using the shared webhook
secret and sends the result in the X-Hub-Signature-256 header.

Design Decisions:
- Use constant-time comparison to prevent timing attacks
- Fail closed: malformed signatures are reported as a mismatch, never raised
- Keep verification a pure function; logging and HTTP mapping live in the
  dispatcher
"""

import hashlib
import hmac
import re
from typing import Optional

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="

HEX_DIGEST_PATTERN = re.compile(r"(?:[0-9a-f]{2})+")


def compute_signature(raw_body: bytes, secret: str) -> str:
    """
    Compute the X-Hub-Signature-256 header value GitHub would send.

    Args:
        raw_body: Raw request body bytes
        secret: Shared webhook secret

    Returns:
        Header value of the form ``sha256=<hex>``
    """
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(
    signature_header: Optional[str],
    raw_body: bytes,
    secret: str
) -> bool:
    """
    Verify a GitHub webhook signature.

    The ``sha256=`` prefix is stripped when present; otherwise the whole
    header is treated as the hex digest.

    Args:
        signature_header: Value of the X-Hub-Signature-256 header
        raw_body: Raw request body bytes
        secret: Shared webhook secret

    Returns:
        True if the signature matches, False on mismatch or any malformed input
    """
    try:
        signature = signature_header
        if signature.startswith(SIGNATURE_PREFIX):
            signature = signature[len(SIGNATURE_PREFIX):]

        # GitHub sends lowercase hex; anything else cannot match
        if not HEX_DIGEST_PATTERN.fullmatch(signature):
            return False

        received = bytes.fromhex(signature)
        expected = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()

        return hmac.compare_digest(received, expected)
    except (AttributeError, TypeError, ValueError):
        return False
