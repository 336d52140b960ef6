"""Provider-specific delivery authentication.

- GitHub: HMAC-SHA1 of the raw request body, sent as "sha1=<hex_digest>"
  in x-hub-signature
- GitLab: the shared secret echoed verbatim in x-gitlab-token
- Docker Hub: no scheme, so a hook with a secret never authenticates

All comparisons use ``hmac.compare_digest``.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from typing import TYPE_CHECKING

from hookshot.logging import get_logger
from hookshot.models import SourcePlatform

if TYPE_CHECKING:
    from hookshot.models import Delivery, Hook

logger = get_logger(__name__)

GITHUB_SIGNATURE_PREFIX = "sha1="
_HEX_DIGEST = re.compile(r"(?:[0-9a-fA-F]{2})+")


def _to_bytes(value: bytes | str) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def compute_github_signature(body: bytes | str, secret: str) -> str:
    """Compute the GitHub HMAC-SHA1 signature for a request body.

    Args:
        body: Exact request body that was (or will be) sent.
        secret: Shared secret for HMAC.

    Returns:
        Signature in format "sha1=<hex_digest>".
    """
    signature = hmac.new(
        key=secret.encode("utf-8"),
        msg=_to_bytes(body),
        digestmod=hashlib.sha1,
    ).hexdigest()
    return f"{GITHUB_SIGNATURE_PREFIX}{signature}"


def verify_github_signature(body: bytes | str, secret: str, signature: str) -> bool:
    """Verify a GitHub x-hub-signature header against a request body.

    Args:
        body: Exact request body as received.
        secret: Shared secret for HMAC.
        signature: Header value (format: "sha1=<hex_digest>").

    Returns:
        True if the signature is well-formed and matches, False otherwise.
    """
    if not signature.startswith(GITHUB_SIGNATURE_PREFIX):
        logger.debug("Signature has unexpected prefix")
        return False

    digest = signature[len(GITHUB_SIGNATURE_PREFIX) :]
    if not _HEX_DIGEST.fullmatch(digest):
        logger.debug("Signature digest is not valid hex")
        return False
    received = bytes.fromhex(digest)

    expected = hmac.new(
        key=secret.encode("utf-8"),
        msg=_to_bytes(body),
        digestmod=hashlib.sha1,
    ).digest()
    return hmac.compare_digest(expected, received)


def verify_gitlab_token(token: str, secret: str) -> bool:
    """Verify a GitLab x-gitlab-token header against the shared secret.

    Comparison is exact and case-sensitive.
    """
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


def authenticate(hook: Hook, delivery: Delivery) -> bool:
    """Decide whether a delivery is authentic for a given hook.

    A hook without a secret accepts every delivery. This is a
    trust-on-first-use convenience and gives no security guarantee.

    Args:
        hook: Hook whose secret is checked.
        delivery: Completed delivery.

    Returns:
        True if the hook's callback may run for this delivery.
    """
    if hook.secret is None:
        logger.debug("No secret configured, skipping authentication", hook=hook.event_pattern)
        return True

    if delivery.signature is None:
        logger.debug("Delivery carries no signature", source=delivery.source_platform.value)
        return False

    if delivery.source_platform is SourcePlatform.GITHUB:
        if delivery.raw_request_body is None:
            logger.debug("Request body missing, cannot verify signature")
            return False
        return verify_github_signature(delivery.raw_request_body, hook.secret, delivery.signature)

    if delivery.source_platform is SourcePlatform.GITLAB:
        return verify_gitlab_token(delivery.signature, hook.secret)

    logger.debug(
        "No authentication scheme for source",
        source=delivery.source_platform.value,
    )
    return False
