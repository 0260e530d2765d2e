"""Rotating request executor: retry an operation across the key pool."""

import logging
import os

log = logging.getLogger(__name__)

_DEFAULT_CODES = frozenset({403, 429})


def _codes_from_env() -> frozenset[int]:
    val = os.environ.get("GENAI_ROTATE_CODES")
    if not val:
        return _DEFAULT_CODES
    try:
        return frozenset(int(c) for c in val.split(",") if c.strip())
    except ValueError:
        raise ValueError(f"GENAI_ROTATE_CODES must be comma-separated integers, got {val!r}") from None


class RotationPolicy:
    """Which failures mean "this key is unusable, try the next one".

    codes: HTTP status codes treated as authorization/quota errors.
    match_message: also look for the codes in str(exc), for SDK errors that
        only carry the status in their message.
    """

    def __init__(self, codes=None, match_message: bool = True):
        self.codes = frozenset(codes) if codes is not None else _codes_from_env()
        self.match_message = match_message

    def __repr__(self):
        return f"RotationPolicy(codes={sorted(self.codes)}, match_message={self.match_message})"


def is_rotatable(exc: Exception, policy: RotationPolicy | None = None) -> bool:
    """Check if an exception is an authorization or quota error."""
    policy = policy or RotationPolicy()
    # google.genai reports the HTTP status in .code; other SDKs use .status_code/.status
    for attr in ("status_code", "status", "code"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and val in policy.codes:
            return True
    if policy.match_message:
        msg = str(exc)
        return any(str(c) in msg for c in policy.codes)
    return False


async def with_key_rotation(pool, operation, policy: RotationPolicy | None = None):
    """Run operation(client), rotating keys on authorization/quota errors.

    Tries at most len(pool) keys. The cursor is left wherever rotation
    stopped, so the next call starts from the last working key.
    """
    policy = policy or RotationPolicy()
    max_attempts = max(1, len(pool))

    for attempt in range(max_attempts):
        client = pool.client()
        try:
            return await operation(client)
        except Exception as e:
            log.warning(
                "Attempt %d failed with key %d/%d: %s",
                attempt + 1,
                pool.position + 1,
                len(pool),
                e,
            )
            if is_rotatable(e, policy) and attempt + 1 < max_attempts:
                pool.rotate()
                log.info("Rotating to key %d", pool.position + 1)
                continue
            raise
