"""Round-robin credential pool for API key rotation.

Usage:
    API_KEY=key1,key2
    plus any real entries in genai_companion.keys.FALLBACK_KEYS

On 403/429, the executor calls pool.rotate() to advance to the next key.
"""

import logging
import os
import threading

from genai_companion.errors import NoCredentialsError
from genai_companion.keys import FALLBACK_KEYS

log = logging.getLogger(__name__)

PLACEHOLDER_MARKER = "INSERT_YOUR_KEY"
_MIN_KEY_LENGTH = 10


def is_usable_key(key: str | None) -> bool:
    """Reject empty, too-short and placeholder entries."""
    return bool(key) and len(key) > _MIN_KEY_LENGTH and PLACEHOLDER_MARKER not in key


def collect_keys(primary: str | None, fallbacks: list[str] | None = None) -> list[str]:
    """Primary (comma-separated allowed) first, then fallbacks; filtered, deduped."""
    raw = (primary or "").split(",") + list(fallbacks or [])
    keys: list[str] = []
    for k in raw:
        k = (k or "").strip()
        if is_usable_key(k) and k not in keys:
            keys.append(k)
    return keys


def _genai_client(api_key: str):
    import google.genai as genai

    return genai.Client(api_key=api_key)


class KeyPool:
    """Filtered API keys plus the rotation cursor.

    Construction never fails; an empty pool raises NoCredentialsError on
    first use. Every client() call builds a fresh SDK client.
    """

    def __init__(self, keys: list[str], client_factory=None):
        self._keys = list(keys)
        self._factory = client_factory or _genai_client
        self._idx = 0
        self._lock = threading.Lock()

    @classmethod
    def from_env(cls, client_factory=None) -> "KeyPool":
        keys = collect_keys(os.environ.get("API_KEY"), FALLBACK_KEYS)
        if not keys:
            log.error("No valid API key found. Set the API_KEY environment variable.")
        return cls(keys, client_factory=client_factory)

    def _require_keys(self):
        if not self._keys:
            raise NoCredentialsError(
                "No API key configured. Set API_KEY or add entries to FALLBACK_KEYS."
            )

    @property
    def position(self) -> int:
        return self._idx

    @property
    def current(self) -> str:
        self._require_keys()
        return self._keys[self._idx % len(self._keys)]

    def client(self):
        """SDK client bound to the current key."""
        return self._factory(self.current)

    def rotate(self) -> bool:
        """Advance to the next key. Returns True if there are multiple keys."""
        if len(self._keys) <= 1:
            return False
        with self._lock:
            self._idx = (self._idx + 1) % len(self._keys)
        return True

    def __len__(self):
        return len(self._keys)
