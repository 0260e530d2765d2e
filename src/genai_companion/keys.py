"""Fallback API keys for rotation.

Add extra keys here; they are tried after API_KEY when a request fails with
an authorization or quota error. Entries still containing the placeholder
text are ignored.
"""

FALLBACK_KEYS: list[str] = [
    "INSERT_YOUR_KEY_EXTRA_1_HERE",
    "INSERT_YOUR_KEY_EXTRA_2_HERE",
    "INSERT_YOUR_KEY_EXTRA_3_HERE",
]
