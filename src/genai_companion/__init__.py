"""Gemini chat and text-to-speech for a chat app, with API key rotation.

Keys come from API_KEY (single key or comma-separated list) followed by
genai_companion.keys.FALLBACK_KEYS. When a request fails with 403 or 429 the
next key is tried, once per key; other errors are raised as-is.

Usage:
    from genai_companion import generate_chat_response, generate_speech
    text = generate_chat_response("Hi!", None, [], "You are a pirate.")
    audio_b64 = generate_speech(text, "Kore")

    from genai_companion import Companion
    bot = Companion(keys=["key1...", "key2..."])
    reply = await bot.achat("Describe this", image=ImagePart("image/png", b64))

Environment:
  - API_KEY: primary key(s)
  - GENAI_CHAT_MODEL / GENAI_TTS_MODEL: model overrides
  - GENAI_ROTATE_CODES: status codes that trigger rotation (default 403,429)
  - GENAI_CACHE_DIR: where speak(..., cache=True) stores audio
    (default /tmp/genai_companion_cache)
"""

import logging

from genai_companion.client import Companion
from genai_companion.errors import CompanionError, NoAudioDataError, NoCredentialsError
from genai_companion.ops._parts import ImagePart, TextPart, Turn, VoiceName
from genai_companion.ops._pool import KeyPool, collect_keys
from genai_companion.ops._rotation import RotationPolicy, is_rotatable, with_key_rotation
from genai_companion.ops.speech import to_wav

for name in ("httpx", "google_genai", "google_genai.models"):
    logging.getLogger(name).setLevel(logging.WARNING)

__all__ = [
    "Companion",
    "CompanionError",
    "ImagePart",
    "KeyPool",
    "NoAudioDataError",
    "NoCredentialsError",
    "RotationPolicy",
    "TextPart",
    "Turn",
    "VoiceName",
    "collect_keys",
    "generate_chat_response",
    "generate_speech",
    "is_rotatable",
    "reset_default",
    "to_wav",
    "with_key_rotation",
]

_default: Companion | None = None


def _get_default() -> Companion:
    global _default
    if _default is None:
        _default = Companion()
    return _default


def reset_default():
    """Drop the shared Companion (e.g. after changing API_KEY)."""
    global _default
    _default = None


def generate_chat_response(
    prompt: str,
    image_data: ImagePart | dict | None = None,
    history=None,
    system_instruction: str = "",
) -> str:
    """Reply text for prompt (plus optional image) given prior turns and a persona."""
    return _get_default().chat(prompt, image_data, history, system_instruction)


def generate_speech(text: str, voice_name) -> str:
    """Base64-encoded audio of text spoken by voice_name."""
    return _get_default().speak(text, voice_name)
