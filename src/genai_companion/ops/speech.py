"""Text-to-speech via the Gemini TTS model."""

import base64
import hashlib
import io
import json
import os
import wave
from pathlib import Path

from genai_companion.errors import NoAudioDataError

DEFAULT_MODEL = "gemini-2.5-flash-preview-tts"
SAMPLE_RATE = 24000

_audio_cache = None


def model_id() -> str:
    return os.environ.get("GENAI_TTS_MODEL", DEFAULT_MODEL)


def extract_audio(response) -> bytes:
    """First inline-data payload across candidates and parts."""
    for cand in getattr(response, "candidates", None) or []:
        content = getattr(cand, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return inline.data
    raise NoAudioDataError("No audio data received from API")


def speech_config(voice: str):
    import google.genai.types as types

    return types.GenerateContentConfig(
        response_modalities=["AUDIO"],
        speech_config=types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
            )
        ),
    )


def _cache():
    """Opened on first use under GENAI_CACHE_DIR."""
    global _audio_cache
    if _audio_cache is None:
        from diskcache import Cache

        cache_dir = os.environ.get("GENAI_CACHE_DIR") or "/tmp/genai_companion_cache"
        _audio_cache = Cache(str(Path(cache_dir) / "speech"))
    return _audio_cache


def cache_key(model: str, text: str, voice: str) -> str:
    blob = json.dumps({"model": model, "text": text, "voice": voice}, sort_keys=True)
    return hashlib.sha256(blob.encode()).hexdigest()


def lookup(model: str, text: str, voice: str) -> str | None:
    """Cached base64 audio for this (model, text, voice), if any."""
    return _cache().get(cache_key(model, text, voice))


def store(model: str, text: str, voice: str, audio: str):
    _cache().set(cache_key(model, text, voice), audio)


async def call(client, model: str, text: str, voice: str):
    """Returns (audio_b64: str, usage: dict)."""
    import google.genai.types as types

    voice = getattr(voice, "value", voice)
    response = await client.aio.models.generate_content(
        model=model,
        contents=[types.Content(parts=[types.Part(text=text)])],
        config=speech_config(voice),
    )

    data = extract_audio(response)
    # SDK decodes inline data to bytes; callers expect base64 text
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")

    usage = {}
    meta = getattr(response, "usage_metadata", None)
    if meta:
        usage["input_tokens"] = meta.prompt_token_count or 0
        usage["output_tokens"] = meta.candidates_token_count or 0
    return data, usage


def to_wav(pcm: bytes | str, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Wrap 16-bit mono PCM (raw or base64) in a WAV container."""
    if isinstance(pcm, str):
        pcm = base64.b64decode(pcm)
    if len(pcm) % 2:
        raise ValueError("PCM payload has odd length")

    out = io.BytesIO()
    with wave.open(out, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return out.getvalue()
