"""Companion class: chat and speech over a rotating key pool."""

import asyncio
import logging

from genai_companion.ops import chat, speech
from genai_companion.ops._parts import ImagePart
from genai_companion.ops._pool import KeyPool
from genai_companion.ops._rotation import RotationPolicy, with_key_rotation

log = logging.getLogger(__name__)


def _run_async(coro):
    # asyncio.run only outside a running loop
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    import nest_asyncio

    nest_asyncio.apply()
    loop = asyncio.get_event_loop()
    return loop.run_until_complete(coro)


class Companion:
    """Gemini chat + TTS with API key rotation.

    Every request goes through with_key_rotation(): on 403/429 (or whatever
    the policy says) the next key is tried, up to one attempt per key. The
    pool cursor is kept between calls.

    Token counts are cumulative across calls.
    """

    def __init__(
        self,
        keys: list[str] | None = None,
        chat_model: str | None = None,
        tts_model: str | None = None,
        policy: RotationPolicy | None = None,
        client_factory=None,
    ):
        if keys is None:
            self.pool = KeyPool.from_env(client_factory=client_factory)
        else:
            self.pool = KeyPool(keys, client_factory=client_factory)
        self.chat_model = chat_model or chat.model_id()
        self.tts_model = tts_model or speech.model_id()
        self.policy = policy or RotationPolicy()
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    def _track(self, usage: dict):
        self.total_input_tokens += usage.get("input_tokens", 0)
        self.total_output_tokens += usage.get("output_tokens", 0)

    async def achat(
        self,
        prompt: str,
        image: ImagePart | dict | None = None,
        history=None,
        system_instruction: str = "",
    ) -> str:
        async def op(client):
            return await chat.call(
                client,
                self.chat_model,
                prompt,
                image=image,
                history=history,
                system_instruction=system_instruction,
            )

        text, usage = await with_key_rotation(self.pool, op, self.policy)
        self._track(usage)
        return text

    async def aspeak(self, text: str, voice, cache: bool = False) -> str:
        """Base64 audio (24kHz 16-bit mono PCM) for text spoken in voice.

        cache=True reuses audio stored on disk for the same model, text and voice.
        """
        voice = getattr(voice, "value", voice)
        self.pool.current  # raises NoCredentialsError on an empty pool
        if cache:
            cached = speech.lookup(self.tts_model, text, voice)
            if cached is not None:
                log.debug("speech cache hit for voice %s", voice)
                return cached

        async def op(client):
            return await speech.call(client, self.tts_model, text, voice)

        audio, usage = await with_key_rotation(self.pool, op, self.policy)
        self._track(usage)
        if cache:
            speech.store(self.tts_model, text, voice, audio)
        return audio

    def chat(
        self,
        prompt: str,
        image: ImagePart | dict | None = None,
        history=None,
        system_instruction: str = "",
    ) -> str:
        return _run_async(self.achat(prompt, image, history, system_instruction))

    def speak(self, text: str, voice, cache: bool = False) -> str:
        return _run_async(self.aspeak(text, voice, cache=cache))
