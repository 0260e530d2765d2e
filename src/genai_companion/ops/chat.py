"""Chat responses via native google.genai SDK."""

import os

from genai_companion.ops._parts import ImagePart, build_contents

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.8  # slightly creative
FALLBACK_TEXT = "Sorry, I couldn't think of anything."


def model_id() -> str:
    return os.environ.get("GENAI_CHAT_MODEL", DEFAULT_MODEL)


def _usage(response) -> dict:
    meta = getattr(response, "usage_metadata", None)
    if not meta:
        return {}
    return {
        "input_tokens": meta.prompt_token_count or 0,
        "output_tokens": meta.candidates_token_count or 0,
    }


async def call(
    client,
    model: str,
    prompt: str,
    image: ImagePart | dict | None = None,
    history=None,
    system_instruction: str = "",
    temperature: float = DEFAULT_TEMPERATURE,
):
    """Returns (text: str, usage: dict).

    history: prior turns, either Turn tuples or {"role", "parts": [{"text"}]} dicts.
    """
    import google.genai.types as types

    config = types.GenerateContentConfig(
        system_instruction=system_instruction or None,
        temperature=temperature,
    )
    response = await client.aio.models.generate_content(
        model=model,
        contents=build_contents(prompt, image, history),
        config=config,
    )
    return response.text or FALLBACK_TEXT, _usage(response)
