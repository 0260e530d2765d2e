"""Typed request parts and conversion to google.genai contents."""

import base64
from enum import Enum
from typing import NamedTuple


class TextPart(NamedTuple):
    text: str


class ImagePart(NamedTuple):
    """Inline image. data is base64 text (as a browser FileReader gives) or raw bytes."""

    mime_type: str
    data: str | bytes


class Turn(NamedTuple):
    role: str
    parts: list


class VoiceName(str, Enum):
    """Gemini prebuilt TTS voices. Plain strings are accepted too."""

    ZEPHYR = "Zephyr"
    PUCK = "Puck"
    CHARON = "Charon"
    KORE = "Kore"
    FENRIR = "Fenrir"
    LEDA = "Leda"
    ORUS = "Orus"
    AOEDE = "Aoede"


def _to_part(part):
    import google.genai.types as types

    if isinstance(part, TextPart):
        return types.Part(text=part.text)
    if isinstance(part, ImagePart):
        data = part.data
        if isinstance(data, str):
            data = base64.b64decode(data)
        return types.Part.from_bytes(data=data, mime_type=part.mime_type)
    if isinstance(part, dict):
        if "inlineData" in part or "inline_data" in part:
            blob = part.get("inlineData") or part.get("inline_data")
            mime = blob.get("mimeType") or blob.get("mime_type")
            return _to_part(ImagePart(mime, blob["data"]))
        return types.Part(text=part.get("text", ""))
    raise TypeError(f"Unsupported part type: {type(part).__name__}")


def _to_content(turn):
    import google.genai.types as types

    if isinstance(turn, dict):
        turn = Turn(turn.get("role", "user"), turn.get("parts", []))
    return types.Content(role=turn.role, parts=[_to_part(p) for p in turn.parts])


def build_contents(prompt: str, image: ImagePart | dict | None = None, history=None) -> list:
    """History turns, then a user turn holding the image (if any) and the prompt."""
    import google.genai.types as types

    contents = [_to_content(t) for t in history or []]

    current = []
    if isinstance(image, dict):
        image = ImagePart(image.get("mimeType") or image.get("mime_type"), image["data"])
    if image is not None:
        current.append(_to_part(image))
    if prompt:
        current.append(_to_part(TextPart(prompt)))

    contents.append(types.Content(role="user", parts=current))
    return contents
