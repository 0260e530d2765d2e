"""Try the companion from the command line.

Usage:
  uv run python demo.py "Tell me a joke" --system "You are a grumpy pirate."
  uv run python demo.py "Hello there" --speak out.wav --voice Puck
  uv run python demo.py "What's in this picture?" --image photo.jpg

Needs API_KEY (or real entries in genai_companion/keys.py).
"""

import argparse
import base64
import logging
import mimetypes
import time
from pathlib import Path

from genai_companion import Companion, ImagePart, VoiceName, to_wav


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("prompt")
    parser.add_argument("--system", default="", help="system instruction / persona")
    parser.add_argument("--image", type=Path, help="image file to attach")
    parser.add_argument("--speak", type=Path, help="write the reply as WAV here")
    parser.add_argument("--voice", default=VoiceName.KORE.value)
    parser.add_argument("--cache", action="store_true", help="reuse audio cached on disk")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    bot = Companion()
    print(f"{len(bot.pool)} usable key(s), chat={bot.chat_model} tts={bot.tts_model}")

    image = None
    if args.image:
        mime = mimetypes.guess_type(args.image.name)[0] or "image/jpeg"
        image = ImagePart(mime, base64.b64encode(args.image.read_bytes()).decode())

    t0 = time.monotonic()
    reply = bot.chat(args.prompt, image=image, system_instruction=args.system)
    print(reply)
    print(f"  [{time.monotonic() - t0:.1f}s, key {bot.pool.position + 1}/{len(bot.pool)}]")

    if args.speak:
        t0 = time.monotonic()
        audio = bot.speak(reply, args.voice, cache=args.cache)
        args.speak.write_bytes(to_wav(audio))
        print(f"  wrote {args.speak} [{time.monotonic() - t0:.1f}s]")

    print(f"  {bot.total_input_tokens} in | {bot.total_output_tokens} out")


if __name__ == "__main__":
    main()
