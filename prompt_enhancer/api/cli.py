"""
Terminal CLI adapter for the prompt enhancer.

Architectural role:
- Exposes one-shot prompt enhancement from the command line.
- Converts local image files into `data:` URLs for editing requests.
- Delegates all enhancement work to the memoized entrypoint.

Request lifecycle (one invocation):
1. Parse arguments.
2. Optionally read and base64-encode `--image`.
3. Run the enhancer once (or the `--demo` matrix) under `asyncio.run`.
4. Print the resulting prompt(s) to stdout.

Input validation behavior:
- A prompt is required unless `--demo` is given.
- Unreadable image files abort with exit status 2.

Side effects:
- Loads environment variables via `load_dotenv()`.
- Configures root logging (`--verbose` enables the trace channel).
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import asyncio
import base64
import logging
import mimetypes
import sys

from prompt_enhancer.core.factory import build_enhancer


# A 1x1 red pixel GIF used by the demo editing runs.
DEMO_IMAGE = "data:image/gif;base64,R0lGODlhAQABAIABAP8AAP///yH5BAEKAAEALAAAAAABAAEAAAICTAEAOw=="

DEMO_GENERATION = [
    ("flux", "a cozy bookstore"),
    ("turbo", "a person on a city street"),
    ("kontext", "a girl reading a book"),
    ("gptimage", "a menu for a tapas bar"),
]

DEMO_EDITING = [
    ("kontext", "make the background a sunny beach"),
    ("gptimage", "change the style to japanese ukiyo-e woodblock print"),
    ("flux", "this should fail gracefully"),
]


def image_to_data_url(path: str) -> str:
    """Read a local image file and return it as a base64 `data:` URL."""
    mime_type, _ = mimetypes.guess_type(path)
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = "image/png"

    with open(path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")

    return f"data:{mime_type};base64,{encoded}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-enhancer",
        description="Rewrite an image prompt for a specific image model",
    )
    parser.add_argument("prompt", nargs="?", help="Raw prompt text (may be percent-encoded)")
    parser.add_argument("--model", default="flux", help="Target image model (default: flux)")
    parser.add_argument("--seed", type=int, default=42, help="Seed forwarded to the completion service")
    parser.add_argument("--image", default=None, help="Local image file for editing requests")
    parser.add_argument("--demo", action="store_true", help="Run the generation/editing demo matrix")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show trace and timing logs")
    return parser


async def run_demo(enhancer, seed: int, out=None) -> None:
    """Enhance a fixed set of generation and editing prompts and print them."""
    out = out or sys.stdout

    print("--- RUNNING GENERATION TESTS ---", file=out)
    for model, prompt in DEMO_GENERATION:
        enhanced = await enhancer(prompt, model, seed)
        print("=" * 33, file=out)
        print(f"Model: {model} (Generation)", file=out)
        print(f'Original Prompt: "{prompt}"', file=out)
        print("-" * 33, file=out)
        print("Enhanced Prompt:\n" + enhanced, file=out)

    print("\n--- RUNNING EDITING TESTS ---", file=out)
    for model, prompt in DEMO_EDITING:
        enhanced = await enhancer(prompt, model, seed, DEMO_IMAGE)
        print("=" * 33, file=out)
        print(f"Model: {model} (Editing)", file=out)
        print(f'Original Prompt: "{prompt}"', file=out)
        print("-" * 33, file=out)
        print("Enhanced/Returned Prompt:\n" + enhanced, file=out)


def main(argv=None, enhancer=None) -> int:
    """
    Parse arguments and run one enhancement or the demo matrix.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not args.demo and not args.prompt:
        parser.error("a prompt is required unless --demo is given")

    image = None
    if args.image:
        try:
            image = image_to_data_url(args.image)
        except OSError as e:
            print(f"Cannot read image {args.image!r}: {e}", file=sys.stderr)
            return 2

    enhancer = enhancer or build_enhancer()

    if args.demo:
        asyncio.run(run_demo(enhancer, args.seed))
        return 0

    print(asyncio.run(enhancer(args.prompt, args.model, args.seed, image)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
