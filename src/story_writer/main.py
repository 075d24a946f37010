"""CLI entry point for story generation.

Usage:
    python -m src.story_writer.main key set sk-...
    python -m src.story_writer.main generate --topic "waiting"
    python -m src.story_writer.main list --search time
    python -m src.story_writer.main show ai_1A2B3C4D
"""

from __future__ import annotations

import argparse
import sys

from src.common.logging import setup_logging

from .errors import GenerationError
from .writer import StoryWriter

logger = setup_logging(module_name="story_writer.main")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate short stories in the author's style")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a new story")
    gen.add_argument("--topic", default="", help="Story topic (default: free topic)")

    ls = sub.add_parser("list", help="List stories")
    ls.add_argument("--search", default="", help="Filter by title, excerpt or tag")

    show = sub.add_parser("show", help="Print one story")
    show.add_argument("id", help="Story id")

    key = sub.add_parser("key", help="Manage the API key")
    key_sub = key.add_subparsers(dest="key_command", required=True)
    key_set = key_sub.add_parser("set", help="Save the API key")
    key_set.add_argument("value")
    key_sub.add_parser("delete", help="Delete the API key")
    key_sub.add_parser("status", help="Show whether an API key is set")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    writer = StoryWriter()

    if args.command == "generate":
        if not writer.has_api_key():
            print("Set an API key first: key set <value>")
            return 1
        try:
            story = writer.generate(topic=args.topic)
        except GenerationError as e:
            logger.error("Generation failed: %s", e.message)
            print(f"\nError: {e.message}")
            return 1
        print(f"\n{story.title}\n{story.date}\n\n{story.body}\n\n[{story.id}]")
        return 0

    if args.command == "list":
        for item in writer.gallery.search(args.search):
            marker = "*" if item.is_generated else " "
            print(f"{marker} {item.id:<12} {item.title}: {item.excerpt}")
        return 0

    if args.command == "show":
        item = writer.gallery.get(args.id)
        if item is None:
            print(f"Story not found: {args.id}")
            return 1
        print(f"{item.title}\n{item.date}\n\n{item.body}")
        if item.tags:
            print(f"\nTags: {', '.join(item.tags)}")
        return 0

    if args.key_command == "set":
        print("API key saved" if writer.save_api_key(args.value) else "API key deleted")
    elif args.key_command == "delete":
        writer.delete_api_key()
        print("API key deleted")
    else:
        print("API key is set" if writer.has_api_key() else "API key is not set")
    return 0


if __name__ == "__main__":
    sys.exit(main())
