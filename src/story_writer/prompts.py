"""System and user prompts for story generation.

The system prompt pins the author's voice: a fixed persona description
followed by a few of the author's own stories as style examples. Examples
always come from the human-authored corpus, never from generated items.
"""

from __future__ import annotations

import random

from src.common.models import Item

MAX_EXAMPLE_CHARS = 800
DEFAULT_EXAMPLE_COUNT = 3

FREE_TOPIC_PROMPT = "Write a free-topic story in my style."

PERSONA_PROMPT = """\
You are the writer Dima Kozlov. Your stories are known for:
- Philosophical depth and absurdity
- A minimalist style
- An ironic view of life
- Short, dense sentences
- Reflections on meaning, time and existence
- Metaphors and images
- A peculiar sense of humour with depressive undertones"""

CLOSING_INSTRUCTION = (
    "Write a short story (100-600 words) in this style. The story must be "
    "complete and carry a deep meaning, but without an explicit moral."
)

# Used when no corpus examples are available
FALLBACK_STYLE_SAMPLES = (
    "Everything has an explanation; every small event has a simple, clear cause.",
    "It is fun when you notice, especially when you notice unexpectedly.",
    "Information is born in interaction. The flower does not care whether it "
    "stores anything; it simply grows.",
)


def select_examples(
    corpus: list[Item],
    count: int = DEFAULT_EXAMPLE_COUNT,
    rng: random.Random | None = None,
) -> list[Item]:
    """Pick up to ``count`` distinct human-authored items uniformly at random.

    Args:
        corpus: Candidate example items.
        count: Maximum number of examples.
        rng: Random source (defaults to the module-level generator).

    Returns:
        ``min(count, len(candidates))`` items, without replacement.
    """
    candidates = [item for item in corpus if not item.is_generated]
    if not candidates or count <= 0:
        return []
    rng = rng or random
    return rng.sample(candidates, min(count, len(candidates)))


def format_example(item: Item) -> str:
    """Format one story as a fenced block for the system prompt."""
    body = item.body
    if len(body) > MAX_EXAMPLE_CHARS:
        body = body[:MAX_EXAMPLE_CHARS] + "..."

    return f"""\
---
Title: {item.title}
Date: {item.date}

{body}
---"""


def _format_examples_section(examples: list[Item]) -> str:
    if not examples:
        samples = "\n".join(f'"{s}"' for s in FALLBACK_STYLE_SAMPLES)
        return f"Examples of your style:\n{samples}"

    blocks = "\n\n".join(format_example(item) for item in examples)
    return f"Examples of your stories:\n\n{blocks}"


def build_system_prompt(examples: list[Item]) -> str:
    """Build the system prompt from the persona and the chosen examples.

    Args:
        examples: Selected example stories. An empty list switches to the
            embedded fallback style samples.

    Returns:
        System prompt string.
    """
    return "\n\n".join([
        PERSONA_PROMPT,
        _format_examples_section(examples),
        CLOSING_INSTRUCTION,
    ])


def build_user_prompt(topic: str | None = None) -> str:
    if not topic or not topic.strip():
        return FREE_TOPIC_PROMPT
    return f"Write a story about: {topic}"


def build_prompt(
    topic: str | None,
    corpus: list[Item],
    rng: random.Random | None = None,
    example_count: int = DEFAULT_EXAMPLE_COUNT,
) -> tuple[str, str]:
    """Assemble the (system, user) prompt pair for one generation.

    Args:
        topic: Optional story topic. Empty or None means free topic.
        corpus: Human-authored example stories.
        rng: Random source for example selection.
        example_count: Maximum number of examples to include.

    Returns:
        Tuple of (system_message, user_message).
    """
    examples = select_examples(corpus, example_count, rng)
    return build_system_prompt(examples), build_user_prompt(topic)
