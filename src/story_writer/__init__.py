# Story Writer: DeepSeek-backed short story generation in the author's style
"""
Story Writer module for generating short stories from a corpus of examples.

The writer samples a few human-authored stories as style examples, asks a
chat-completion API for a new story, parses the reply into an Item, and
merges it into the locally persisted collection.
"""

from .client import ChatCompletionClient
from .corpus import load_corpus
from .credentials import CredentialStore
from .errors import (
    AuthError,
    DecodeError,
    EmptyResponseError,
    GenerationError,
    GenerationInProgressError,
    HttpError,
    IdGenerationError,
    NetworkError,
    NetworkErrorKind,
    NoCredentialError,
)
from .gallery import StoryGallery
from .models import GenerationRequest, GenerationState, WriterConfig
from .parser import parse_story
from .prompts import build_prompt
from .store import GeneratedItemStore
from .writer import StoryWriter

__all__ = [
    "StoryWriter",
    "ChatCompletionClient",
    "CredentialStore",
    "GeneratedItemStore",
    "StoryGallery",
    "GenerationRequest",
    "GenerationState",
    "WriterConfig",
    "build_prompt",
    "load_corpus",
    "parse_story",
    "GenerationError",
    "NoCredentialError",
    "GenerationInProgressError",
    "NetworkError",
    "NetworkErrorKind",
    "AuthError",
    "HttpError",
    "IdGenerationError",
    "EmptyResponseError",
    "DecodeError",
]
