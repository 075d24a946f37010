"""Chat-completion API client with error classification.

One ``complete()`` call is one HTTP POST: no retries, no queueing. The client
owns an ``IDLE -> REQUESTING -> IDLE`` state machine so a second call while
one is outstanding fails fast instead of issuing a parallel request.
"""

from __future__ import annotations

import json
import re
import socket
import threading
import time

import requests
from pydantic import ValidationError
from urllib3.exceptions import ReadTimeoutError

from src.common.config import LLMSettings, settings
from src.common.logging import setup_logging

from .errors import (
    AuthError,
    DecodeError,
    EmptyResponseError,
    GenerationInProgressError,
    HttpError,
    NetworkError,
    NetworkErrorKind,
    NoCredentialError,
)
from .models import ChatCompletionResponse, GenerationRequest, GenerationState

logger = setup_logging(module_name="story_writer.client")

_MARKDOWN_MARKERS = ("**", "*", "#")
_MULTI_SPACE = re.compile(r" {2,}")


def clean_response(text: str) -> str:
    """Strip markdown emphasis/heading markers and doubled spaces."""
    cleaned = text.strip()
    for marker in _MARKDOWN_MARKERS:
        cleaned = cleaned.replace(marker, "")
    cleaned = _MULTI_SPACE.sub(" ", cleaned)
    return cleaned.strip()


def _is_timeout(exc: requests.RequestException) -> bool:
    # requests re-raises read timeouts during body streaming as ConnectionError
    if isinstance(exc, requests.Timeout):
        return True
    return any(isinstance(arg, ReadTimeoutError) for arg in exc.args)


def _abort_transfer(resp: requests.Response) -> None:
    """Unblock a pending body read from another thread.

    Shutting the socket down wakes a blocked ``recv``; closing alone does not.
    """
    conn = getattr(resp.raw, "_connection", None)
    sock = getattr(conn, "sock", None)
    if sock is None:
        resp.close()
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as exc:
        logger.debug("Socket already closed while aborting transfer: %s", exc)


class ChatCompletionClient:
    """Client for an OpenAI-compatible chat-completion endpoint.

    Usage:
        client = ChatCompletionClient(api_key="sk-...")
        text = client.complete(system_prompt, user_prompt)
    """

    CHUNK_SIZE = 8192

    def __init__(
        self,
        api_key: str = "",
        llm_settings: LLMSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.llm = llm_settings or settings.llm
        self.api_key = api_key
        self._session = session or requests.Session()
        self._state = GenerationState.IDLE
        self._lock = threading.Lock()

    @property
    def api_key(self) -> str:
        return self._api_key

    @api_key.setter
    def api_key(self, value: str | None) -> None:
        self._api_key = (value or "").strip()

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state == GenerationState.REQUESTING

    def complete(
        self,
        system_message: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one chat-completion request and return the cleaned text.

        Args:
            system_message: System-level instructions.
            user_message: User request.
            temperature: Sampling temperature (default from settings, 0.7).
            max_tokens: Completion token limit (default from settings, 2000).

        Returns:
            Generated text with markdown artifacts removed.

        Raises:
            NoCredentialError: No API key configured (no network I/O).
            GenerationInProgressError: Another call is still outstanding.
            NetworkError: Transport failure or timeout.
            AuthError: HTTP 401.
            HttpError: Any other non-200 status.
            EmptyResponseError: Response contained no choices.
            DecodeError: Response body did not match the expected shape.
        """
        api_key = self.api_key
        if not api_key:
            raise NoCredentialError()

        request = GenerationRequest.build(
            model=self.llm.model,
            system_message=system_message,
            user_message=user_message,
            max_tokens=max_tokens if max_tokens is not None else self.llm.max_tokens,
            temperature=temperature if temperature is not None else self.llm.temperature,
        )

        if not self._lock.acquire(blocking=False):
            raise GenerationInProgressError()
        try:
            self._state = GenerationState.REQUESTING
            return self._send(request, api_key)
        finally:
            self._state = GenerationState.IDLE
            self._lock.release()

    def _send(self, request: GenerationRequest, api_key: str) -> str:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        data = json.dumps(request.to_payload(), ensure_ascii=False).encode("utf-8")
        deadline = time.monotonic() + self.llm.resource_timeout

        logger.info("Sending chat-completion request (model=%s)", request.model)
        try:
            resp = self._session.post(
                self.llm.api_url,
                data=data,
                headers=headers,
                timeout=self.llm.request_timeout,
                stream=True,
            )
            try:
                body = self._read_body(resp, deadline)
            finally:
                resp.close()
        except requests.RequestException as exc:
            kind = NetworkErrorKind.TIMEOUT if _is_timeout(exc) else NetworkErrorKind.OTHER
            logger.warning("Chat-completion transport error (%s): %s", kind.value, exc)
            raise NetworkError(kind, str(exc)) from exc

        status = resp.status_code
        logger.info("Chat-completion HTTP status: %d", status)

        if status == 401:
            logger.error("HTTP 401: API key rejected")
            raise AuthError()

        if status != 200:
            logger.error(
                "Chat-completion API error %d: %s",
                status, body[:500].decode("utf-8", errors="replace"),
            )
            raise HttpError(status)

        return clean_response(self._parse_content(body))

    def _read_body(self, resp: requests.Response, deadline: float) -> bytes:
        """Read the response body, aborting the transfer at the resource deadline.

        A timer shuts the connection down when the deadline passes, so a
        server trickling bytes cannot keep the read alive past it.
        """
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise self._resource_timeout()

        expired = threading.Event()

        def abort() -> None:
            expired.set()
            logger.warning(
                "Resource deadline of %.0fs reached; aborting transfer",
                self.llm.resource_timeout,
            )
            _abort_transfer(resp)

        timer = threading.Timer(remaining, abort)
        timer.daemon = True
        timer.start()

        chunks: list[bytes] = []
        try:
            for chunk in resp.iter_content(chunk_size=self.CHUNK_SIZE):
                if expired.is_set():
                    break
                if chunk:
                    chunks.append(chunk)
        except Exception as exc:
            # the aborted socket surfaces as whatever the read was doing
            if expired.is_set():
                raise self._resource_timeout() from exc
            raise
        finally:
            timer.cancel()

        if expired.is_set():
            raise self._resource_timeout()
        return b"".join(chunks)

    def _resource_timeout(self) -> NetworkError:
        return NetworkError(
            NetworkErrorKind.TIMEOUT,
            f"resource timeout after {self.llm.resource_timeout:.0f}s",
        )

    @staticmethod
    def _parse_content(body: bytes) -> str:
        try:
            data = json.loads(body)
            response = ChatCompletionResponse.model_validate(data)
        except (ValueError, ValidationError) as exc:
            logger.warning("Failed to decode chat-completion response: %s", exc)
            raise DecodeError() from exc

        if not response.choices:
            raise EmptyResponseError()

        return response.choices[0].message.content

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> ChatCompletionClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
