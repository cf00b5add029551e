"""Decision oracle transport: client protocol, Ollama adapter and mock."""
from __future__ import annotations

import json
import random as _random_mod
import time
import urllib.error
import urllib.request
from collections import deque
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

from t800.types import T800Error

if TYPE_CHECKING:
    from t800.config import OracleConfig


class OracleError(T800Error):
    """Base class for decision oracle failures."""


class CommunicationError(OracleError):
    """The oracle could not be reached or answered with a transport error."""


class DecodeError(OracleError):
    """The oracle answered with content that could not be parsed."""


@runtime_checkable
class OracleClient(Protocol):
    """Protocol for oracle transports.

    Implementations make blocking calls from the processor's worker
    threads and raise ``OracleError`` subclasses on failure.
    """

    def query(self, system_prompt: str, user_message: str) -> str:
        """Send a prompt and return the raw response text."""
        ...


class OllamaClient:
    """Client for Ollama's ``POST /api/generate`` endpoint.

    Requests JSON-formatted, non-streamed output and returns the
    ``response`` field of the reply.
    """

    def __init__(
        self,
        model: str = "llama3.2",
        base_url: str = "http://localhost:11434",
        timeout: float = 30.0,
        temperature: float = 0.2,
    ) -> None:
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._temperature = temperature

    @classmethod
    def from_config(cls, config: OracleConfig) -> OllamaClient:
        return cls(
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            temperature=config.temperature,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    def query(self, system_prompt: str, user_message: str) -> str:
        payload = json.dumps({
            "model": self._model,
            "system": system_prompt,
            "prompt": user_message,
            "stream": False,
            "format": "json",
            "options": {"temperature": self._temperature},
        }).encode("utf-8")

        req = urllib.request.Request(
            f"{self._base_url}/api/generate",
            data=payload,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            raise CommunicationError(f"oracle returned HTTP {exc.code}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise CommunicationError(f"failed to reach oracle: {exc}") from exc

        try:
            body = json.loads(raw.decode("utf-8"))
            text = body["response"]
        except (UnicodeDecodeError, ValueError, KeyError, TypeError) as exc:
            raise DecodeError(f"failed to parse oracle envelope: {exc}") from exc
        if not isinstance(text, str):
            raise DecodeError(f"oracle response is not text: {text!r}")
        return text


class MockClient:
    """Deterministic oracle client for tests and offline runs.

    Args:
        responses: A dict mapping (system_prompt, user_message) tuples to
            response strings, OR a callable (str, str) -> str.
        latency: Simulated delay in seconds before returning.
        error_rate: Probability of raising instead of answering.
        error_exception: Exception raised on simulated error. Defaults to
            ``CommunicationError("mock error")``.
        history: Number of recent queries kept in ``calls``.
    """

    def __init__(
        self,
        responses: dict[tuple[str, str], str] | Callable[[str, str], str],
        latency: float = 0.0,
        error_rate: float = 0.0,
        error_exception: BaseException | None = None,
        history: int = 100,
    ) -> None:
        self._responses = responses
        self._latency = latency
        self._error_rate = error_rate
        self._error_exception = (
            error_exception if error_exception is not None
            else CommunicationError("mock error")
        )
        self._rng = _random_mod.Random()
        self.calls: deque[tuple[str, str]] = deque(maxlen=history)

    def query(self, system_prompt: str, user_message: str) -> str:
        self.calls.append((system_prompt, user_message))
        if self._error_rate > 0.0 and self._rng.random() < self._error_rate:
            raise self._error_exception

        if self._latency > 0.0:
            time.sleep(self._latency)

        if callable(self._responses) and not isinstance(self._responses, dict):
            return self._responses(system_prompt, user_message)

        return self._responses.get((system_prompt, user_message), "{}")
