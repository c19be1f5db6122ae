# tests/fakes.py

from __future__ import annotations

import time
from collections.abc import Iterable
from types import SimpleNamespace
from typing import Any

from voice_todo.core.ports import ChatMessage


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions
    - Yields a predefined text as a single chunk (or raises `error`)
    """

    def __init__(self, next_text: str = "{}", *, error: Exception | None = None, delay: float = 0.0) -> None:
        self.next_text = next_text
        self.error = error
        self.delay = delay
        self.calls: list[tuple[list[ChatMessage], str]] = []

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls.append((messages, system_prompt))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        yield self.next_text


def chunk(content: str | None = None, finish_reason: str | None = None) -> SimpleNamespace:
    """One streaming chunk shaped like the OpenAI SDK's ChatCompletionChunk."""
    return SimpleNamespace(
        choices=[
            SimpleNamespace(
                delta=SimpleNamespace(content=content),
                finish_reason=finish_reason,
            )
        ]
    )


class FakeCompletions:
    """
    Stand-in for `OpenAI().chat.completions`.

    `script` maps model name -> list of chunks to stream, or an exception to raise.
    """

    def __init__(self, script: dict[str, Any]) -> None:
        self.script = script
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        outcome = self.script[kwargs["model"]]
        if isinstance(outcome, Exception):
            raise outcome
        return iter(outcome)


def fake_openai(script: dict[str, Any]) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(script)))
