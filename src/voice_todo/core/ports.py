# src/voice_todo/core/ports.py

"""
Ports (interfaces) used by the core.

The pipeline depends on Protocols instead of concrete implementations, so the
model provider can be swapped (OpenRouter, offline demo, test fakes).
"""

from __future__ import annotations

from typing import Iterable, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...
