# src/voice_todo/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.errors import (
    LLMConfigurationError,
    ModelInvocationError,
    ModelResponseBlocked,
    ModelResponseIncomplete,
    ModelResponseTruncated,
)
from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

# Provider finish reasons that mean "refused", across OpenAI / Gemini naming.
BLOCKED_FINISH_REASONS = frozenset(
    {"content_filter", "safety", "recitation", "blocklist", "prohibited_content", "spii"}
)
TRUNCATED_FINISH_REASONS = frozenset({"length", "max_tokens"})

_BAD_MODEL_COOLDOWN_SECONDS = 3600.0


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return True
    return isinstance(exc, TimeoutError)


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible SDK uses NotFoundError for HTTP 404 (unknown model)
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "LLM is not configured (missing API key). Set VOICE_TODO_OPENROUTER_API_KEY in .env."
    if "LLM model list is empty" in msg:
        return "LLM is not configured (no models). Set VOICE_TODO_LLM_MODELS in .env."
    if "LLM base URL is not set" in msg:
        return "LLM is not configured (missing base URL). Set VOICE_TODO_OPENROUTER_BASE_URL in .env."
    return msg


def _close_stream(stream: Any) -> None:
    """
    Best-effort close for streaming responses;
    not every SDK version exposes close().
    """
    close = getattr(stream, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Stream close failed.", exc_info=True)


def _chunk_parts(chunk: Any) -> tuple[str | None, str | None]:
    """(content, finish_reason) of the first choice; (None, None) for empty chunks."""
    choices = getattr(chunk, "choices", None) or []
    if not choices:
        return None, None
    choice0 = choices[0]
    delta = getattr(choice0, "delta", None)
    content = getattr(delta, "content", None) if delta is not None else None
    finish_reason = getattr(choice0, "finish_reason", None)
    return content, finish_reason


class OpenRouterLLMClient:
    """
    OpenAI-compatible streaming client (OpenRouter by default).

    Behavior:
    - Tries models in the configured order (VOICE_TODO_LLM_MODELS).
    - If a model doesn't produce a first content token within the first-token
      timeout, we abort and try the next model.
    - 404 (model not available) -> cool the model down for an hour, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast (no retries across models).
    - Non-"stop" finish reasons are reported as named errors and are not
      retried: truncation with no content, safety/policy refusal, anything else
      with no content. Truncation after partial content is logged and the
      partial text is returned for the normalizer to judge.
    """

    def __init__(self, settings: Any, *, client: OpenAI | None = None) -> None:
        self._settings = settings
        self._models: List[str] = [m.strip() for m in (getattr(settings, "llm_models", []) or []) if m.strip()]
        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._temperature = float(getattr(settings, "llm_temperature", 0.3))
        self._max_tokens = int(getattr(settings, "llm_max_tokens", 300))
        self._first_token_timeout = float(getattr(settings, "llm_first_token_timeout", 20.0))
        self._timeout = httpx.Timeout(
            connect=float(getattr(settings, "llm_connect_timeout", 5.0)),
            read=float(getattr(settings, "llm_read_timeout", 25.0)),
            write=10.0,
            pool=float(getattr(settings, "llm_connect_timeout", 5.0)),
        )
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

        if not self._models:
            raise LLMConfigurationError("LLM model list is empty. Set VOICE_TODO_LLM_MODELS in your .env.")

        self._client = client if client is not None else self._build_client()

    def _build_client(self) -> OpenAI:
        api_key = getattr(self._settings, "openrouter_api_key", None)
        base_url = getattr(self._settings, "openrouter_base_url", "") or ""

        if not api_key or not str(api_key).strip():
            raise LLMConfigurationError("LLM API key is not set. Set VOICE_TODO_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise LLMConfigurationError("LLM base URL is not set. Set VOICE_TODO_OPENROUTER_BASE_URL in your .env.")

        # No SDK retries: a failed model falls through to the next one.
        return OpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=self._timeout,
            max_retries=0,
        )

    def _create_stream(self, *, model: str, messages: list[ChatMessage]) -> Any:
        return self._client.chat.completions.create(
            model=model,
            stream=True,
            extra_headers=self._headers or None,
            messages=messages,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            timeout=self._timeout,
        )

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        last_error: Optional[Exception] = None
        now = time.monotonic()

        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info(
                "LLM: trying model=%s (first_token_timeout=%.1fs)",
                model,
                self._first_token_timeout,
            )
            t0 = time.monotonic()
            deadline = t0 + self._first_token_timeout

            stream = None
            used_any = False
            finish_reason: str | None = None

            try:
                stream = self._create_stream(
                    model=model,
                    messages=[{"role": "system", "content": system_prompt}, *messages],
                )

                for chunk in stream:
                    if not used_any and time.monotonic() > deadline:
                        raise TimeoutError(f"First token timeout on model: {model}")

                    content, reason = _chunk_parts(chunk)
                    if reason:
                        finish_reason = str(reason).lower()
                    if content:
                        if not used_any:
                            logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - t0)
                        used_any = True
                        yield content

                self._check_finish_reason(model, finish_reason, used_any)
                if used_any:
                    logger.debug("LLM: completed with model=%s finish_reason=%s", model, finish_reason)
                    return

                last_error = ModelResponseIncomplete(f"Model returned no content: {model}")

            except ModelInvocationError:
                raise

            except Exception as e:
                # Content already went to the caller: switching models now would splice two answers.
                if used_any:
                    raise ModelInvocationError(f"LLM stream failed mid-response on model {model}.") from e

                last_error = e

                if _is_auth_error(e):
                    raise ModelInvocationError(
                        "LLM authentication failed. Check your API key (VOICE_TODO_OPENROUTER_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + _BAD_MODEL_COOLDOWN_SECONDS
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            finally:
                if stream is not None:
                    _close_stream(stream)

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise ModelInvocationError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise ModelInvocationError("LLM network/timeout error. Try again later or change models.") from last_error
        raise ModelInvocationError("All LLM models failed.") from last_error

    @staticmethod
    def _check_finish_reason(model: str, finish_reason: str | None, used_any: bool) -> None:
        if finish_reason is None or finish_reason == "stop":
            return

        if finish_reason in BLOCKED_FINISH_REASONS:
            raise ModelResponseBlocked(
                f"Model stopped due to {finish_reason.upper()}. Please rephrase your request.",
                finish_reason=finish_reason,
            )

        if finish_reason in TRUNCATED_FINISH_REASONS:
            if used_any:
                logger.warning("LLM: response truncated on model=%s, parsing partial output", model)
                return
            raise ModelResponseTruncated(
                "Model response was truncated before any content. Please try a shorter command."
            )

        if not used_any:
            raise ModelResponseIncomplete(
                f"Model finished with reason: {finish_reason}",
                finish_reason=finish_reason,
            )
        logger.info("LLM: model=%s finished with reason=%s", model, finish_reason)
