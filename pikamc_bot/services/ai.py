from __future__ import annotations

import logging
from typing import Any, Optional

from openai import APIStatusError, AsyncOpenAI

from ..config.settings import Settings

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Lỗi Minecraft Server: {error_text}\n\n"
    "Hãy phân tích nguyên nhân và đề xuất 3 giải pháp khắc phục chi tiết bằng tiếng Việt."
)
FALLBACK_MESSAGE = "⚠️ Lỗi phân tích AI. Vui lòng thử lại sau."

TEMPERATURE = 0.5
MAX_TOKENS = 1500


def build_client(settings: Settings) -> AsyncOpenAI:
    # DeepSeek speaks the OpenAI chat-completions protocol; retries disabled on purpose.
    return AsyncOpenAI(
        api_key=settings.deepseek_api_key,
        base_url=settings.deepseek_base_url,
        max_retries=0,
    )


def build_prompt(error_text: str) -> str:
    return PROMPT_TEMPLATE.format(error_text=error_text)


def _failure_detail(exc: Exception) -> Any:
    if isinstance(exc, APIStatusError):
        return exc.body if exc.body is not None else exc.message
    return str(exc) or exc.__class__.__name__


async def diagnose_issue(
    settings: Settings,
    error_text: str,
    *,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """
    Ask the model for a diagnosis of `error_text`.

    Always returns a string: the model's answer, or FALLBACK_MESSAGE when
    anything goes wrong. Failures only go to the process log; this client does
    not alert the admin channel.
    """
    own_client = None
    try:
        if client is None:
            own_client = build_client(settings)
            client = own_client
        response = await client.chat.completions.create(
            model=settings.deepseek_model,
            messages=[{"role": "user", "content": build_prompt(error_text)}],
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ValueError("Model returned an empty answer.")
        return content
    except Exception as exc:  # noqa: BLE001
        logger.error("DEEPSEEK_ERROR: %s", _failure_detail(exc))
        return FALLBACK_MESSAGE
    finally:
        if own_client is not None:
            await own_client.close()


__all__ = [
    "PROMPT_TEMPLATE",
    "FALLBACK_MESSAGE",
    "TEMPERATURE",
    "MAX_TOKENS",
    "build_client",
    "build_prompt",
    "diagnose_issue",
]
