import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai

from pikamc_bot.services import ai
from pikamc_bot.services.ai import FALLBACK_MESSAGE, build_client, build_prompt, diagnose_issue


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _fake_client(create: AsyncMock) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_build_prompt_embeds_error_text():
    prompt = build_prompt("java.lang.OutOfMemoryError")

    assert prompt.startswith("Lỗi Minecraft Server: java.lang.OutOfMemoryError\n\n")
    assert prompt.endswith("đề xuất 3 giải pháp khắc phục chi tiết bằng tiếng Việt.")


def test_diagnose_issue_returns_model_answer(settings):
    create = AsyncMock(return_value=_completion("Tăng RAM cho server."))

    answer = asyncio.run(diagnose_issue(settings, "OutOfMemoryError", client=_fake_client(create)))

    assert answer == "Tăng RAM cho server."
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "deepseek-chat"
    assert kwargs["temperature"] == 0.5
    assert kwargs["max_tokens"] == 1500
    assert kwargs["messages"] == [{"role": "user", "content": build_prompt("OutOfMemoryError")}]


def test_diagnose_issue_falls_back_on_error(settings, caplog):
    create = AsyncMock(side_effect=RuntimeError("connection reset"))

    with caplog.at_level("ERROR"):
        answer = asyncio.run(diagnose_issue(settings, "boom", client=_fake_client(create)))

    assert answer == FALLBACK_MESSAGE
    assert "DEEPSEEK_ERROR: connection reset" in caplog.text


def test_diagnose_issue_logs_api_error_body(settings, caplog):
    request = httpx.Request("POST", "https://ai.test/v1/chat/completions")
    response = httpx.Response(402, request=request)
    error = openai.APIStatusError(
        "Insufficient Balance",
        response=response,
        body={"error": {"message": "Insufficient Balance"}},
    )
    create = AsyncMock(side_effect=error)

    with caplog.at_level("ERROR"):
        answer = asyncio.run(diagnose_issue(settings, "boom", client=_fake_client(create)))

    assert answer == FALLBACK_MESSAGE
    assert "Insufficient Balance" in caplog.text


def test_diagnose_issue_falls_back_on_empty_answer(settings):
    for completion in (_completion(None), _completion("   "), SimpleNamespace(choices=[])):
        create = AsyncMock(return_value=completion)

        assert asyncio.run(diagnose_issue(settings, "boom", client=_fake_client(create))) == FALLBACK_MESSAGE


def test_diagnose_issue_closes_the_client_it_builds(settings, monkeypatch):
    for create in (AsyncMock(return_value=_completion("ok")), AsyncMock(side_effect=RuntimeError("down"))):
        owned = _fake_client(create)
        owned.close = AsyncMock()
        monkeypatch.setattr(ai, "build_client", lambda _settings: owned)

        answer = asyncio.run(diagnose_issue(settings, "boom"))

        assert answer in ("ok", FALLBACK_MESSAGE)
        owned.close.assert_awaited_once()


def test_diagnose_issue_leaves_caller_client_open(settings):
    client = _fake_client(AsyncMock(return_value=_completion("ok")))
    client.close = AsyncMock()

    asyncio.run(diagnose_issue(settings, "boom", client=client))

    client.close.assert_not_awaited()


def test_build_client_targets_deepseek_without_retries(settings):
    client = build_client(settings)

    assert str(client.base_url).startswith("https://ai.test/v1")
    assert client.api_key == "ai-key"
    assert client.max_retries == 0
