from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from compath.platform.errors import AIUnavailableError
from compath.platform.llm import LLMClient, get_llm_client, parse_json_text


def test_parse_json_text_strips_fences_and_trailing_text():
    reply = '```json\n{"topics": [{"topic": "Crashes"}]}\n```\nHope this helps!'
    assert parse_json_text(reply) == {"topics": [{"topic": "Crashes"}]}


def test_parse_json_text_without_object_raises():
    with pytest.raises(ValueError):
        parse_json_text("no json here")


def test_client_requires_api_key():
    with pytest.raises(AIUnavailableError):
        LLMClient()


@pytest.mark.asyncio
async def test_complete_json_reads_message_content():
    openai_client = MagicMock()
    completion = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content='{"ok": true}'))])
    openai_client.chat.completions.create = AsyncMock(return_value=completion)

    result = await LLMClient(openai_client, model="gemini-test").complete_json("system", "user")

    assert result == {"ok": True}
    kwargs = openai_client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_close_releases_the_underlying_client():
    openai_client = MagicMock()
    openai_client.close = AsyncMock()

    await LLMClient(openai_client).close()

    openai_client.close.assert_awaited_once()


def test_dependency_reads_client_from_app_state():
    llm = LLMClient(MagicMock())
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(llm_client=llm)))
    assert get_llm_client(request) is llm

    bare = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
    assert get_llm_client(bare) is None
