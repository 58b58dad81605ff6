from __future__ import annotations

import httpx
import pytest

from openai_pack.client.router import get_chat_completion, get_completion, is_chat_completion_model
from openai_pack.common.errors import NetworkError, RemoteError
from openai_pack.common.schema import ChatCompletionRequest, ChatMessage, CompletionRequest


@pytest.mark.parametrize(
    "model",
    ["gpt-3.5-turbo", "gpt-3.5-turbo-0301", "gpt-3.5-turbo-16k", "gpt-4", "gpt-4-0314", "gpt-4-32k"],
)
def test_chat_family_models(model: str) -> None:
    assert is_chat_completion_model(model)


@pytest.mark.parametrize("model", ["text-ada-001", "text-davinci-003", "text-curie-001", "davinci"])
def test_legacy_models(model: str) -> None:
    assert not is_chat_completion_model(model)


def test_legacy_model_uses_completion_endpoint(api, context) -> None:
    api.reply("/completions", {"choices": [{"text": "  hi  "}]})
    out = get_completion(context, CompletionRequest(model="text-ada-001", prompt="Say hi", max_tokens=5))

    assert out == "hi"
    assert api.paths == ["/completions"]
    assert api.bodies[0] == {"model": "text-ada-001", "prompt": "Say hi", "max_tokens": 5}


def test_chat_snapshot_model_uses_chat_endpoint(api, context) -> None:
    api.reply("/chat/completions", {"choices": [{"message": {"role": "assistant", "content": "  hi  "}}]})
    out = get_completion(
        context,
        CompletionRequest(model="gpt-4-0314", prompt="Say hi", max_tokens=5, temperature=0.5, stop=["\n"]),
    )

    assert out == "hi"
    assert api.paths == ["/chat/completions"]
    body = api.bodies[0]
    assert "prompt" not in body
    assert body["messages"] == [{"role": "user", "content": "Say hi"}]
    assert body["max_tokens"] == 5
    assert body["temperature"] == 0.5
    assert body["stop"] == ["\n"]


def test_get_chat_completion_keeps_message_order(api, context) -> None:
    api.reply("/chat/completions", {"choices": [{"message": {"content": "ok"}}]})
    request = ChatCompletionRequest(
        model="gpt-3.5-turbo",
        messages=[ChatMessage(role="system", content="Be brief."), ChatMessage(role="user", content="Hi")],
    )
    assert get_chat_completion(context, request) == "ok"
    assert [m["role"] for m in api.bodies[0]["messages"]] == ["system", "user"]


def test_auth_header_is_sent(api, context) -> None:
    api.reply("/completions", {"choices": [{"text": "x"}]})
    get_completion(context, CompletionRequest(model="text-ada-001", prompt="p"))
    assert api.requests[0].headers["Authorization"] == "Bearer test-key"


def test_remote_error_carries_status_message_and_type(api, context) -> None:
    api.reply(
        "/completions",
        {"error": {"message": "You exceeded your current quota", "type": "insufficient_quota"}},
        status_code=429,
    )
    with pytest.raises(RemoteError) as excinfo:
        get_completion(context, CompletionRequest(model="text-ada-001", prompt="p"))

    assert excinfo.value.status_code == 429
    assert excinfo.value.message == "You exceeded your current quota"
    assert excinfo.value.error_type == "insufficient_quota"
    assert len(api.requests) == 1


def test_remote_error_without_json_body(api, context) -> None:
    api._routes["/completions"] = lambda request: httpx.Response(502, text="Bad gateway")
    with pytest.raises(RemoteError) as excinfo:
        get_completion(context, CompletionRequest(model="text-ada-001", prompt="p"))
    assert excinfo.value.status_code == 502
    assert excinfo.value.message is None


def test_network_failure_is_not_retried(api, context) -> None:
    api.fail("/chat/completions")
    with pytest.raises(NetworkError):
        get_completion(context, CompletionRequest(model="gpt-4", prompt="p"))
    assert len(api.requests) == 1


def test_malformed_success_body(api, context) -> None:
    api.reply("/completions", {"choices": []})
    with pytest.raises(RemoteError, match="Malformed"):
        get_completion(context, CompletionRequest(model="text-ada-001", prompt="p"))
