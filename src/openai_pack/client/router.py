"""Route completion requests to the legacy completion or chat completion endpoint.

Endpoints (relative to the configured base URL):
- POST /completions       { model, prompt, ... }   -> choices[0].text
- POST /chat/completions  { model, messages, ... } -> choices[0].message.content
- POST /images/generations                          -> data[0].url | data[0].b64_json

Each call makes exactly one request; failures are raised as ``RemoteError`` or
``NetworkError`` and never retried.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from openai_pack.common.config import ExecutionContext
from openai_pack.common.errors import NetworkError, RemoteError
from openai_pack.common.schema import ChatCompletionRequest, ChatMessage, CompletionRequest

LOGGER = logging.getLogger("openai_pack.router")

COMPLETIONS_PATH = "/completions"
CHAT_COMPLETIONS_PATH = "/chat/completions"
IMAGE_GENERATIONS_PATH = "/images/generations"

CHAT_MODEL_MARKERS = ("gpt-3.5-turbo", "gpt-4")


def is_chat_completion_model(model: str) -> bool:
    # also matches snapshots such as gpt-3.5-turbo-0301 and gpt-4-0314
    return any(marker in model for marker in CHAT_MODEL_MARKERS)


def _error_details(resp: httpx.Response) -> tuple[str | None, str | None]:
    """Pull ``error.message`` and ``error.type`` out of an error body, if present."""
    try:
        body = resp.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    err = body.get("error")
    if not isinstance(err, dict):
        return None, None
    return err.get("message") or None, err.get("type") or None


def post_json(context: ExecutionContext, path: str, body: dict[str, Any]) -> dict[str, Any]:
    """
    POST a JSON body and return the decoded response.

    Args:
        context: Execution context carrying the HTTP client.
        path: Endpoint path relative to the client's base URL.
        body: JSON-serializable request body.

    Raises:
        NetworkError: no HTTP response was received.
        RemoteError: non-2xx status, or a body that is not a JSON object.
    """
    try:
        resp = context.client.post(path, json=body)
    except httpx.HTTPError as e:
        LOGGER.warning("Request to %s failed: %s", path, e)
        raise NetworkError(str(e)) from e

    if resp.is_error:
        message, error_type = _error_details(resp)
        LOGGER.warning("Remote error from %s: status=%s type=%s", path, resp.status_code, error_type)
        raise RemoteError(resp.status_code, message=message, error_type=error_type)

    try:
        data = resp.json()
    except ValueError as e:
        raise RemoteError(resp.status_code, message="Response body is not valid JSON") from e
    if not isinstance(data, dict):
        raise RemoteError(resp.status_code, message="Response body is not a JSON object")
    return data


def _first_choice(data: dict[str, Any], status_code: int = 200) -> dict[str, Any]:
    try:
        return data["choices"][0]
    except (KeyError, IndexError, TypeError) as e:
        raise RemoteError(status_code, message="Malformed response: no choices") from e


def get_chat_completion(context: ExecutionContext, request: ChatCompletionRequest) -> str:
    """Call the chat endpoint and return the trimmed message content."""
    LOGGER.debug("Chat completion with model=%s messages=%d", request.model, len(request.messages))
    data = post_json(context, CHAT_COMPLETIONS_PATH, request.model_dump(exclude_none=True))
    choice = _first_choice(data)
    try:
        content = choice["message"]["content"]
    except (KeyError, TypeError) as e:
        raise RemoteError(200, message="Malformed response: no message content") from e
    return str(content or "").strip()


def get_completion(context: ExecutionContext, request: CompletionRequest) -> str:
    """
    Complete a flat prompt, picking the endpoint from the model name.

    Chat-family models get the prompt as a single user message on the chat
    endpoint; every other model goes to the legacy completion endpoint unchanged.

    Args:
        context: Execution context carrying the HTTP client.
        request: Completion request with a flat prompt.

    Returns:
        Generated text with surrounding whitespace removed.
    """
    if is_chat_completion_model(request.model):
        return get_chat_completion(
            context,
            ChatCompletionRequest(
                model=request.model,
                messages=[ChatMessage(role="user", content=request.prompt)],
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                stop=request.stop,
            ),
        )

    LOGGER.debug("Legacy completion with model=%s", request.model)
    data = post_json(context, COMPLETIONS_PATH, request.model_dump(exclude_none=True))
    choice = _first_choice(data)
    try:
        text = choice["text"]
    except (KeyError, TypeError) as e:
        raise RemoteError(200, message="Malformed response: no choice text") from e
    return str(text or "").strip()
