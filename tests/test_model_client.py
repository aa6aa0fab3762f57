"""Tests for the Gemini model client."""

import asyncio
import json

import httpx
import pytest
import pytest_asyncio
import respx

from genui.errors import ModelTimeoutError, ModelUnavailableError
from genui.services.model_client import GeminiClient


URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"


def _completion(*texts: str, finish_reason: str = "STOP") -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": t} for t in texts]},
                "finishReason": finish_reason,
            }
        ]
    }


@pytest_asyncio.fixture
async def gemini():
    client = GeminiClient(api_key="test-api-key", max_retries=2, backoff=0)
    yield client
    await client.close()


@pytest.mark.unit
def test_from_config_reads_settings():
    class Settings:
        GEMINI_API_KEY = "k"
        GEMINI_MODEL = "gemini-test"
        GEMINI_API_URL = "http://localhost:9999/v1beta"
        MODEL_TIMEOUT = 5.0
        MODEL_MAX_RETRIES = 1
        MODEL_TEMPERATURE = 0.2

    client = GeminiClient.from_config(Settings)

    assert client.is_configured
    assert client.model == "gemini-test"
    assert client.temperature == 0.2


@pytest.mark.asyncio
async def test_complete_returns_text(gemini):
    with respx.mock() as router:
        route = router.post(URL).mock(return_value=httpx.Response(200, json=_completion("Hello", " world")))

        text = await gemini.complete("Say hello")

    assert text == "Hello world"
    request = route.calls.last.request
    assert request.headers["x-goog-api-key"] == "test-api-key"
    body = json.loads(request.content)
    assert body["contents"][0]["parts"][0]["text"] == "Say hello"
    assert "generationConfig" not in body


@pytest.mark.asyncio
async def test_complete_sends_temperature():
    client = GeminiClient(api_key="test-api-key", temperature=0.3, backoff=0)
    try:
        with respx.mock() as router:
            route = router.post(URL).mock(return_value=httpx.Response(200, json=_completion("ok")))
            await client.complete("hi")
        body = json.loads(route.calls.last.request.content)
        assert body["generationConfig"] == {"temperature": 0.3}
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_thought_parts_are_skipped(gemini):
    payload = _completion("ignored")
    payload["candidates"][0]["content"]["parts"] = [
        {"text": "thinking...", "thought": True},
        {"text": "answer"},
    ]
    with respx.mock() as router:
        router.post(URL).mock(return_value=httpx.Response(200, json=payload))
        assert await gemini.complete("q") == "answer"


@pytest.mark.asyncio
async def test_missing_api_key_makes_no_request():
    client = GeminiClient(api_key="")
    try:
        with respx.mock(assert_all_called=False) as router:
            route = router.post(URL)
            with pytest.raises(ModelUnavailableError):
                await client.complete("hi")
        assert not route.called
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_client_error_is_not_retried(gemini):
    error = {"error": {"code": 400, "message": "API key not valid"}}
    with respx.mock() as router:
        route = router.post(URL).mock(return_value=httpx.Response(400, json=error))

        with pytest.raises(ModelUnavailableError) as exc_info:
            await gemini.complete("hi")

    assert route.call_count == 1
    assert exc_info.value.status == 400
    assert "API key not valid" in str(exc_info.value)


@pytest.mark.asyncio
async def test_server_error_is_retried(gemini):
    with respx.mock() as router:
        route = router.post(URL).mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json=_completion("recovered"))]
        )

        assert await gemini.complete("hi") == "recovered"

    assert route.call_count == 2


@pytest.mark.asyncio
async def test_rate_limit_honors_retry_after(gemini):
    with respx.mock() as router:
        route = router.post(URL).mock(
            side_effect=[
                httpx.Response(429, headers={"Retry-After": "0"}),
                httpx.Response(200, json=_completion("ok")),
            ]
        )

        assert await gemini.complete("hi") == "ok"

    assert route.call_count == 2


@pytest.mark.asyncio
async def test_retry_after_is_capped_by_timeout():
    client = GeminiClient(api_key="test-api-key", timeout=0.05, max_retries=2, backoff=0)
    try:
        with respx.mock() as router:
            route = router.post(URL).mock(
                side_effect=[
                    httpx.Response(429, headers={"Retry-After": "3600"}),
                    httpx.Response(200, json=_completion("ok")),
                ]
            )

            text = await asyncio.wait_for(client.complete("hi"), timeout=5)

        assert text == "ok"
        assert route.call_count == 2
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_retries_are_bounded(gemini):
    with respx.mock() as router:
        route = router.post(URL).mock(return_value=httpx.Response(500))

        with pytest.raises(ModelUnavailableError) as exc_info:
            await gemini.complete("hi")

    assert route.call_count == 2
    assert exc_info.value.status == 500


@pytest.mark.asyncio
async def test_timeout_raises_timeout_error(gemini):
    with respx.mock() as router:
        route = router.post(URL).mock(side_effect=httpx.ReadTimeout)

        with pytest.raises(ModelTimeoutError):
            await gemini.complete("hi")

    assert route.call_count == 2


@pytest.mark.asyncio
async def test_connect_error_is_unavailable_not_timeout(gemini):
    with respx.mock() as router:
        router.post(URL).mock(side_effect=httpx.ConnectError)

        with pytest.raises(ModelUnavailableError) as exc_info:
            await gemini.complete("hi")

    assert not isinstance(exc_info.value, ModelTimeoutError)


@pytest.mark.asyncio
async def test_blocked_prompt_is_unavailable(gemini):
    payload = {"promptFeedback": {"blockReason": "SAFETY"}}
    with respx.mock() as router:
        router.post(URL).mock(return_value=httpx.Response(200, json=payload))

        with pytest.raises(ModelUnavailableError) as exc_info:
            await gemini.complete("hi")

    assert "SAFETY" in str(exc_info.value)


@pytest.mark.asyncio
async def test_candidate_without_text_is_rejection(gemini):
    payload = {"candidates": [{"finishReason": "SAFETY"}]}
    with respx.mock() as router:
        router.post(URL).mock(return_value=httpx.Response(200, json=payload))

        with pytest.raises(ModelUnavailableError):
            await gemini.complete("hi")
