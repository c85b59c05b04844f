import asyncio
import base64
import json

import httpx
import pytest

from sendiabete.core.config import Settings
from sendiabete.core.errors import AnalysisUnavailable, InternalFailure
from sendiabete.integrations.vision import VisionAnalyzer

PHOTO = b"\xff\xd8\xff\xe0meter"


def make_settings(**overrides):
    values = {
        "openai_api_key": "sk-test",
        "openai_base_url": "https://vision.test/v1",
        "vision_model": "gpt-4o-mini",
        "vision_fallback_enabled": True,
        "vision_fallback_value": "1.20",
    }
    values.update(overrides)
    return Settings(**values)


def analyze(analyzer):
    return asyncio.run(analyzer.analyze(PHOTO))


def completion(content):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


def test_returns_trimmed_content_and_sends_image():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return completion(" 1,35 \n")

    analyzer = VisionAnalyzer(make_settings(), transport=httpx.MockTransport(handler))
    assert analyze(analyzer) == "1,35"

    assert seen["url"] == "https://vision.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    body = seen["body"]
    assert body["model"] == "gpt-4o-mini"
    assert body["max_tokens"] == 10
    image_part = body["messages"][0]["content"][1]
    assert image_part["image_url"]["url"] == "data:image/jpeg;base64," + base64.b64encode(PHOTO).decode()


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(500, json={"error": "down"}),
        lambda request: httpx.Response(200, json={"unexpected": True}),
        lambda request: httpx.Response(200, content=b"not json"),
    ],
)
def test_failures_fall_back(handler):
    analyzer = VisionAnalyzer(make_settings(), transport=httpx.MockTransport(handler))
    assert analyze(analyzer) == "1.20"


def test_timeout_falls_back():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    analyzer = VisionAnalyzer(make_settings(vision_fallback_value="1.05"), transport=httpx.MockTransport(handler))
    assert analyze(analyzer) == "1.05"


def test_missing_api_key_falls_back():
    calls = []

    def handler(request):
        calls.append(request)
        return completion("1.50")

    analyzer = VisionAnalyzer(make_settings(openai_api_key=""), transport=httpx.MockTransport(handler))
    assert analyze(analyzer) == "1.20"
    assert calls == []


def test_failure_surfaces_when_degraded_mode_is_off():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    analyzer = VisionAnalyzer(
        make_settings(vision_fallback_enabled=False),
        transport=httpx.MockTransport(handler),
    )
    with pytest.raises(AnalysisUnavailable) as excinfo:
        analyze(analyzer)
    assert isinstance(excinfo.value, InternalFailure)
    assert excinfo.value.status_code == 502
