import json as jsonlib
import types

import pytest
import requests

from toolsmith import llm_client
from toolsmith.config import Settings
from toolsmith.errors import ConfigurationError, GenerationError
from toolsmith.llm_client import LLMClient


class FakeResp:
    def __init__(self, status, payload=None, text=None):
        self.status_code = status
        self._payload = payload
        self.text = text if text is not None else jsonlib.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("not json")
        return self._payload


def _client(**overrides):
    settings = Settings(openai_api_key="sk-test", **overrides)
    return LLMClient(settings)


def test_complete_posts_chat_completion_and_returns_text(monkeypatch):
    captured = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        captured.update(url=url, headers=headers, body=json, timeout=timeout)
        return FakeResp(200, {"choices": [{"message": {"content": "1. Quiz"}}]})

    monkeypatch.setattr(llm_client, "requests", types.SimpleNamespace(post=fake_post, RequestException=requests.RequestException))

    out = _client().complete([{"role": "user", "content": "hi"}])
    assert out == "1. Quiz"
    assert captured["url"] == "https://api.openai.com/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["body"]["model"] == "gpt-4.1"
    assert captured["body"]["messages"] == [{"role": "user", "content": "hi"}]
    assert "temperature" not in captured["body"]
    # no timeout on generative calls unless configured
    assert captured["timeout"] is None


def test_model_override_and_temperature(monkeypatch):
    bodies = []

    def fake_post(url, headers=None, json=None, timeout=None):
        bodies.append(json)
        return FakeResp(200, {"choices": [{"message": {"content": "ok"}}]})

    monkeypatch.setattr(llm_client.requests, "post", fake_post)
    _client(temperature=0.4, llm_timeout_secs=30).complete([{"role": "user", "content": "x"}], model="gpt-4o-mini")
    assert bodies[0]["model"] == "gpt-4o-mini"
    assert bodies[0]["temperature"] == 0.4


def test_null_content_is_empty_string(monkeypatch):
    monkeypatch.setattr(
        llm_client.requests, "post", lambda *a, **k: FakeResp(200, {"choices": [{"message": {"content": None}}]})
    )
    assert _client().complete([{"role": "user", "content": "x"}]) == ""


def test_http_error_raises_generation_error(monkeypatch):
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **k: FakeResp(429, None, text="rate limited"))
    with pytest.raises(GenerationError) as exc_info:
        _client().complete([{"role": "user", "content": "x"}])
    assert "429" in exc_info.value.message


def test_transport_error_raises_generation_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(llm_client.requests, "post", boom)
    with pytest.raises(GenerationError):
        _client().complete([{"role": "user", "content": "x"}])


def test_non_json_body_raises_generation_error(monkeypatch):
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **k: FakeResp(200, None, text="<html>gateway</html>"))
    with pytest.raises(GenerationError):
        _client().complete([{"role": "user", "content": "x"}])


def test_missing_choices_raises_generation_error(monkeypatch):
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **k: FakeResp(200, {"choices": []}))
    with pytest.raises(GenerationError):
        _client().complete([{"role": "user", "content": "x"}])


def test_missing_key_is_configuration_error(monkeypatch):
    def never(*args, **kwargs):
        raise AssertionError("should not call the service without a key")

    monkeypatch.setattr(llm_client.requests, "post", never)
    client = LLMClient(Settings(openai_api_key=""))
    with pytest.raises(ConfigurationError):
        client.complete([{"role": "user", "content": "x"}])


def test_status_shape():
    assert _client().status()["has_token"] is True
    status = LLMClient(Settings()).status()
    assert status["provider"] is None
    assert status["has_token"] is False
