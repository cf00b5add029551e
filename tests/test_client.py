"""Tests for oracle clients."""
import io
import json
import time
import urllib.error
import urllib.request

import pytest

from t800.client import (
    CommunicationError,
    DecodeError,
    MockClient,
    OllamaClient,
    OracleClient,
    OracleError,
)
from t800.config import OracleConfig


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class TestProtocol:
    def test_clients_conform(self):
        """Both clients satisfy the runtime-checkable protocol."""
        assert isinstance(MockClient(responses={}), OracleClient)
        assert isinstance(OllamaClient(), OracleClient)

    def test_error_hierarchy(self):
        assert issubclass(CommunicationError, OracleError)
        assert issubclass(DecodeError, OracleError)


class TestMockClient:
    def test_dict_responses(self):
        client = MockClient(responses={("sys", "usr"): "answer"})
        assert client.query("sys", "usr") == "answer"

    def test_dict_missing_key_returns_empty_json(self):
        client = MockClient(responses={})
        assert client.query("a", "b") == "{}"

    def test_callable_responses(self):
        client = MockClient(responses=lambda s, u: f"{s}|{u}")
        assert client.query("x", "y") == "x|y"

    def test_records_calls(self):
        client = MockClient(responses={})
        client.query("x", "y")
        assert list(client.calls) == [("x", "y")]

    def test_call_history_is_bounded(self):
        client = MockClient(responses={}, history=3)
        for i in range(10):
            client.query("s", str(i))
        assert [u for _, u in client.calls] == ["7", "8", "9"]

    def test_latency(self):
        client = MockClient(responses={}, latency=0.05)
        start = time.monotonic()
        client.query("s", "u")
        assert time.monotonic() - start >= 0.05

    def test_error_rate_raises_communication_error(self):
        client = MockClient(responses={}, error_rate=1.0)
        with pytest.raises(CommunicationError):
            client.query("s", "u")

    def test_custom_error(self):
        client = MockClient(responses={}, error_rate=1.0, error_exception=DecodeError("bad"))
        with pytest.raises(DecodeError):
            client.query("s", "u")


class TestOllamaClient:
    def test_posts_generate_request(self, monkeypatch):
        """The request targets /api/generate with JSON format and no streaming."""
        captured = {}

        def fake_urlopen(req, timeout=None):
            captured["url"] = req.full_url
            captured["body"] = json.loads(req.data.decode("utf-8"))
            captured["timeout"] = timeout
            return _FakeResponse(json.dumps({"response": '{"action": "move"}'}).encode())

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        client = OllamaClient(model="test-model", base_url="http://oracle:1234/", timeout=5.0)

        result = client.query("system text", "user text")

        assert result == '{"action": "move"}'
        assert captured["url"] == "http://oracle:1234/api/generate"
        assert captured["timeout"] == 5.0
        body = captured["body"]
        assert body["model"] == "test-model"
        assert body["system"] == "system text"
        assert body["prompt"] == "user text"
        assert body["stream"] is False
        assert body["format"] == "json"

    def test_unreachable_raises_communication_error(self, monkeypatch):
        def fake_urlopen(req, timeout=None):
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(CommunicationError):
            OllamaClient().query("s", "u")

    def test_http_error_raises_communication_error(self, monkeypatch):
        def fake_urlopen(req, timeout=None):
            raise urllib.error.HTTPError(req.full_url, 500, "boom", {}, None)

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(CommunicationError, match="500"):
            OllamaClient().query("s", "u")

    def test_bad_envelope_raises_decode_error(self, monkeypatch):
        monkeypatch.setattr(
            urllib.request, "urlopen",
            lambda req, timeout=None: _FakeResponse(b"not json"),
        )
        with pytest.raises(DecodeError):
            OllamaClient().query("s", "u")

    def test_missing_response_field_raises_decode_error(self, monkeypatch):
        monkeypatch.setattr(
            urllib.request, "urlopen",
            lambda req, timeout=None: _FakeResponse(b'{"done": true}'),
        )
        with pytest.raises(DecodeError):
            OllamaClient().query("s", "u")

    @pytest.mark.parametrize("payload", [b'{"response": null}', b'{"response": 42}'])
    def test_non_text_response_raises_decode_error(self, monkeypatch, payload):
        monkeypatch.setattr(
            urllib.request, "urlopen",
            lambda req, timeout=None: _FakeResponse(payload),
        )
        with pytest.raises(DecodeError, match="not text"):
            OllamaClient().query("s", "u")

    def test_from_config(self):
        client = OllamaClient.from_config(
            OracleConfig(base_url="http://x:1/", model="m"),
        )
        assert client.base_url == "http://x:1"
        assert client.model == "m"
