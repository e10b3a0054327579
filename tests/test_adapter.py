"""Tests for the remote call adapter and the response decoder."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from comment_analyzer.core.config import DEFAULT_API_URL, ClientSettings
from comment_analyzer.gateway.adapter import CommentAnalyzerAdapter
from comment_analyzer.gateway.decoder import decode_response
from comment_analyzer.gateway.types import AnalyzerError, ResponseStatus
from comment_analyzer.schemas import Attribute, LanguageCode

from conftest import make_request

SUCCESS_BODY = {
    "attributeScores": {
        "TOXICITY": {
            "spanScores": [{"begin": 0, "end": 31, "score": {"value": 0.92, "type": "PROBABILITY"}}],
            "summaryScore": {"value": 0.92, "type": "PROBABILITY"},
        }
    },
    "languages": ["en"],
    "detectedLanguages": ["en"],
}

ERROR_BODY = {
    "error": {
        "code": 400,
        "message": "API key not valid. Please pass a valid API key.",
        "status": "INVALID_ARGUMENT",
        "details": [
            {
                "@type": "type.googleapis.com/google.rpc.ErrorInfo",
                "reason": "API_KEY_INVALID",
                "domain": "googleapis.com",
            }
        ],
    }
}


def _make_httpx_response(status_code: int, json_data: dict | None = None, text: str = "") -> httpx.Response:
    request = httpx.Request("POST", DEFAULT_API_URL)
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text, request=request)


def _mock_client(mock_client_cls, **post_kwargs) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.post = AsyncMock(**post_kwargs)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client_cls.return_value = mock_client
    return mock_client


# ==========================================================================
# Test: Decoder
# ==========================================================================


class TestDecodeResponse:
    def test_success(self):
        response = decode_response(200, json.dumps(SUCCESS_BODY), latency_ms=12)
        assert response.status == ResponseStatus.SUCCESS
        assert response.latency_ms == 12
        payload = response.raise_for_status()
        assert payload.summary_score(Attribute.TOXICITY) == 0.92
        assert payload.attribute_scores[Attribute.TOXICITY].span_scores[0].end == 31
        assert payload.languages == [LanguageCode.ENGLISH]
        assert payload.summary_score(Attribute.THREAT) is None

    def test_empty_scores_response_is_success(self):
        body = json.dumps({"languages": ["en"], "clientToken": "tok", "detectedLanguages": ["en"]})
        response = decode_response(200, body)
        assert response.is_success
        assert response.payload.attribute_scores == {}
        assert response.payload.client_token == "tok"

    def test_structured_error(self):
        response = decode_response(400, json.dumps(ERROR_BODY))
        assert response.status == ResponseStatus.REMOTE_ERROR
        assert response.error_code == "INVALID_ARGUMENT"
        assert response.http_status == 400
        assert response.error_message.startswith("API key not valid")
        assert response.payload is None

    def test_structured_error_with_200_is_still_an_error(self):
        response = decode_response(200, json.dumps(ERROR_BODY))
        assert response.status == ResponseStatus.REMOTE_ERROR

    def test_invalid_json_keeps_raw_body(self):
        response = decode_response(200, "<html>oops</html>")
        assert response.status == ResponseStatus.DECODE_FAILURE
        assert response.raw_body == "<html>oops</html>"
        assert "not valid JSON" in response.error_message

    def test_unexpected_shape_is_decode_failure(self):
        body = json.dumps({"attributeScores": {"TOXICITY": {"summaryScore": "high"}}})
        response = decode_response(200, body)
        assert response.status == ResponseStatus.DECODE_FAILURE
        assert response.raw_body == body

    def test_unstructured_http_error(self):
        response = decode_response(503, "Service Unavailable")
        assert response.status == ResponseStatus.REMOTE_ERROR
        assert response.error_code == "503"
        assert response.raw_body == "Service Unavailable"

    def test_raise_for_status_on_error(self):
        response = decode_response(503, "")
        with pytest.raises(AnalyzerError) as exc_info:
            response.raise_for_status()
        assert exc_info.value.status == ResponseStatus.REMOTE_ERROR
        assert exc_info.value.response is response

    def test_to_dict(self):
        d = decode_response(200, json.dumps(SUCCESS_BODY)).to_dict()
        assert d["status"] == "success"
        assert d["payload"]["attributeScores"]["TOXICITY"]["summaryScore"]["value"] == 0.92
        assert d["priority"] is None


# ==========================================================================
# Test: Adapter (mocked HTTP)
# ==========================================================================


class TestCommentAnalyzerAdapter:
    @pytest.fixture
    def adapter(self):
        return CommentAnalyzerAdapter(api_key="secret", timeout=5.0)

    @pytest.mark.asyncio
    async def test_success(self, adapter):
        with patch("comment_analyzer.gateway.adapter.httpx.AsyncClient") as mock_client_cls:
            mock_client = _mock_client(mock_client_cls, return_value=_make_httpx_response(200, SUCCESS_BODY))

            response = await adapter.send(make_request("hello"))

        assert response.status == ResponseStatus.SUCCESS
        assert response.payload.summary_score("TOXICITY") == 0.92
        mock_client_cls.assert_called_once_with(timeout=5.0)

        args, kwargs = mock_client.post.call_args
        assert args[0] == DEFAULT_API_URL
        assert kwargs["params"] == {"key": "secret"}
        assert kwargs["json"] == {
            "comment": {"text": "hello"},
            "requestedAttributes": {"TOXICITY": {"scoreType": "PROBABILITY"}},
        }

    @pytest.mark.asyncio
    async def test_remote_error(self, adapter):
        with patch("comment_analyzer.gateway.adapter.httpx.AsyncClient") as mock_client_cls:
            _mock_client(mock_client_cls, return_value=_make_httpx_response(400, ERROR_BODY))
            response = await adapter(make_request("hello"))

        assert response.status == ResponseStatus.REMOTE_ERROR
        assert response.http_status == 400

    @pytest.mark.asyncio
    async def test_timeout(self, adapter):
        with patch("comment_analyzer.gateway.adapter.httpx.AsyncClient") as mock_client_cls:
            _mock_client(mock_client_cls, side_effect=httpx.ReadTimeout("timeout"))
            response = await adapter.send(make_request("hello"))

        assert response.status == ResponseStatus.TRANSPORT_FAILURE
        assert response.error_code == "TIMEOUT"

    @pytest.mark.asyncio
    async def test_connection_error(self, adapter):
        with patch("comment_analyzer.gateway.adapter.httpx.AsyncClient") as mock_client_cls:
            _mock_client(mock_client_cls, side_effect=httpx.ConnectError("connection refused"))
            response = await adapter.send(make_request("hello"))

        assert response.status == ResponseStatus.TRANSPORT_FAILURE
        assert response.error_code == "TRANSPORT"
        assert "connection refused" in response.error_message

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, adapter):
        with patch("comment_analyzer.gateway.adapter.httpx.AsyncClient") as mock_client_cls:
            mock_client = _mock_client(mock_client_cls, return_value=_make_httpx_response(500, text="boom"))
            await adapter.send(make_request("hello"))

        assert mock_client.post.await_count == 1

    def test_from_settings(self):
        settings = ClientSettings(
            api_key="k",
            api_url="http://localhost:9000/analyze",
            request_timeout=3.0,
            _env_file=None,
        )
        adapter = CommentAnalyzerAdapter.from_settings(settings)
        assert adapter.api_key == "k"
        assert adapter.api_url == "http://localhost:9000/analyze"
        assert adapter.timeout == 3.0
