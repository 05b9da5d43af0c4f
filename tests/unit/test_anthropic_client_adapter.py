import json

import httpx
import pytest

from app.extraction.anthropic_client_adapter import AnthropicClientAdapter
from app.extraction.exceptions import ExtractionUnavailableError


def _adapter(handler) -> AnthropicClientAdapter:
    return AnthropicClientAdapter(
        api_key="sk-test",
        model="claude-test",
        max_tokens=500,
        timeout_seconds=5,
        base_url="https://api.test/v1",
        transport=httpx.MockTransport(handler),
    )


def _extract(adapter: AnthropicClientAdapter):
    return adapter.extract(image_base64="QUJD", media_type="image/jpeg", prompt="read it")


def _message(*blocks: dict) -> dict:
    return {"type": "message", "role": "assistant", "content": list(blocks)}


class TestSuccessfulCall:
    def test_returns_body_and_answer_text(self) -> None:
        body = _message({"type": "text", "text": '{"name": "Jane"}'})
        response = _extract(_adapter(lambda request: httpx.Response(200, json=body)))
        assert response.body == body
        assert response.text == '{"name": "Jane"}'

    def test_sends_headers_and_payload(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=_message({"type": "text", "text": "{}"}))

        _extract(_adapter(handler))

        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.test/v1/messages"
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        payload = json.loads(request.content)
        assert payload["model"] == "claude-test"
        assert payload["max_tokens"] == 500
        image_block, text_block = payload["messages"][0]["content"]
        assert image_block["source"] == {
            "type": "base64",
            "media_type": "image/jpeg",
            "data": "QUJD",
        }
        assert text_block == {"type": "text", "text": "read it"}

    def test_joins_multiple_text_blocks(self) -> None:
        body = _message(
            {"type": "text", "text": "{"},
            {"type": "tool_use", "id": "x"},
            {"type": "text", "text": "}"},
        )
        response = _extract(_adapter(lambda request: httpx.Response(200, json=body)))
        assert response.text == "{\n}"


class TestStatusMapping:
    @pytest.mark.parametrize(
        ("status", "text", "reason"),
        [
            (401, '{"error": {"type": "authentication_error"}}', "anthropic_unauthorized"),
            (403, '{"error": {"type": "permission_error"}}', "anthropic_forbidden"),
            (
                400,
                '{"error": {"message": "Your credit balance is too low to access the API"}}',
                "anthropic_insufficient_credit",
            ),
            (400, '{"error": {"type": "invalid_request_error"}}', "anthropic_error"),
            (500, "upstream exploded", "anthropic_error"),
            (529, '{"error": {"type": "overloaded_error"}}', "anthropic_error"),
        ],
    )
    def test_maps_status_to_reason(self, status: int, text: str, reason: str) -> None:
        adapter = _adapter(lambda request: httpx.Response(status, text=text))
        with pytest.raises(ExtractionUnavailableError) as exc_info:
            _extract(adapter)
        assert exc_info.value.reason == reason
        assert exc_info.value.status_code == status


class TestTransportFailures:
    def test_connect_error_is_request_failed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExtractionUnavailableError) as exc_info:
            _extract(_adapter(handler))
        assert exc_info.value.reason == "anthropic_request_failed"
        assert exc_info.value.status_code is None

    def test_timeout_is_request_failed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ExtractionUnavailableError) as exc_info:
            _extract(_adapter(handler))
        assert exc_info.value.reason == "anthropic_request_failed"


class TestInvalidBodies:
    def test_non_json_body(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, text="<html>hi</html>"))
        with pytest.raises(ExtractionUnavailableError) as exc_info:
            _extract(adapter)
        assert exc_info.value.reason == "anthropic_invalid_response"

    def test_non_object_body(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json=["a", "b"]))
        with pytest.raises(ExtractionUnavailableError) as exc_info:
            _extract(adapter)
        assert exc_info.value.reason == "anthropic_invalid_response"

    def test_no_text_blocks(self) -> None:
        body = _message({"type": "tool_use", "id": "x"})
        adapter = _adapter(lambda request: httpx.Response(200, json=body))
        with pytest.raises(ExtractionUnavailableError, match="no text content") as exc_info:
            _extract(adapter)
        assert exc_info.value.reason == "anthropic_invalid_response"

    def test_missing_content(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(200, json={"type": "message"}))
        with pytest.raises(ExtractionUnavailableError) as exc_info:
            _extract(adapter)
        assert exc_info.value.reason == "anthropic_invalid_response"
