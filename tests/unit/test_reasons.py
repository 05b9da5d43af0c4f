import pytest

from app.extraction import reasons


class TestReasonForStatus:
    def test_unauthorized(self) -> None:
        assert reasons.reason_for_status("anthropic", 401, "") == "anthropic_unauthorized"

    def test_forbidden(self) -> None:
        assert reasons.reason_for_status("anthropic", 403, "") == "anthropic_forbidden"

    @pytest.mark.parametrize(
        "body",
        [
            "Your credit balance is too low to access the Anthropic API.",
            '{"error": {"code": "insufficient_quota"}}',
            "You exceeded your current quota, please check your plan",
        ],
    )
    def test_insufficient_credit(self, body: str) -> None:
        assert reasons.reason_for_status("openai", 429, body) == "openai_insufficient_credit"

    def test_credit_message_wins_over_unauthorized(self) -> None:
        body = "credit balance is too low"
        assert reasons.reason_for_status("anthropic", 401, body) == "anthropic_insufficient_credit"

    def test_credit_message_ignored_for_server_errors(self) -> None:
        body = "credit balance is too low"
        assert reasons.reason_for_status("anthropic", 500, body) == "anthropic_error"

    def test_other_status_is_generic(self) -> None:
        assert reasons.reason_for_status("anthropic", 404, "not found") == "anthropic_error"

    def test_none_body(self) -> None:
        assert reasons.reason_for_status("anthropic", 400, None) == "anthropic_error"  # type: ignore[arg-type]


class TestOtherReasons:
    def test_request_failed(self) -> None:
        assert reasons.request_failed("openai") == "openai_request_failed"

    def test_invalid_response(self) -> None:
        assert reasons.invalid_response("example") == "example_invalid_response"

    def test_missing_api_key_is_not_prefixed(self) -> None:
        assert reasons.MISSING_API_KEY == "missing_api_key"
