from shopsense.services.result import Result


class TestResultSuccess:
    def test_success_creates_ok_result(self):
        result = Result.success({"data": {"id": "MSG1"}}, status_code=202)
        assert result.ok is True
        assert result.value == {"data": {"id": "MSG1"}}
        assert result.error is None
        assert result.status_code == 202
        assert result.attempts == 1


class TestResultFailure:
    def test_failure_creates_not_ok_result(self):
        result = Result.failure("OpenPhone API error: 500", "http_error", status_code=500, attempts=2)
        assert result.ok is False
        assert result.error == "OpenPhone API error: 500"
        assert result.error_code == "http_error"
        assert result.value is None
        assert result.attempts == 2

    def test_failure_default_code(self):
        assert Result.failure("Error message").error_code == "unknown"


class TestResultUnwrapOr:
    def test_returns_value_on_success(self):
        assert Result.success({"id": "MSG1"}).unwrap_or({}) == {"id": "MSG1"}

    def test_returns_default_on_failure(self):
        assert Result.failure("timed out", "transport_error").unwrap_or({}) == {}


class TestLogContext:
    def test_failure_context_has_no_value(self):
        context = Result.failure("rejected", "auth_rejected", status_code=401, attempts=3).log_context()

        assert context == {
            "ok": False,
            "error": "rejected",
            "error_code": "auth_rejected",
            "status_code": 401,
            "attempts": 3,
        }
