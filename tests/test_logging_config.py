import json
import logging

from shopsense.logging_config import JSONFormatter, SecretRedactor, contact_logger, get_logger


def _record(message, context=None, name="shopsense.test"):
    record = logging.LogRecord(name, logging.INFO, __file__, 1, message, None, None)
    if context is not None:
        record.context = context
    return record


class TestJSONFormatter:
    def test_formats_one_json_object(self):
        line = JSONFormatter().format(_record("Message stored", {"message_id": "1"}))

        entry = json.loads(line)
        assert entry["level"] == "INFO"
        assert entry["logger"] == "shopsense.test"
        assert entry["message"] == "Message stored"
        assert entry["context"] == {"message_id": "1"}

    def test_redacts_secrets_in_message_and_context(self):
        formatter = JSONFormatter(SecretRedactor(["sk-live-secret-123", None]))

        line = formatter.format(
            _record("calling with sk-live-secret-123", {"headers": {"Authorization": "Bearer sk-live-secret-123"}})
        )

        assert "sk-live-secret-123" not in line
        entry = json.loads(line)
        assert entry["context"]["headers"]["Authorization"] == "Bearer [redacted]"

    def test_non_serializable_context_is_stringified(self):
        entry = json.loads(JSONFormatter().format(_record("x", {"error": ValueError("bad")})))

        assert entry["context"]["error"] == "bad"


class TestContactLogger:
    def test_binds_contact_and_merges_call_context(self, caplog):
        log = contact_logger(get_logger("pipeline"), "+15557654321")

        with caplog.at_level(logging.INFO, logger="shopsense.pipeline"):
            log.info("Reply derived", context={"intent": "Quote Request"})

        record = caplog.records[-1]
        assert record.name == "shopsense.pipeline"
        assert record.context == {"contact_id": "+15557654321", "intent": "Quote Request"}
