from shopsense.services.conversation_store import INBOUND, OUTBOUND, ConversationStore
from shopsense.services.replies import SOURCE_LLM, DerivedReply

CONTACT = "+15557654321"
OTHER_CONTACT = "+15559990000"


def derived(**overrides):
    values = {"reply": "On it", "intent": "Service Request", "action": "Collect details", "fields": {}, "source": SOURCE_LLM}
    values.update(overrides)
    return DerivedReply(**values)


class TestRecord:
    def test_inbound_message_starts_unprocessed(self, repository):
        store = ConversationStore(repository)

        message = store.record(CONTACT, "hello", INBOUND)

        assert message.processed is False
        assert message.read is False
        assert message.direction == INBOUND

    def test_outbound_message_is_processed_and_read(self, repository):
        store = ConversationStore(repository)

        message = store.record(CONTACT, "hi back", OUTBOUND, id_suffix="_out")

        assert message.processed is True
        assert message.read is True
        assert message.id.endswith("_out")

    def test_ids_are_unique_within_a_burst(self, repository):
        store = ConversationStore(repository)

        ids = [store.record(CONTACT, f"m{i}", INBOUND).id for i in range(20)]

        assert len(set(ids)) == 20


class TestQueries:
    def test_recent_is_oldest_first_and_limited(self, repository):
        store = ConversationStore(repository)
        for i in range(5):
            store.record(CONTACT, f"m{i}", INBOUND)
        store.record(OTHER_CONTACT, "elsewhere", INBOUND)

        recent = store.recent(CONTACT, limit=3)

        assert [m.body for m in recent] == ["m2", "m3", "m4"]

    def test_recent_can_exclude_current_message(self, repository):
        store = ConversationStore(repository)
        store.record(CONTACT, "older", INBOUND)
        current = store.record(CONTACT, "current", INBOUND)

        recent = store.recent(CONTACT, exclude_id=current.id)

        assert [m.body for m in recent] == ["older"]

    def test_all_is_newest_first(self, repository):
        store = ConversationStore(repository)
        store.record(CONTACT, "first", INBOUND)
        store.record(OTHER_CONTACT, "second", INBOUND)
        store.record(CONTACT, "third", OUTBOUND)

        assert [m.body for m in store.all()] == ["third", "second", "first"]
        assert [m.body for m in store.all(limit=2)] == ["third", "second"]


class TestMutations:
    def test_mark_read(self, repository):
        store = ConversationStore(repository)
        message = store.record(CONTACT, "hello", INBOUND)

        assert store.mark_read(message.id) is True
        assert repository.get(type(message), message.id).read is True

    def test_mark_read_unknown_message(self, repository):
        assert ConversationStore(repository).mark_read("missing") is False

    def test_back_fill_sets_derived_fields_once(self, repository):
        store = ConversationStore(repository)
        message = store.record(CONTACT, "hello", INBOUND)

        store.back_fill(message.id, derived(fields={"firstName": "Ana"}))
        store.back_fill(message.id, derived(intent="Something else", reply="changed"))

        stored = repository.get(type(message), message.id)
        assert stored.processed is True
        assert stored.derived_intent == "Service Request"
        assert stored.ai_reply_text == "On it"
        assert stored.customer_data == {"firstName": "Ana"}
