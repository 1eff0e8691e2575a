import uuid

import pytest

from socketspeak.database.core import conversations, errors


@pytest.fixture
def trio(make_user):
    return make_user("a@example.com", "Alice"), make_user("b@example.com", "Bob"), make_user("c@example.com", "Carol")


def test_create_message_returns_server_fields(trio):
    a, b, _ = trio

    message = conversations.create_message(a.id, b.id, text="", image_urls=["https://img/1.png", "https://img/2.png"])

    assert isinstance(message.id, uuid.UUID)
    assert message.created_at is not None
    assert message.text == ""
    assert message.images == ["https://img/1.png", "https://img/2.png"]


def test_create_message_unknown_receiver(trio):
    a, _, _ = trio

    with pytest.raises(errors.NotFound) as excinfo:
        conversations.create_message(a.id, uuid.uuid4(), text="hi", image_urls=[])
    assert excinfo.value.status_code == 404


def test_authorize_send_checks_receiver_and_gate(make_user):
    receiver = make_user("a@example.com", private_key="ab12")
    sender = make_user("b@example.com")

    with pytest.raises(errors.NotFound):
        conversations.authorize_send(sender.id, uuid.uuid4())
    with pytest.raises(errors.Unauthorized):
        conversations.authorize_send(sender.id, receiver.id, "nope")
    assert conversations.authorize_send(sender.id, receiver.id, "ab12").id == receiver.id
    assert conversations.get_messages(sender.id, receiver.id) == []


def test_get_messages_both_directions_in_creation_order(trio):
    a, b, c = trio
    conversations.create_message(a.id, b.id, text="1", image_urls=[])
    conversations.create_message(b.id, a.id, text="2", image_urls=[])
    conversations.create_message(a.id, c.id, text="other", image_urls=[])
    conversations.create_message(a.id, b.id, text="3", image_urls=[])

    assert [m.text for m in conversations.get_messages(a.id, b.id)] == ["1", "2", "3"]
    assert [m.text for m in conversations.get_messages(b.id, a.id)] == ["1", "2", "3"]


def test_conversation_partners_are_distinct(trio):
    a, b, c = trio
    conversations.create_message(a.id, b.id, text="1", image_urls=[])
    conversations.create_message(b.id, a.id, text="2", image_urls=[])
    conversations.create_message(c.id, a.id, text="3", image_urls=[])

    partners = conversations.list_conversation_partners(a.id)

    assert sorted(p.email for p in partners) == ["b@example.com", "c@example.com"]
    assert [p.email for p in conversations.list_conversation_partners(c.id)] == ["a@example.com"]


def test_delete_message_only_by_sender(trio):
    a, b, c = trio
    message = conversations.create_message(a.id, b.id, text="oops", image_urls=[])

    for intruder in (b, c):
        with pytest.raises(errors.Unauthorized):
            conversations.delete_message(intruder.id, message.id)

    deleted = conversations.delete_message(a.id, message.id)

    assert deleted.id == message.id
    assert deleted.other_party(a.id) == b.id
    assert conversations.get_messages(a.id, b.id) == []
    with pytest.raises(errors.NotFound):
        conversations.delete_message(a.id, message.id)


def test_delete_conversation_removes_only_the_pair(trio):
    a, b, c = trio
    conversations.create_message(a.id, b.id, text="1", image_urls=[])
    conversations.create_message(b.id, a.id, text="2", image_urls=[])
    conversations.create_message(a.id, c.id, text="keep", image_urls=[])
    conversations.create_message(c.id, b.id, text="keep too", image_urls=[])

    count = conversations.delete_conversation(b.id, a.id)

    assert count == 2
    assert conversations.get_messages(a.id, b.id) == []
    assert [m.text for m in conversations.get_messages(a.id, c.id)] == ["keep"]
    assert [m.text for m in conversations.get_messages(b.id, c.id)] == ["keep too"]
    assert conversations.delete_conversation(a.id, b.id) == 0


def test_store_failure_surfaces_as_internal_error(trio, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from socketspeak.database.daos import MessageDao

    a, b, _ = trio
    conversations.create_message(a.id, b.id, text="1", image_urls=[])

    def broken(*args, **kwargs):
        raise OperationalError("DELETE", {}, Exception("database is locked"))

    monkeypatch.setattr(MessageDao, "delete_between", staticmethod(broken))

    with pytest.raises(errors.InternalError) as excinfo:
        conversations.delete_conversation(a.id, b.id)

    assert excinfo.value.message == "Internal server error"
    monkeypatch.undo()
    assert len(conversations.get_messages(a.id, b.id)) == 1
