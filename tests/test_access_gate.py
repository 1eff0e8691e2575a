import uuid

import pytest

from socketspeak.database.core import access_gate, conversations, errors, keys
from socketspeak.database.core.db import get_session


@pytest.mark.parametrize(
    "candidate, stored, expected",
    [
        ("abcd", "abcd", True),
        ("  abcd", "abcd", True),
        ("abcd\n", " abcd ", True),
        ("abCD", "abcd", False),
        ("abc", "abcd", False),
        (None, "abcd", False),
        ("", "abcd", False),
    ],
)
def test_keys_match_is_exact_after_trim(candidate, stored, expected):
    assert access_gate.keys_match(candidate, stored) is expected


def test_first_contact_without_key_is_rejected_and_nothing_stored(make_user):
    receiver = make_user("a@example.com", private_key="ab12")
    sender = make_user("b@example.com")

    with pytest.raises(errors.Unauthorized) as excinfo:
        conversations.create_message(sender.id, receiver.id, text="hi", image_urls=[])

    assert excinfo.value.extra == {"requiresKey": True}
    assert excinfo.value.to_payload()["requiresKey"] is True
    assert conversations.get_messages(sender.id, receiver.id) == []


def test_first_contact_with_wrong_case_key_is_rejected(make_user):
    receiver = make_user("a@example.com", private_key="abcd")
    sender = make_user("b@example.com")

    with pytest.raises(errors.Unauthorized):
        conversations.create_message(sender.id, receiver.id, text="hi", image_urls=[], private_key="abCD")
    assert conversations.get_messages(sender.id, receiver.id) == []


def test_first_contact_with_padded_key_is_accepted(make_user):
    receiver = make_user("a@example.com", private_key="abcd")
    sender = make_user("b@example.com")

    message = conversations.create_message(sender.id, receiver.id, text="hi", image_urls=[], private_key="  abcd ")

    assert message.sender_id == sender.id
    assert message.receiver_id == receiver.id


def test_gate_skipped_when_receiver_key_not_set(make_user):
    receiver = make_user("a@example.com")
    sender = make_user("b@example.com")
    assert receiver.private_key and not receiver.private_key_set

    message = conversations.create_message(sender.id, receiver.id, text="hello", image_urls=[])

    assert message.text == "hello"


def test_established_conversation_ignores_key_in_both_directions(make_user):
    a = make_user("a@example.com", private_key="ab12")
    b = make_user("b@example.com", private_key="zz99")
    conversations.create_message(b.id, a.id, text="first", image_urls=[], private_key="ab12")

    conversations.create_message(b.id, a.id, text="again", image_urls=[], private_key="nonsense")
    conversations.create_message(a.id, b.id, text="reply", image_urls=[])

    assert [m.text for m in conversations.get_messages(a.id, b.id)] == ["first", "again", "reply"]


def test_check_first_contact_does_not_mutate_receiver(make_user):
    receiver = make_user("a@example.com", private_key="ab12")
    sender = make_user("b@example.com")

    with get_session() as session:
        with pytest.raises(errors.Unauthorized):
            access_gate.check_first_contact(session, sender.id, receiver, "wrong")

    assert access_gate.verify_private_key(receiver.id, "ab12").key == "ab12"


def test_verify_private_key_returns_canonical_key(make_user):
    user = make_user("a@example.com", private_key="ab12")

    verified = access_gate.verify_private_key(user.id, "  ab12  ")

    assert isinstance(verified, access_gate.UserWithVerifiedKey)
    assert verified.key == "ab12"
    assert verified.user.id == user.id


def test_verify_private_key_failures(make_user):
    user = make_user("a@example.com", private_key="ab12")

    with pytest.raises(errors.Unauthorized) as wrong:
        access_gate.verify_private_key(user.id, "AB12")
    assert wrong.value.extra == {"isValid": False}

    with pytest.raises(errors.ValidationError):
        access_gate.verify_private_key(user.id, None)

    with pytest.raises(errors.NotFound):
        access_gate.verify_private_key(uuid.uuid4(), "ab12")


def test_rotation_invalidates_old_key_but_not_existing_conversations(make_user):
    a = make_user("a@example.com", private_key="ab12")
    b = make_user("b@example.com")
    c = make_user("c@example.com")
    conversations.create_message(b.id, a.id, text="hi", image_urls=[], private_key="ab12")

    rotated = keys.rotate_private_key(a.id)

    assert rotated.private_key != "ab12"
    with pytest.raises(errors.Unauthorized):
        access_gate.verify_private_key(a.id, "ab12")
    assert access_gate.verify_private_key(a.id, rotated.private_key).key == rotated.private_key
    # established conversation stays open without any key
    conversations.create_message(b.id, a.id, text="still here", image_urls=[])
    # a new first contact needs the new key
    with pytest.raises(errors.Unauthorized):
        conversations.create_message(c.id, a.id, text="hey", image_urls=[], private_key="ab12")
