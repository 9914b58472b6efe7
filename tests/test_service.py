import pytest

from anonboard import config
from anonboard.errors import DeleteResult, NotFound, OperationFailed


def test_create_thread(service):
    thread = service.create_thread("b", "hi", "a")
    assert thread.text == "hi"
    assert thread.created_on == thread.bumped_on
    assert thread.reported is False
    assert thread.replies == []
    assert thread.delete_password and thread.delete_password != "a"
    assert service.store.get_board("b").find_thread(thread.id) is not None


def test_create_thread_creates_the_board_once(service):
    service.create_thread("b", "one", "a")
    service.create_thread("b", "two", "a")
    assert len(service.store.get_board("b").threads) == 2


def test_list_unknown_board_is_empty(service):
    assert service.list_board("nowhere") == []


def test_reply_bumps_the_thread(service):
    thread = service.create_thread("b", "hi", "a")
    updated = service.create_reply("b", thread.id, "yo", "r")
    reply = updated.replies[-1]
    assert reply.text == "yo"
    assert updated.bumped_on == reply.created_on
    assert updated.bumped_on >= updated.created_on
    assert service.list_thread("b", thread.id).bumped_on == reply.created_on


def test_reply_moves_thread_to_the_top(service):
    old = service.create_thread("b", "old", "a")
    service.create_thread("b", "new", "a")
    service.create_reply("b", old.id, "bump", "a")
    assert service.list_board("b")[0].id == old.id


def test_reply_to_missing_thread(service):
    service.create_thread("b", "hi", "a")
    with pytest.raises(NotFound) as excinfo:
        service.create_reply("b", "nope", "yo", "r")
    assert excinfo.value.entity == "thread"
    with pytest.raises(NotFound) as excinfo:
        service.create_reply("other", "nope", "yo", "r")
    assert excinfo.value.entity == "board"


def test_report_thread_is_idempotent_and_does_not_bump(service):
    thread = service.create_thread("b", "hi", "a")
    service.report_thread("b", thread.id)
    service.report_thread("b", thread.id)
    stored = service.store.get_board("b").find_thread(thread.id)
    assert stored.reported is True
    assert stored.bumped_on == thread.bumped_on


def test_report_missing_thread(service):
    with pytest.raises(NotFound):
        service.report_thread("b", "nope")


def test_delete_thread_wrong_password_leaves_it(service):
    thread = service.create_thread("b", "hi", "a")
    assert service.delete_thread("b", thread.id, "wrong") is DeleteResult.INCORRECT_PASSWORD
    assert service.list_thread("b", thread.id).id == thread.id


def test_delete_thread_removes_it(service):
    thread = service.create_thread("b", "hi", "a")
    assert service.delete_thread("b", thread.id, "a") is DeleteResult.SUCCESS
    with pytest.raises(NotFound):
        service.list_thread("b", thread.id)
    assert service.list_board("b") == []


def test_delete_reply_leaves_a_tombstone(service):
    thread = service.create_thread("b", "hi", "a")
    first = service.create_reply("b", thread.id, "one", "p").replies[-1]
    service.create_reply("b", thread.id, "two", "q")

    assert service.delete_reply("b", thread.id, first.id, "nope") is DeleteResult.INCORRECT_PASSWORD
    assert service.list_thread("b", thread.id).replies[0].text == "one"

    assert service.delete_reply("b", thread.id, first.id, "p") is DeleteResult.SUCCESS
    replies = service.list_thread("b", thread.id).replies
    assert len(replies) == 2
    assert replies[0].id == first.id
    assert replies[0].text == config.DELETED_REPLY_TEXT
    assert replies[1].text == "two"


def test_report_reply(service):
    thread = service.create_thread("b", "hi", "a")
    reply = service.create_reply("b", thread.id, "one", "p").replies[-1]
    service.report_reply("b", thread.id, reply.id)
    service.report_reply("b", thread.id, reply.id)
    stored = service.store.get_board("b").find_thread(thread.id).find_reply(reply.id)
    assert stored.reported is True


def test_missing_reply(service):
    thread = service.create_thread("b", "hi", "a")
    with pytest.raises(NotFound) as excinfo:
        service.report_reply("b", thread.id, "nope")
    assert excinfo.value.entity == "reply"
    with pytest.raises(NotFound):
        service.delete_reply("b", thread.id, "nope", "p")


def test_corrupt_hash_is_not_a_wrong_password(service):
    thread = service.create_thread("b", "hi", "a")
    board = service.store.get_board("b")
    board.find_thread(thread.id).delete_password = "garbage"
    service.store.save_board(board)
    with pytest.raises(OperationFailed):
        service.delete_thread("b", thread.id, "a")
    assert service.list_thread("b", thread.id).id == thread.id


def test_concurrent_replies_lose_one_update(service):
    thread = service.create_thread("b", "hi", "a")
    store = service.store
    stale = store.get_board("b")

    service.create_reply("b", thread.id, "kept?", "p")
    stale.find_thread(thread.id).text = "edited from a stale copy"
    store.save_board(stale)

    detail = service.list_thread("b", thread.id)
    assert detail.text == "edited from a stale copy"
    assert detail.replies == []
