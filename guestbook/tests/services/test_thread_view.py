from datetime import datetime, timedelta, timezone

from guestbook.models import GuestbookEntry
from guestbook.services.thread_view import assemble_threads

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _entry(entry_id, parent_id=None, minute=0):
    return GuestbookEntry(
        id=entry_id,
        owner_username="carol",
        sender_name=f"sender{entry_id}",
        message=f"message {entry_id}",
        parent_id=parent_id,
        created_at=BASE + timedelta(minutes=minute),
    )


def _newest_first(entries):
    return sorted(entries, key=lambda e: (e.created_at, e.id), reverse=True)


def test_replies_grouped_under_root_newest_first():
    root_a = _entry(1, minute=0)
    root_b = _entry(2, minute=1)
    reply_a1 = _entry(3, parent_id=1, minute=2)
    reply_a2 = _entry(4, parent_id=1, minute=3)
    reply_b1 = _entry(5, parent_id=2, minute=4)

    threads = assemble_threads(_newest_first([root_a, root_b, reply_a1, reply_a2, reply_b1]))

    assert [t.root.id for t in threads] == [2, 1]
    assert [r.id for r in threads[0].replies] == [5]
    assert [r.id for r in threads[1].replies] == [4, 3]


def test_reply_without_visible_root_is_dropped():
    root = _entry(1)
    orphan = _entry(2, parent_id=99, minute=1)

    threads = assemble_threads(_newest_first([root, orphan]))

    assert len(threads) == 1
    assert threads[0].root.id == 1
    assert threads[0].replies == []


def test_empty_listing():
    assert assemble_threads([]) == []


def test_input_is_not_modified():
    entries = _newest_first([_entry(1), _entry(2, parent_id=1, minute=1)])
    snapshot = list(entries)
    assemble_threads(entries)
    assert entries == snapshot
