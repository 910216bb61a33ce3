from typing import Dict, List, NamedTuple, Sequence

from guestbook.models.entry import GuestbookEntry


class Thread(NamedTuple):
    root: GuestbookEntry
    replies: List[GuestbookEntry]


def assemble_threads(entries: Sequence[GuestbookEntry]) -> List[Thread]:
    """
    Partition a flat newest-first listing into root entries and their direct
    replies. Input order is kept inside every group. Replies whose root is not
    part of the listing are left out.
    """
    threads: List[Thread] = []
    by_root: Dict[int, Thread] = {}
    for entry in entries:
        if entry.parent_id is None:
            thread = Thread(root=entry, replies=[])
            threads.append(thread)
            by_root[entry.id] = thread

    for entry in entries:
        if entry.parent_id is not None and entry.parent_id in by_root:
            by_root[entry.parent_id].replies.append(entry)

    return threads
