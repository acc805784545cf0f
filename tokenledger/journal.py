"""
journal.py - Undo Journal for All-or-Nothing Operations

Every piece of mutable token and host state is written through a Journal.
Inside a transaction each write records the value it replaced, so a failed
operation can be unwound entry by entry, newest first. Only the keys an
operation touches are recorded; nothing is copied up front.

Transactions nest. Each level remembers where the journal stood when it
began and, on failure, unwinds back to exactly that point. The entries are
dropped when the outermost level completes.

Outside a transaction writes go straight through and nothing is recorded.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, MutableMapping, MutableSet


# Marks a mapping key that did not exist before the write.
_MISSING = object()


@dataclass(frozen=True, slots=True)
class JournalEntry:
    """
    One reversible write.

    Attributes:
        kind: "item", "attr", "set_add", "set_remove" or "append"
        target: The mapping, object, set or list that was written
        key: Mapping key, attribute name or set member (None for "append")
        old_value: Value before the write, or _MISSING for a new key
    """
    kind: str
    target: Any
    key: Any
    old_value: Any = None


class Journal:
    """
    Records writes made inside transactions so they can be undone.

    Example:
        journal = Journal()
        balances = {"alice": 10}
        with journal.transaction():
            journal.set_item(balances, "alice", 5)
            journal.set_item(balances, "bob", 5)
        # balances == {"alice": 5, "bob": 5}
    """

    def __init__(self):
        self.entries: List[JournalEntry] = []
        self.depth: int = 0

    @property
    def active(self) -> bool:
        return self.depth > 0

    def _record(self, entry: JournalEntry) -> None:
        if self.depth:
            self.entries.append(entry)

    # ========================================================================
    # WRITES
    # ========================================================================

    def set_item(self, mapping: MutableMapping, key: Any, value: Any) -> None:
        old = mapping[key] if key in mapping else _MISSING
        self._record(JournalEntry("item", mapping, key, old))
        mapping[key] = value

    def set_attr(self, obj: Any, name: str, value: Any) -> None:
        self._record(JournalEntry("attr", obj, name, getattr(obj, name)))
        setattr(obj, name, value)

    def add(self, members: MutableSet, item: Any) -> None:
        if item not in members:
            self._record(JournalEntry("set_add", members, item))
            members.add(item)

    def discard(self, members: MutableSet, item: Any) -> None:
        if item in members:
            self._record(JournalEntry("set_remove", members, item))
            members.discard(item)

    def append(self, items: List[Any], item: Any) -> None:
        self._record(JournalEntry("append", items, None))
        items.append(item)

    # ========================================================================
    # TRANSACTIONS
    # ========================================================================

    @contextmanager
    def transaction(self) -> Iterator['Journal']:
        """
        Run the enclosed block all-or-nothing.

        If the block raises, every write it made (including writes made by
        nested transactions that completed) is undone and the exception
        propagates unchanged.
        """
        mark = len(self.entries)
        self.depth += 1
        try:
            yield self
        except Exception:
            self.rollback_to(mark)
            raise
        finally:
            self.depth -= 1
            if self.depth == 0:
                self.entries.clear()

    def rollback_to(self, mark: int) -> None:
        """Undo entries newest first until only the first mark entries remain."""
        while len(self.entries) > mark:
            entry = self.entries.pop()
            if entry.kind == "item":
                if entry.old_value is _MISSING:
                    del entry.target[entry.key]
                else:
                    entry.target[entry.key] = entry.old_value
            elif entry.kind == "attr":
                setattr(entry.target, entry.key, entry.old_value)
            elif entry.kind == "set_add":
                entry.target.discard(entry.key)
            elif entry.kind == "set_remove":
                entry.target.add(entry.key)
            elif entry.kind == "append":
                entry.target.pop()
            else:
                raise ValueError(f"Unknown journal entry kind: {entry.kind}")
