"""
Execution-scoped key/value storage.

Dict-based Word -> Word map. Unset keys read as Word(0); there is no delete,
only overwrite.
"""

from __future__ import annotations

from typing import Iterator

from tinyevm.vm.word import ZERO, Word


class Storage:
    """Storage slots for a single execution run."""

    __slots__ = ("_slots", "on_change")

    def __init__(self) -> None:
        self._slots: dict[Word, Word] = {}
        # Called as on_change(key, old_value, new_value) on every write.
        self.on_change = None

    def get(self, key: Word) -> Word:
        return self._slots.get(key, ZERO)

    def set(self, key: Word, value: Word) -> None:
        old = self.get(key)
        self._slots[key] = value
        if self.on_change is not None:
            self.on_change(key, old, value)

    def __getitem__(self, key: Word) -> Word:
        return self.get(key)

    def __setitem__(self, key: Word, value: Word) -> None:
        self.set(key, value)

    def __contains__(self, key: Word) -> bool:
        return key in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Word]:
        return iter(self._slots)

    def items(self):
        return self._slots.items()

    def __eq__(self, other) -> bool:
        if isinstance(other, Storage):
            return self._slots == other._slots
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"Storage({self._slots!r})"
