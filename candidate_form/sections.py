"""Repeatable form sections (education, work experience) keyed by stable ids."""

import uuid
from dataclasses import fields
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

E = TypeVar("E")


def new_entry_id() -> str:
    return uuid.uuid4().hex


class RepeatableSection(Generic[E]):
    """
    Insertion-ordered list of structurally identical entries.

    Entries are addressed by their generated ``id`` only, so removing one
    never hands another entry's identity or position to a different entry.
    """

    def __init__(
        self,
        entry_type: Type[E],
        name: str,
        labels: Optional[Dict[str, str]] = None,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            entry_type: Dataclass of the entries, must accept ``id=`` and default every other field
            name: Section name passed to ``on_change``
            labels: Placeholder text per editable field, in display order
            on_change: Called with ``name`` after every mutation of this section
        """
        self.name = name
        self._entry_type = entry_type
        self._editable = [f.name for f in fields(entry_type) if f.name != "id"]
        self._labels = labels or {field_name: field_name for field_name in self._editable}
        self._entries: List[E] = []
        self._on_change = on_change

    @property
    def entries(self) -> Tuple[E, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[E]:
        return iter(tuple(self._entries))

    def get(self, entry_id: str) -> Optional[E]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def add(self) -> E:
        """Append an empty entry with a fresh id and return it."""
        entry = self._entry_type(id=new_entry_id())
        self._entries.append(entry)
        self._notify()
        return entry

    def remove(self, entry_id: str) -> bool:
        """Remove the entry with ``entry_id``; unknown ids are ignored."""
        remaining = [entry for entry in self._entries if entry.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self._notify()
        return True

    def update(self, entry_id: str, field_name: str, value: Any) -> bool:
        """Set one field of one entry; unknown ids are ignored."""
        if field_name not in self._editable:
            raise ValueError(f"'{field_name}' is not an editable field of {self.name}")
        entry = self.get(entry_id)
        if entry is None:
            return False
        setattr(entry, field_name, value)
        self._notify()
        return True

    def clear(self) -> None:
        if not self._entries:
            return
        self._entries = []
        self._notify()

    def rendered_fields(self) -> List[Tuple[str, str, str]]:
        """Inputs currently shown for this section as ``(entry_id, field, placeholder)``."""
        return [
            (entry.id, field_name, label)
            for entry in self._entries
            for field_name, label in self._labels.items()
        ]

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.name)
