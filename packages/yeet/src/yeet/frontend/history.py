"""Last-selected child per directory, used to restore the cursor on revisit."""

from __future__ import annotations

from pathlib import PurePath


def _components(path: str | PurePath) -> tuple[str, ...]:
    return tuple(part for part in PurePath(path).parts if part)


class History:
    """In-memory selection history keyed by path components.

    Adding ``/home/user/src`` remembers ``user`` as the selection in
    ``/home`` and ``src`` as the selection in ``/home/user``.
    """

    def __init__(self) -> None:
        self._selections: dict[tuple[str, ...], str] = {}

    def add(self, path: str | PurePath) -> None:
        parts = _components(path)
        for depth in range(1, len(parts)):
            self._selections[parts[:depth]] = parts[depth]

    def get_selection(self, path: str | PurePath) -> str | None:
        """Name of the child last selected inside *path*, if any."""
        return self._selections.get(_components(path))

    def __len__(self) -> int:
        return len(self._selections)
