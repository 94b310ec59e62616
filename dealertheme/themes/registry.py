"""Style registry holding the runtime custom properties."""

from __future__ import annotations

from typing import Iterable, Mapping

from PySide6.QtCore import QObject, Signal


class StyleRegistry(QObject):
    """Owned key/value scope of custom properties (``--name`` -> value).

    Consumers hold a reference to the registry and re-read it when
    ``changed`` fires. Writes are last-write-wins.
    """

    changed = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._properties: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._properties)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def get_property(self, name: str, default: str | None = None) -> str | None:
        return self._properties.get(name, default)

    def properties(self) -> dict[str, str]:
        return dict(self._properties)

    def set_property(self, name: str, value: str) -> None:
        if self._write(name, value):
            self.changed.emit()

    def update(self, values: Mapping[str, str]) -> int:
        """Write many properties and emit ``changed`` once. Returns the change count."""
        count = 0
        for name, value in values.items():
            if self._write(name, value):
                count += 1
        if count:
            self.changed.emit()
        return count

    def remove_property(self, name: str) -> bool:
        if self._properties.pop(name, None) is None:
            return False
        self.changed.emit()
        return True

    def replace_prefixed(self, prefixes: Iterable[str], values: Mapping[str, str]) -> list[str]:
        """Drop prefixed properties missing from ``values``, then write ``values``.

        Emits ``changed`` at most once. Returns the removed names.
        """
        for name in values:
            _check_name(name)
        prefix_tuple = tuple(prefixes)
        doomed = [
            name
            for name in self._properties
            if name.startswith(prefix_tuple) and name not in values
        ]
        for name in doomed:
            del self._properties[name]
        written = sum(1 for name, value in values.items() if self._write(name, value))
        if doomed or written:
            self.changed.emit()
        return doomed

    def clear(self) -> None:
        if not self._properties:
            return
        self._properties.clear()
        self.changed.emit()

    def _write(self, name: str, value: str) -> bool:
        _check_name(name)
        text = str(value)
        if self._properties.get(name) == text:
            return False
        self._properties[name] = text
        return True


def _check_name(name: object) -> None:
    if not isinstance(name, str) or not name.startswith("--") or len(name) < 3:
        raise ValueError(f"Custom property names must start with '--': {name!r}")
