"""Ordered store of the shell's environment variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


def parse_entry(entry: str) -> tuple[str, str]:
    """Split a ``KEY=VALUE`` string at its first ``=``.

    An entry without ``=`` is taken as a key with an empty value.
    """
    key, _, value = entry.partition("=")
    return key, value


class Environment:
    """Environment variables kept in insertion order until sorted.

    Values are never ``None``: a variable given without a value holds
    the empty string.
    """

    def __init__(self, entries: Iterable[tuple[str, str | None]] = ()) -> None:
        self._entries: list[tuple[str, str]] = [
            (key, "" if value is None else value) for key, value in entries
        ]

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | Iterable[str]
    ) -> "Environment":
        """Build from a mapping or from ``KEY=VALUE`` strings, keeping order."""
        if isinstance(environ, Mapping):
            return cls(environ.items())
        return cls(parse_entry(entry) for entry in environ)

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or ``None`` if it is not set."""
        return next((value for name, value in self._entries if name == key), None)

    def add(self, key: str, value: str | None = None) -> None:
        """Append a variable and keep the store sorted by key."""
        self._entries.append((key, "" if value is None else value))
        self.sort()

    def remove(self, key: str) -> bool:
        """Remove the first variable named ``key``; report whether one was found."""
        for index, (name, _) in enumerate(self._entries):
            if name == key:
                del self._entries[index]
                return True
        return False

    def change(self, key: str, value: str | None = None) -> None:
        """Set ``key`` to ``value``.

        A variable that is already set keeps its value when no new value
        is given; otherwise it is replaced.
        """
        if value is None and self.get(key) is not None:
            return
        self.remove(key)
        self.add(key, value)

    def sort(self) -> None:
        """Order the variables by key, byte-wise."""
        self._entries.sort(key=lambda entry: entry[0])

    def items(self) -> list[tuple[str, str]]:
        """Return the ``(key, value)`` pairs in their current order."""
        return list(self._entries)

    def to_array(self) -> list[str]:
        """Return the variables as ``KEY=VALUE`` strings."""
        return [f"{key}={value}" for key, value in self._entries]

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)