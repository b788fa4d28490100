"""
Untyped view over decoded upstream documents.
"""

from collections.abc import Mapping
from typing import Any, Iterator, Union


def wrap(value: Any) -> Any:
    """Wrap mappings as ``Record`` and sequences as tuples of wrapped values."""
    if isinstance(value, Record):
        return value
    if isinstance(value, Mapping):
        return Record(value)
    if isinstance(value, (list, tuple)):
        return tuple(wrap(item) for item in value)
    return value


class Record(Mapping):
    """Read-only mapping with attribute and path access.

    Nothing is validated up front. A missing field only fails when it is
    read: ``record["x"]`` raises ``KeyError``, ``record.x`` raises
    ``AttributeError``, ``record.path(...)`` raises ``KeyError``.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping):
        object.__setattr__(self, "_data", dict(data))

    def __getitem__(self, key: str) -> Any:
        return wrap(self._data[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any):
        raise AttributeError("Record is read-only")

    def __repr__(self) -> str:
        return f"Record({self._data!r})"

    def path(self, *keys: Union[str, int]) -> Any:
        """Follow ``keys`` through nested mappings and sequences."""
        node: Any = self
        for key in keys:
            try:
                node = node[key]
            except (KeyError, IndexError, TypeError) as exc:
                raise KeyError(keys) from exc
        return node

    def get_path(self, *keys: Union[str, int], default: Any = None) -> Any:
        try:
            return self.path(*keys)
        except KeyError:
            return default

    def to_dict(self) -> dict:
        return dict(self._data)
