"""In-memory value store backing MockRedis.

Every key holds exactly one of three value types:

- STRING: a ``str``
- HASH: a ``dict`` mapping field names to ``str``
- LIST: a ``list`` of ``str``

The store only holds raw slots. Command semantics, including type checks
against the slot's current type, live in ``MockRedis``.
"""

import enum
import threading
from typing import Iterator, List, Mapping, Optional, Union

from kv_mock.utils.error_handling import ArgumentError, StoreAccessError

Value = Union[str, dict, list]


class ValueType(enum.Enum):
    """Type tag of a stored value."""
    NONE = "none"     # Key is absent
    STRING = "string"
    HASH = "hash"
    LIST = "list"


def value_type(value: Optional[Value]) -> ValueType:
    """Return the type tag of a raw value."""
    if value is None:
        return ValueType.NONE
    if isinstance(value, str):
        return ValueType.STRING
    if isinstance(value, dict):
        return ValueType.HASH
    if isinstance(value, list):
        return ValueType.LIST
    raise ArgumentError("value_type", f"unsupported value type {type(value).__name__}")


def _checked_copy(key: str, value: Value) -> Value:
    """Copy a seed value, rejecting anything that is not a supported type."""
    if not isinstance(key, str):
        raise ArgumentError("seed", f"key {key!r} is not a string")
    kind = value_type(value)
    if kind is ValueType.HASH:
        if not all(isinstance(f, str) and isinstance(v, str) for f, v in value.items()):
            raise ArgumentError("seed", f"hash at '{key}' must map strings to strings")
        return dict(value)
    if kind is ValueType.LIST:
        if not all(isinstance(item, str) for item in value):
            raise ArgumentError("seed", f"list at '{key}' must hold strings only")
        return list(value)
    if kind is ValueType.NONE:
        raise ArgumentError("seed", f"value at '{key}' must not be None")
    return value


class ValueStore:
    """Key to typed-value mapping shared by every connection of a mock.

    The store is owned by the thread that created it. All reads and writes
    must come from that thread, since commands rely on running one at a time
    on a single event loop.

    Attributes:
        owner_thread: Identifier of the thread allowed to access the store
    """

    def __init__(self, data: Optional[Mapping[str, Value]] = None):
        """Initialize the store.

        Args:
            data: Optional seed mapping. Values are copied, so later changes
                to ``data`` do not leak into the store.
        """
        self.owner_thread = threading.get_ident()
        self._data = {}
        for key, value in (data or {}).items():
            self._data[key] = _checked_copy(key, value)

    def get(self, key: str) -> Optional[Value]:
        """Return the raw value at ``key`` or ``None`` if absent."""
        self._check_owner()
        return self._data.get(key)

    def set(self, key: str, value: Value) -> None:
        """Store a raw value, replacing whatever ``key`` held before."""
        self._check_owner()
        if value_type(value) is ValueType.NONE:
            raise ArgumentError("set", "cannot store None")
        self._data[key] = value

    def type_of(self, key: str) -> ValueType:
        """Return the type tag of the value at ``key``."""
        return value_type(self.get(key))

    def keys(self) -> List[str]:
        """Return all keys in store iteration order."""
        self._check_owner()
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        self._check_owner()
        return key in self._data

    def __len__(self) -> int:
        self._check_owner()
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def _check_owner(self) -> None:
        if threading.get_ident() != self.owner_thread:
            raise StoreAccessError(
                "ValueStore accessed outside its owner thread; "
                "commands must run on the owner's event loop"
            )
