"""Utility modules for the kv_mock package.

This package provides the exception hierarchy, the argument contract
decorator and the listener registry used throughout kv_mock.
"""

from kv_mock.utils.error_handling import (
    ArgumentError,
    KVMockError,
    PoolStoppedError,
    StoreAccessError,
    TypeMismatchError,
    UnknownCommandError,
    command_contract,
)
from kv_mock.utils.events import Observers

__all__ = [
    # Error handling
    "ArgumentError",
    "KVMockError",
    "PoolStoppedError",
    "StoreAccessError",
    "TypeMismatchError",
    "UnknownCommandError",
    "command_contract",

    # Events
    "Observers",
]
