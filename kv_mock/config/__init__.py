"""Configuration for the kv_mock package."""

from kv_mock.config.models import (
    DEFAULT_PORT,
    DEFAULT_SERVICE,
    PoolConfigModel,
    RecoveryPolicyModel,
)

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_SERVICE",
    "PoolConfigModel",
    "RecoveryPolicyModel",
]
