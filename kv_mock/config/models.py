"""Pydantic models for pool configuration in the kv_mock package."""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PORT = 6379
DEFAULT_SERVICE = "_redis._tcp"


class RecoveryPolicyModel(BaseModel):
    """Configuration model for a pool recovery policy.

    The mock accepts these values but never times out, retries or backs off.
    """

    model_config = ConfigDict(extra="allow")

    timeout: int = Field(default=100, description="Connect timeout in milliseconds", ge=0)
    retries: int = Field(default=1, description="Attempts before giving up", ge=0)
    delay: int = Field(default=0, description="Delay between attempts in milliseconds", ge=0)


def _default_recovery() -> Dict[str, RecoveryPolicyModel]:
    return {"default": RecoveryPolicyModel()}


class PoolConfigModel(BaseModel):
    """Configuration model for a mock connection pool."""

    model_config = ConfigDict(extra="allow")

    domain: str = Field(default="localhost", description="Domain the pool serves")
    resolver: str = Field(
        default=f"127.0.0.1:{DEFAULT_PORT}",
        description="Static host:port or service discovery name",
    )
    service: str = Field(default=DEFAULT_SERVICE, description="Service record name")
    default_port: int = Field(default=DEFAULT_PORT, description="Port when the target has none")
    spares: int = Field(default=4, description="Idle connections to keep per pool", ge=0)
    maximum: int = Field(default=100, description="Upper bound on open connections", ge=1)
    recovery: Dict[str, RecoveryPolicyModel] = Field(default_factory=_default_recovery)

    @field_validator("default_port")
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @model_validator(mode="after")
    def validate_sizing(self):
        if self.spares > self.maximum:
            raise ValueError("spares cannot exceed maximum")
        return self

    @classmethod
    def from_options(
        cls, options: Optional[Mapping[str, Any]] = None, **overrides: Any
    ) -> "PoolConfigModel":
        """Build a config from loose options without validating them.

        Missing fields take their defaults. Values are stored as given, so a
        test can hand the mock whatever the real pool would have received.

        Args:
            options: Mapping of config fields, or an existing model
            **overrides: Fields that take precedence over ``options``

        Returns:
            An unvalidated ``PoolConfigModel``
        """
        if isinstance(options, BaseModel):
            options = options.model_dump()
        fields = dict(options or {})
        fields.update(overrides)

        recovery = fields.get("recovery")
        if isinstance(recovery, Mapping):
            fields["recovery"] = {
                name: RecoveryPolicyModel.model_construct(**policy)
                if isinstance(policy, Mapping) else policy
                for name, policy in recovery.items()
            }
        # model_construct fills defaults for missing fields and skips validation
        return cls.model_construct(**fields)
