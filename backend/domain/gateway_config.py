"""
Typed credential blobs, one model per gateway kind.

The JSON stored in payment_gateways.config is validated into one of these when a
driver is resolved, so drivers never poke at an untyped dict.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from domain.enums import GatewayKind
from domain.errors import ConfigurationError


class GatewayConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class StripeConfig(GatewayConfig):
    publishable_key: str | None = None
    secret_key: str | None = None
    webhook_secret: str | None = None

    @field_validator("publishable_key", "secret_key", "webhook_secret", mode="before")
    @classmethod
    def _blank_is_missing(cls, v: Any) -> Any:
        # Admin forms submit "" for untouched fields
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class FakeConfig(GatewayConfig):
    pass


GATEWAY_CONFIG_TYPES: dict[GatewayKind, type[GatewayConfig]] = {
    GatewayKind.STRIPE: StripeConfig,
    GatewayKind.FAKE: FakeConfig,
}


def load_gateway_config(kind: GatewayKind, raw: Any) -> GatewayConfig:
    """
    Validate a stored config blob for the given gateway kind.

    Raises:
        ConfigurationError: the blob is not a mapping or has wrongly typed fields
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Payment gateway config for '{kind.value}' must be an object.",
        )
    try:
        return GATEWAY_CONFIG_TYPES[kind].model_validate(raw)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigurationError(
            f"Payment gateway config for '{kind.value}' is invalid.",
            details={"fields": fields},
        ) from e
