# -*- coding: utf-8 -*-
"""Niubiz merchant configuration loaded from environment variables / .env."""
import logging
from functools import lru_cache
from typing import Dict, Union
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app_checkout.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "TU_"


class AntifraudProfile(BaseModel):
    """Risk metadata sent with every session request (merchantDefineData)."""
    client_ip: str = Field(default="127.0.0.1")
    merchant_define_data: Dict[str, Union[str, int]] = Field(
        default_factory=lambda: {
            "MDD4": "cliente@example.com",
            "MDD30": "40904759",
            "MDD31": "986687645",
            "MDD32": "40904759",
            "MDD33": "25",
            "MDD34": "40904759",
            "MDD63": "25",
            "MDD65": "40904759",
            "MDD71": "700526895",
            "MDD75": "Registrado",
            "MDD77": 0,
        }
    )


class CardHolderIdentity(BaseModel):
    """Merchant's registered default card holder."""
    # 0 = DNI, 1 = Carnet de extranjería, 2 = Pasaporte
    document_type: str = Field(default="0")
    document_number: str = Field(default="40904759")


class NiubizSettings(BaseSettings):
    """Gateway credentials, endpoints and static request data."""

    environment: str = Field(default="qa", description="qa or prod")
    merchant_id: str = Field(default="", description="Niubiz merchant id")
    username: str = Field(default="", description="Security API user")
    password: str = Field(default="", description="Security API password")
    currency: str = Field(default="PEN", min_length=3, max_length=3)

    base_urls: Dict[str, str] = Field(
        default_factory=lambda: {
            "qa": "https://apisandbox.vnforappstest.com",
            "prod": "https://apiprod.vnforapps.com",
        }
    )
    static_content: Dict[str, str] = Field(
        default_factory=lambda: {
            "qa": "https://static-content-qas.vnforapps.com/v2/js/checkout.js?qa=true",
            "prod": "https://static-content.vnforapps.com/v2/js/checkout.js",
        }
    )

    security_endpoint: str = "/api.security/v1/security"
    session_endpoint: str = "/api.ecommerce/v2/ecommerce/token/session/{merchantId}"
    authorization_endpoint: str = "/api.authorization/v3/authorization/ecommerce/{merchantId}"

    timeout_seconds: float = Field(default=30.0, gt=0)

    antifraud: AntifraudProfile = Field(default_factory=AntifraudProfile)
    card_holder: CardHolderIdentity = Field(default_factory=CardHolderIdentity)

    model_config = SettingsConfigDict(
        env_prefix="NIUBIZ_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("merchant_id", "username", "password")
    @classmethod
    def validate_credential(cls, v: str, info) -> str:
        """Reject empty values and the TU_... placeholders of the sample config."""
        v = v.strip()
        if not v or v.upper().startswith(PLACEHOLDER_PREFIX):
            raise ValueError(f"Niubiz:{info.field_name} no configurado")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_environment(self) -> "NiubizSettings":
        """The selected environment must have a well-formed base URL and widget URL."""
        base_url = self.base_urls.get(self.environment)
        if base_url is None:
            raise ValueError(f"BaseUrl Niubiz no configurado para '{self.environment}'")
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Niubiz:BaseUrl inválido")
        if not self.static_content.get(self.environment):
            raise ValueError("Static JS Niubiz no configurado")
        return self

    @property
    def base_url(self) -> str:
        return self.base_urls[self.environment].rstrip("/")

    @property
    def static_js_url(self) -> str:
        return self.static_content[self.environment]

    def endpoint(self, template: str) -> str:
        """Absolute URL for an endpoint template, with {merchantId} substituted."""
        path = template.strip().replace("{merchantId}", self.merchant_id)
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url + path


def load_settings(**overrides) -> NiubizSettings:
    """Build settings, turning validation errors into ConfigurationError."""
    try:
        return NiubizSettings(**overrides)
    except ValidationError as exc:
        messages = "; ".join(str(err.get("msg")) for err in exc.errors())
        logger.error("Configuración Niubiz inválida: %s", messages)
        raise ConfigurationError(messages) from exc


@lru_cache()
def get_settings() -> NiubizSettings:
    """Cached settings instance, validated once per process."""
    return load_settings()

