# kafka_topics/core/config.py
import json
from functools import lru_cache
from typing import Annotated, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from kafka_topics.core.exceptions import MalformedPropertyError
from kafka_topics.domain.models.properties import parse_properties


class Settings(BaseSettings):
    """
    Tool defaults loaded from environment variables (and .env).

    Notes
    -----
    - `admin_config` is merged *under* the command-line `--admin-config`
      pairs, so the command line always wins.
    - `admin_config` supports either JSON (recommended) or a compact form:
        KAFKA_TOPICS_ADMIN_CONFIG='{"security.protocol":"SASL_SSL"}'
      or:
        KAFKA_TOPICS_ADMIN_CONFIG='security.protocol=SASL_SSL,sasl.mechanism=PLAIN'
    """
    model_config = SettingsConfigDict(
        env_prefix="KAFKA_TOPICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    client_id: str = Field("kafka-topics", min_length=1)
    log_level: str = Field("WARNING", description="Root logging level (DEBUG, INFO, WARNING, ERROR)")
    admin_config: Annotated[Dict[str, str], NoDecode] = Field(default_factory=dict)

    @field_validator("log_level", mode="before")
    def _normalise_log_level(cls, v):
        return str(v).strip().upper() if v is not None else "WARNING"

    @field_validator("admin_config", mode="before")
    def _parse_admin_config(cls, v):
        """Accept a JSON object or comma-separated key=value pairs."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        if isinstance(v, str):
            if not v.strip():
                return {}
            if v.lstrip().startswith("{"):
                obj = json.loads(v)
                if not isinstance(obj, dict):
                    raise ValueError("admin_config JSON must be an object")
                return {str(k): str(val) for k, val in obj.items()}
            tokens = [s.strip() for s in v.split(",") if s.strip()]
            try:
                return dict(parse_properties(tokens, option="KAFKA_TOPICS_ADMIN_CONFIG"))
            except MalformedPropertyError as exc:
                raise ValueError(str(exc)) from exc
        return v


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
