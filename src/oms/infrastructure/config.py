"""Runtime settings read from ``OMS_``-prefixed environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class ConfigurationError(Exception):
    """An environment variable holds a value the service cannot use."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    database_url: str | None = None
    products_url: str = "http://products-service:3001/products"
    payments_url: str = "http://payments-service:3003/payments"
    remote_timeout: float = 5.0
    rabbitmq_host: str = "rabbitmq"
    events_exchange: str = "events"
    log_level: str = "INFO"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = Settings()
        return Settings(
            data_dir=Path(env.get("OMS_DATA_DIR", defaults.data_dir)),
            database_url=env.get("OMS_DATABASE_URL") or None,
            products_url=env.get("OMS_PRODUCTS_URL", defaults.products_url),
            payments_url=env.get("OMS_PAYMENTS_URL", defaults.payments_url),
            remote_timeout=_positive_float(env, "OMS_REMOTE_TIMEOUT", defaults.remote_timeout),
            rabbitmq_host=env.get("OMS_RABBITMQ_HOST", defaults.rabbitmq_host),
            events_exchange=env.get("OMS_EVENTS_EXCHANGE", defaults.events_exchange),
            log_level=env.get("OMS_LOG_LEVEL", defaults.log_level).upper(),
        )


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
