"""Configuration management using msgspec Struct."""

import logging
import os

import msgspec

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Config(msgspec.Struct, frozen=True):
    """Engine configuration using msgspec Struct."""

    # Logging
    log_level: str = "INFO"

    # Caching
    cache_type_hashes: bool = True
    domain_cache_size: int = 128

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {self.log_level}")

        if self.domain_cache_size < 0:
            raise ValueError(
                f"domain_cache_size must be non-negative, got {self.domain_cache_size}"
            )

    @property
    def normalized_log_level(self) -> str:
        """Return normalized uppercase log level."""
        return self.log_level.upper()


def _parse_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def get_config() -> Config:
    """Load configuration from PY712_* environment variables."""
    try:
        domain_cache_size = int(os.getenv("PY712_DOMAIN_CACHE_SIZE", "128"))
    except ValueError as e:
        raise ValueError(f"PY712_DOMAIN_CACHE_SIZE must be an integer: {e}") from e

    config_dict: dict[str, object] = {
        "log_level": os.getenv("PY712_LOG_LEVEL", "INFO"),
        "cache_type_hashes": _parse_bool("PY712_CACHE_TYPE_HASHES", True),
        "domain_cache_size": domain_cache_size,
    }

    try:
        config = msgspec.convert(config_dict, Config)
    except msgspec.ValidationError as e:
        raise ValueError(f"Configuration validation error: {e}")

    return config


def setup_logging(log_level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
