"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. Explicit path (``--config`` CLI flag or ``load_config(path)``)
2. ./errorlens.yaml or ./errorlens.yml (working directory)
3. ~/.errorlens/config.yaml (user home)

Environment variables override YAML: ERRORLENS_<SECTION>_<KEY>, e.g.
``ERRORLENS_RETRY_MAX_RETRIES=5``. ${VAR} references inside YAML values
are resolved from the environment at load time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "ERRORLENS_"

_ENV_REFERENCE = re.compile(r"\$\{([^}]+)\}")

_LEVEL_NAMES = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class RetrySettings(BaseModel):
    """Retry policy numbers handed to callers of retryable errors."""

    max_retries: int = Field(3, ge=0)
    backoff_millis: int = Field(1000, ge=0)
    strategy: Literal["exponential", "linear", "fixed"] = "exponential"


class LoggingConfig(BaseModel):
    """Logging setup used by the CLI and the API integration."""

    level: str = "info"
    format: Literal["text", "json"] = "text"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        """Reject level names the logging module does not know."""
        if value.upper() not in _LEVEL_NAMES:
            raise ValueError(f"Unknown log level: {value}")
        return value.lower()


class ClassificationConfig(BaseModel):
    """Defaults applied when classifying payloads at the outer surfaces."""

    default_hint: str = "auto"
    correlation_id_header: str = "X-Correlation-ID"


class ErrorLensConfig(BaseModel):
    """Top-level configuration."""

    retry: RetrySettings = RetrySettings()
    logging: LoggingConfig = LoggingConfig()
    classification: ClassificationConfig = ClassificationConfig()


def resolve_env_vars(value: str) -> str:
    """Replace ${VAR} references with environment values (missing -> "")."""
    return _ENV_REFERENCE.sub(lambda m: os.environ.get(m.group(1), ""), value)


def _resolve_tree(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    if isinstance(data, dict):
        return {key: _resolve_tree(item) for key, item in data.items()}
    if isinstance(data, list):
        return [_resolve_tree(item) for item in data]
    return data


def _coerce(raw: str) -> int | bool | str:
    try:
        return int(raw)
    except ValueError:
        pass
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    return raw


def _apply_env_overrides(data: dict[str, Any], environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Overlay ERRORLENS_<SECTION>_<KEY> variables onto parsed YAML.

    Sections are matched longest-first so a multi-word section name always
    wins over a shorter one sharing its prefix.

    Args:
        data: Parsed YAML mapping (modified in place and returned).
        environ: Environment to read; defaults to os.environ.

    Returns:
        The updated mapping.
    """
    environ = os.environ if environ is None else environ
    sections = sorted(ErrorLensConfig.model_fields, key=len, reverse=True)
    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        suffix = name[len(ENV_PREFIX):].lower()
        for section in sections:
            if suffix.startswith(section + "_") and len(suffix) > len(section) + 1:
                target = data.setdefault(section, {})
                if isinstance(target, dict):
                    target[suffix[len(section) + 1:]] = _coerce(raw)
                break
    return data


def _find_config_file() -> Path | None:
    candidates = [
        Path.cwd() / "errorlens.yaml",
        Path.cwd() / "errorlens.yml",
        Path.home() / ".errorlens" / "config.yaml",
        Path.home() / ".errorlens" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(config_path: str | None = None) -> ErrorLensConfig | None:
    """Load configuration from YAML with env var resolution and overrides.

    Args:
        config_path: Explicit config file. If None, standard locations
            are searched.

    Returns:
        Validated ErrorLensConfig, or None if no config file was found.

    Raises:
        FileNotFoundError: If ``config_path`` is given but does not exist.
        ValueError: If the file is not valid YAML or its top level is not
            a mapping.
        pydantic.ValidationError: If the file holds invalid values.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()
        if path is None:
            return None

    logger.debug("Loading config from %s", path)

    with open(path) as f:
        try:
            raw_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw_data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(raw_data).__name__}")

    data = _apply_env_overrides(_resolve_tree(raw_data))
    return ErrorLensConfig(**data)


def load_config_or_default(config_path: str | None = None) -> ErrorLensConfig:
    """Like load_config, but fall back to defaults when no file exists."""
    return load_config(config_path) or ErrorLensConfig()
