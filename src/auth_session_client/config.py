"""Configuration and logging setup for the auth client tool."""

import json
import logging
import os
import pathlib
import sys

import pydantic
import structlog

from . import authapi

CONFIG_ENV_VAR = "AUTH_CLIENT_CONFIG_PATH"

DEFAULT_ENDPOINT = "https://auth.bytemark.co.uk"


class ClientConfig(pydantic.BaseModel):
    """Configuration for the auth client tool."""

    endpoint: str = pydantic.Field(
        DEFAULT_ENDPOINT,
        description="Base URL of the auth service",
    )
    timeout: float = pydantic.Field(
        authapi.DEFAULT_TIMEOUT,
        description="HTTP transport timeout in seconds",
        gt=0,
    )
    deadline: float | None = pydantic.Field(
        None,
        description="Overall deadline for one command in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("WARNING", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output on stderr."""
    log_level = getattr(logging, log_level_name.upper(), logging.WARNING)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load configuration from JSON file."""
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def resolve_config(config_path: str | None = None, **overrides) -> ClientConfig:
    """Load config from a path or environment default, then apply overrides.

    Without a path and without the environment variable, defaults are used.
    Overrides that are None are ignored.
    """
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    config = load_config(resolved_path) if resolved_path else ClientConfig()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    return ClientConfig(**{**config.model_dump(), **updates})
