"""Configuration loading and validation for ci-slack-notifier."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_FOOTER_ICON = "https://github.githubassets.com/favicon.ico"
DEFAULT_CONFIG_PATH = "~/.config/ci-slack-notifier/config.yaml"

KNOWN_KEYS = {
    "server_url",
    "footer_icon",
    "timeout",
}


@dataclass
class Config:
    server_url: str = DEFAULT_SERVER_URL
    footer_icon: str = DEFAULT_FOOTER_ICON
    timeout: float | None = None  # seconds; None leaves the transport default


def _validate_config(config: Config) -> None:
    """Validate config values, raising ValueError on invalid fields."""
    if config.timeout is not None:
        if isinstance(config.timeout, bool) or not isinstance(config.timeout, (int, float)):
            raise ValueError(
                f"timeout must be a number, got {type(config.timeout).__name__}"
            )
        if config.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {config.timeout}")

    if not config.server_url.startswith(("http://", "https://")):
        raise ValueError(
            f"server_url must be an http(s) URL, got '{config.server_url}'"
        )


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Config path resolution order:
    1. Explicit path argument
    2. CI_SLACK_NOTIFIER_CONFIG environment variable
    3. ~/.config/ci-slack-notifier/config.yaml

    Only an explicitly requested file has to exist; otherwise the defaults
    are returned when no file is found.
    """
    required = path is not None
    if path is None:
        path = os.environ.get("CI_SLACK_NOTIFIER_CONFIG")
        required = path is not None
    if path is None:
        path = os.path.expanduser(DEFAULT_CONFIG_PATH)

    if not required and not os.path.exists(path):
        logger.debug("No config file at %s; using defaults", path)
        return Config()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a YAML mapping, got {type(raw).__name__}")

    for key in raw:
        if key not in KNOWN_KEYS:
            logger.warning("Unknown config key '%s', ignoring", key)

    config = Config()

    if "server_url" in raw:
        config.server_url = str(raw["server_url"]).rstrip("/")
    if "footer_icon" in raw:
        config.footer_icon = str(raw["footer_icon"])
    if "timeout" in raw:
        config.timeout = raw["timeout"]

    _validate_config(config)

    return config
