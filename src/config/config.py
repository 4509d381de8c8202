"""Client configuration from YAML and environment.

Loads the ``stack0:`` section of a YAML file (``stack0.yaml`` in the working
directory by default) and layers environment variables on top.

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files.

Example config file:

    stack0:
      api_key: ${STACK0_API_KEY}
      base_url: https://api.stack0.dev/v1
      request_timeout_seconds: 30
      polling:
        screenshots: {interval_seconds: 1, timeout_seconds: 60}
        workflows: {interval_seconds: 5, timeout_seconds: 1800}
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.polling import PollPolicy
from core.transport import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("stack0.yaml")

ENV_API_KEY = "STACK0_API_KEY"
ENV_BASE_URL = "STACK0_BASE_URL"
ENV_REQUEST_TIMEOUT = "STACK0_REQUEST_TIMEOUT_SECONDS"
ENV_CONFIG_PATH = "STACK0_CONFIG"

POLL_KINDS = ("screenshots", "extraction", "batch", "workflows")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        # Support both ${VAR} and ${VAR:-default} syntax
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@dataclass
class ClientConfig:
    """Connection settings and optional poll policy overrides.

    ``polling`` maps an operation kind (screenshots, extraction, batch,
    workflows) to ``{interval_seconds, timeout_seconds}``; either key may be
    omitted to keep that kind's default.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT
    polling: dict[str, dict[str, float]] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise ValueError on the first invalid setting."""
        if not self.api_key:
            raise ValueError(
                f"api_key is required (set {ENV_API_KEY} or stack0.api_key in the config file)"
            )
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got '{self.base_url}'")
        if self.request_timeout_seconds <= 0:
            raise ValueError(
                f"request_timeout_seconds must be > 0, got {self.request_timeout_seconds}"
            )

        for kind, settings in self.polling.items():
            if kind not in POLL_KINDS:
                raise ValueError(f"polling.{kind}: unknown kind, expected one of {list(POLL_KINDS)}")
            if not isinstance(settings, dict):
                raise ValueError(f"polling.{kind} must be a mapping, got {type(settings).__name__}")
            for key in ("interval_seconds", "timeout_seconds"):
                value = settings.get(key)
                if value is None:
                    continue
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError(f"polling.{kind}: {key} must be a number, got {value!r}")
                # Same rule as PollPolicy: 0 is allowed for both
                if value < 0:
                    raise ValueError(f"polling.{kind}: {key} must be >= 0, got {value}")

    def poll_policy(self, kind: str, default: PollPolicy) -> PollPolicy:
        """The configured policy for ``kind``, falling back to ``default`` per field."""
        settings = self.polling.get(kind) or {}
        return default.with_overrides(
            interval=settings.get("interval_seconds"),
            timeout=settings.get("timeout_seconds"),
        )


def _coerce_polling(polling: Any) -> dict[str, Any]:
    """Convert polling numbers to float; values expanded from ${VAR} arrive as strings."""
    if not isinstance(polling, dict):
        raise ValueError(f"polling must be a mapping, got {type(polling).__name__}")

    coerced: dict[str, Any] = {}
    for kind, settings in polling.items():
        if not isinstance(settings, dict):
            coerced[kind] = settings
            continue
        coerced[kind] = dict(settings)
        for key in ("interval_seconds", "timeout_seconds"):
            value = settings.get(key)
            if value is None or isinstance(value, bool):
                continue
            try:
                coerced[kind][key] = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"polling.{kind}.{key} must be a number, got {value!r}") from e
    return coerced


def _env_settings() -> dict[str, Any]:
    settings: dict[str, Any] = {}
    if os.getenv(ENV_API_KEY):
        settings["api_key"] = os.environ[ENV_API_KEY]
    if os.getenv(ENV_BASE_URL):
        settings["base_url"] = os.environ[ENV_BASE_URL]
    if os.getenv(ENV_REQUEST_TIMEOUT):
        settings["request_timeout_seconds"] = os.environ[ENV_REQUEST_TIMEOUT]
    return settings


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ClientConfig:
    """Load client configuration.

    Priority (highest to lowest): ``overrides``, environment variables
    (STACK0_API_KEY, STACK0_BASE_URL, STACK0_REQUEST_TIMEOUT_SECONDS), the
    ``stack0:`` section of the YAML file, dataclass defaults.

    The file is ``config_path``, else $STACK0_CONFIG, else ./stack0.yaml.
    An explicitly named file must exist; the default one is optional.

    Raises:
        FileNotFoundError: Explicit config file does not exist
        ValueError: Invalid settings
    """
    if config_path is None and os.getenv(ENV_CONFIG_PATH):
        config_path = Path(os.environ[ENV_CONFIG_PATH])

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
    else:
        config_path = DEFAULT_CONFIG_FILE

    yaml_data = _expand_env_vars(load_yaml(config_path))
    if yaml_data:
        logger.info(f"Loading configuration from file: {config_path}")

    section = yaml_data.get("stack0", {})
    if not isinstance(section, dict):
        raise ValueError(f"Invalid config file {config_path}: 'stack0:' must be a mapping")

    section = _deep_merge(section, _env_settings())
    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        section = _deep_merge(section, overrides)

    try:
        request_timeout = float(section.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"request_timeout_seconds must be a number, got {section.get('request_timeout_seconds')!r}"
        ) from e

    config = ClientConfig(
        api_key=str(section.get("api_key") or ""),
        base_url=str(section.get("base_url") or DEFAULT_BASE_URL).rstrip("/"),
        request_timeout_seconds=request_timeout,
        polling=_coerce_polling(section.get("polling") or {}),
    )

    config.validate()
    logger.debug("Configuration validation passed")
    return config
