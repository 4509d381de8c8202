"""Configuration loading for the Stack0 client.

Settings are merged in the following priority (highest to lowest):

1. ``overrides`` passed to load_config()
2. Environment variables (STACK0_API_KEY, STACK0_BASE_URL,
   STACK0_REQUEST_TIMEOUT_SECONDS)
3. The ``stack0:`` section of the YAML file ($STACK0_CONFIG or ./stack0.yaml)
4. Dataclass defaults

There is no module-level config instance; pass the loaded ClientConfig to
``Stack0.from_config()``.

Usage:
    >>> from config import load_config
    >>> config = load_config()
    >>> config.poll_policy("workflows", WORKFLOW_POLICY)
"""

from config.config import ClientConfig, load_config

__all__ = [
    "ClientConfig",
    "load_config",
]
