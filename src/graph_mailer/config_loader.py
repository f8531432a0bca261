# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration loader for Microsoft Graph credentials.

Settings are read from an INI-style file or from environment variables.

Example:
    Configuration file format (config.ini)::

        [graph]
        tenant_id = 00000000-0000-0000-0000-000000000000
        client_id = 11111111-1111-1111-1111-111111111111
        client_secret = s3cr3t
        scope = https://graph.microsoft.com/.default
        base_url = https://graph.microsoft.com/v1.0

    Loading the settings::

        settings = load_graph_settings("/etc/graph-mailer/config.ini")
        sender = MailSender(settings)
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError
from .logger import get_logger

DEFAULT_SCOPE = "https://graph.microsoft.com/.default"
DEFAULT_BASE_URL = "https://graph.microsoft.com/v1.0"
CONFIG_SECTION = "graph"
REQUIRED_FIELDS = ("tenant_id", "client_id", "client_secret")

logger = get_logger("config_loader")


@dataclass(frozen=True)
class GraphSettings:
    """Client-credential settings for the Graph mail API.

    Attributes:
        tenant_id: Azure AD tenant (directory) id.
        client_id: Application (client) id of the app registration.
        client_secret: Client secret of the app registration.
        scope: Permission scope requested from the identity provider.
        base_url: Graph API root, without trailing slash.
    """

    tenant_id: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    scope: str = DEFAULT_SCOPE
    base_url: str = DEFAULT_BASE_URL

    def missing_fields(self) -> list[str]:
        """Names of required credentials that are absent or blank."""
        return [
            name for name in REQUIRED_FIELDS
            if not (getattr(self, name) or "").strip()
        ]

    def validate(self) -> None:
        """Raise ConfigurationError if any credential is missing or blank."""
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                f"Graph credentials are missing: {', '.join(missing)}. "
                f"Check the [{CONFIG_SECTION}] config section or GRAPH_MAILER_* variables."
            )

    def __repr__(self) -> str:
        secret = "***" if self.client_secret else None
        return (
            f"GraphSettings(tenant_id={self.tenant_id!r}, client_id={self.client_id!r}, "
            f"client_secret={secret!r}, scope={self.scope!r}, base_url={self.base_url!r})"
        )


ENV_MAPPING = {
    "tenant_id": ("GRAPH_MAILER_TENANT_ID", None),
    "client_id": ("GRAPH_MAILER_CLIENT_ID", None),
    "client_secret": ("GRAPH_MAILER_CLIENT_SECRET", None),
    "scope": ("GRAPH_MAILER_SCOPE", DEFAULT_SCOPE),
    "base_url": ("GRAPH_MAILER_BASE_URL", DEFAULT_BASE_URL),
}


def resolve_graph_settings(
    config_path: str | None = None,
) -> tuple[GraphSettings, dict[str, str]]:
    """Load Graph settings and report where each value came from.

    Priority: config file > environment variables > defaults.

    Args:
        config_path: Optional path to a config.ini file. A path that does not
            exist is ignored.

    Returns:
        The settings and a mapping of field name to source
        (``"file"``, ``"env"`` or ``"default"``).
    """
    values: dict[str, str | None] = {}
    sources: dict[str, str] = {}

    for key, (env_var, default) in ENV_MAPPING.items():
        env_value = os.environ.get(env_var)
        if env_value is not None:
            values[key] = env_value
            sources[key] = "env"
        else:
            values[key] = default
            sources[key] = "default"

    if config_path:
        if Path(config_path).exists():
            config = configparser.ConfigParser()
            config.read(config_path)
            if config.has_section(CONFIG_SECTION):
                for key in ENV_MAPPING:
                    value = config.get(CONFIG_SECTION, key, fallback=None)
                    if value is not None and value.strip():
                        values[key] = value.strip()
                        sources[key] = "file"
            else:
                logger.warning(f"No [{CONFIG_SECTION}] section in {config_path}")
        else:
            logger.warning(f"Config file {config_path} not found, using environment")

    if values["base_url"]:
        values["base_url"] = values["base_url"].rstrip("/")

    return GraphSettings(**values), sources


def load_graph_settings(config_path: str | None = None) -> GraphSettings:
    """Load Graph settings from config file or environment.

    Values are not validated here; :class:`graph_mailer.sender.MailSender`
    validates them on construction.

    Args:
        config_path: Optional path to config.ini file.

    Returns:
        GraphSettings with parsed values, defaults for scope and base_url.
    """
    settings, _ = resolve_graph_settings(config_path)
    return settings
