# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transactional email through the Microsoft Graph API.

Components:
    MailSender: Single-recipient and bulk sends with attachments.
    GraphClient: Authenticated aiohttp client for ``/users/{id}/sendMail``.
    GraphSettings: Client-credential configuration (tenant, client id, secret).

Example::

    from graph_mailer import MailSender

    async with MailSender.from_config("config.ini") as sender:
        await sender.send_simple(
            "noreply@contoso.com", "alice@contoso.com",
            "Welcome", "<p>Hello</p>", "manager@contoso.com",
        )
"""

from .attachments import (
    EXTENSION_CONTENT_TYPES,
    AttachmentInput,
    build_file_attachments,
    guess_content_type,
)
from .config_loader import GraphSettings, load_graph_settings
from .errors import (
    ConfigurationError,
    MailSenderError,
    RemoteApiError,
    UnexpectedError,
    ValidationError,
)
from .graph_client import GraphClient
from .recipients import RecipientSet, build_recipient_set, clean_addresses
from .sender import MailSender

__version__ = "0.1.0"

__all__ = [
    "AttachmentInput",
    "ConfigurationError",
    "EXTENSION_CONTENT_TYPES",
    "GraphClient",
    "GraphSettings",
    "MailSender",
    "MailSenderError",
    "RecipientSet",
    "RemoteApiError",
    "UnexpectedError",
    "ValidationError",
    "build_file_attachments",
    "build_recipient_set",
    "clean_addresses",
    "guess_content_type",
    "load_graph_settings",
]
