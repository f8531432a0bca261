# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Error taxonomy for graph-mailer.

Every failure surfaced by :class:`graph_mailer.sender.MailSender` is a
:class:`MailSenderError` carrying a ``kind`` tag:

- ``configuration``: missing or blank Graph credentials (construction time)
- ``validation``: unusable input detected before any network call
- ``remote_api``: Graph or the identity provider rejected the request
- ``unexpected``: any other fault while building or transmitting a message
"""

from __future__ import annotations


class MailSenderError(Exception):
    """Base class for all graph-mailer errors."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(MailSenderError):
    """Raised when Graph credentials are missing or blank."""

    kind = "configuration"


class ValidationError(MailSenderError, ValueError):
    """Raised when a send request cannot be built from the given input."""

    kind = "validation"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class RemoteApiError(MailSenderError):
    """Raised when Graph (or token acquisition) rejects the request.

    Attributes:
        status: HTTP status returned by Graph, None for credential failures.
        code: Graph error code (e.g. ``ErrorInvalidUser``) when provided.
    """

    kind = "remote_api"

    def __init__(self, message: str, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status = status
        self.code = code

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"[{self.status}] {self.message}"


class UnexpectedError(MailSenderError):
    """Raised for any other failure; the original exception is ``__cause__``."""

    kind = "unexpected"


__all__ = [
    "MailSenderError",
    "ConfigurationError",
    "ValidationError",
    "RemoteApiError",
    "UnexpectedError",
]
