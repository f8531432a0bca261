# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transactional email through the Microsoft Graph ``sendMail`` API.

MailSender validates credentials on construction, builds one authenticated
:class:`~graph_mailer.graph_client.GraphClient` and reuses it for every send.
Each send is a single attempt: failures are logged and re-raised, never
retried.

Example::

    from graph_mailer import AttachmentInput, MailSender, load_graph_settings

    async with MailSender(load_graph_settings("config.ini")) as sender:
        await sender.send_bulk_with_attachments(
            "noreply@contoso.com",
            ["alice@contoso.com", "bob@contoso.com"],
            "Monthly report",
            "<p>See attached.</p>",
            attachments=[AttachmentInput("report.pdf", pdf_bytes)],
        )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from azure.identity.aio import ClientSecretCredential

from .attachments import AttachmentInput, build_file_attachments
from .config_loader import GraphSettings, load_graph_settings
from .errors import ConfigurationError, RemoteApiError, UnexpectedError, ValidationError
from .graph_client import GraphClient
from .logger import get_logger
from .models import ItemBody, Message, Recipient, SendMailRequest, recipient_list
from .recipients import build_recipient_set


class MailSender:
    """Send HTML email as a given mailbox through Graph.

    Args:
        settings: Graph credentials; tenant_id, client_id and client_secret
            must be non-blank.
        credential: Optional async token credential. Defaults to a
            ``ClientSecretCredential`` built from ``settings``.
        client: Optional pre-built GraphClient (tests, custom sessions).
            Cannot be combined with ``credential``.
        logger: Optional logger; defaults to ``get_logger("MailSender")``.

    Raises:
        ConfigurationError: settings is None, a credential is blank, or both
            ``credential`` and ``client`` are given.

    :meth:`close` closes the client, but an injected credential stays open;
    only the credential built here from ``settings`` is closed.
    """

    def __init__(
        self,
        settings: GraphSettings | None,
        *,
        credential: Any = None,
        client: GraphClient | None = None,
        logger: logging.Logger | None = None,
    ):
        if settings is None:
            raise ConfigurationError("Graph settings are required.")
        settings.validate()
        if client is not None and credential is not None:
            raise ConfigurationError("Pass either a credential or a client, not both.")

        self._settings = settings
        self._logger = logger or get_logger("MailSender")
        if client is None:
            owns_credential = credential is None
            if owns_credential:
                credential = ClientSecretCredential(
                    settings.tenant_id,
                    settings.client_id,
                    settings.client_secret,
                )
            client = GraphClient(
                credential,
                scope=settings.scope,
                base_url=settings.base_url,
                owns_credential=owns_credential,
            )
        self._client = client

    @classmethod
    def from_config(cls, config_path: str | None = None, **kwargs: Any) -> MailSender:
        """Load settings from config file/environment and build a sender."""
        return cls(load_graph_settings(config_path), **kwargs)

    @property
    def settings(self) -> GraphSettings:
        return self._settings

    @property
    def client(self) -> GraphClient:
        return self._client

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> MailSender:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _submit(
        self,
        from_address: str,
        build_request: Callable[[], SendMailRequest],
        *,
        api_error_prefix: str,
        unexpected_prefix: str,
    ) -> None:
        try:
            request = build_request()
            await self._client.send_mail(from_address, request)
        except ValidationError as exc:
            self._logger.error("Invalid message: %s", exc.message)
            raise
        except RemoteApiError as exc:
            self._logger.error("%s: %s", api_error_prefix, exc.message)
            raise
        except Exception as exc:
            self._logger.error("%s: %s", unexpected_prefix, exc)
            raise UnexpectedError(str(exc)) from exc
        self._logger.info("Email sent successfully.")

    async def send_simple(
        self,
        from_address: str,
        to_address: str,
        subject: str,
        body: str,
        cc_user: str,
    ) -> None:
        """Send an HTML message to one recipient, copying ``cc_user``.

        Addresses are passed through as given: no trimming, no dedup between
        To and Cc. Bcc is sent as an empty collection.
        """

        def build() -> SendMailRequest:
            return SendMailRequest(
                message=Message(
                    subject=subject,
                    body=ItemBody(content=body),
                    to_recipients=[Recipient.of(to_address)],
                    cc_recipients=[Recipient.of(cc_user)],
                    bcc_recipients=[],
                ),
                save_to_sent_items=True,
            )

        await self._submit(
            from_address,
            build,
            api_error_prefix="Error sending email",
            unexpected_prefix="An unexpected error occurred",
        )

    async def send_bulk_with_attachments(
        self,
        from_address: str,
        to_addresses: Iterable[str],
        subject: str,
        html_body: str,
        cc_addresses: Iterable[str] | None = None,
        bcc_addresses: Iterable[str] | None = None,
        attachments: Iterable[AttachmentInput] | None = None,
    ) -> None:
        """Send an HTML message to several recipients with optional files.

        Recipient lists are trimmed and deduplicated case-insensitively, then
        made disjoint with priority To > Cc > Bcc. Attachments without a name
        or content are dropped; missing content types are guessed from the
        file extension.

        Raises:
            ValidationError: No usable To address (no request is sent).
            RemoteApiError: Graph or the identity provider rejected the call.
            UnexpectedError: Any other failure.
        """

        def build() -> SendMailRequest:
            recipient_set = build_recipient_set(to_addresses, cc_addresses, bcc_addresses)
            file_attachments = build_file_attachments(attachments)
            return SendMailRequest(
                message=Message(
                    subject=subject,
                    body=ItemBody(content=html_body),
                    to_recipients=recipient_list(recipient_set.to),
                    cc_recipients=recipient_list(recipient_set.cc),
                    bcc_recipients=recipient_list(recipient_set.bcc),
                    attachments=file_attachments or None,
                ),
                save_to_sent_items=True,
            )

        await self._submit(
            from_address,
            build,
            api_error_prefix="Graph error",
            unexpected_prefix="Unexpected error",
        )


__all__ = ["MailSender"]
