# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Authenticated HTTP client for the Microsoft Graph mail API.

Token acquisition is delegated to an async credential exposing
``get_token(*scopes)`` (``azure.identity.aio.ClientSecretCredential`` by
default), which owns token caching and refresh. Requests go through a
single ``aiohttp.ClientSession`` created on first use and shared by
concurrent sends.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import aiohttp
from azure.core.exceptions import ClientAuthenticationError

from .config_loader import DEFAULT_BASE_URL, DEFAULT_SCOPE
from .errors import RemoteApiError
from .models import SendMailRequest


class GraphClient:
    """Thin async wrapper around ``POST /users/{id}/sendMail``.

    ``close()`` only closes the session it created itself, and the credential
    only when ``owns_credential`` is true.
    """

    def __init__(
        self,
        credential: Any,
        *,
        scope: str = DEFAULT_SCOPE,
        base_url: str = DEFAULT_BASE_URL,
        session: aiohttp.ClientSession | None = None,
        owns_credential: bool = False,
    ):
        self._credential = credential
        self._scope = scope
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._owns_credential = owns_credential

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def base_url(self) -> str:
        return self._base_url

    def send_mail_url(self, user_id: str) -> str:
        return f"{self._base_url}/users/{quote(user_id, safe='@')}/sendMail"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _authorization_header(self) -> dict[str, str]:
        try:
            access_token = await self._credential.get_token(self._scope)
        except ClientAuthenticationError as exc:
            raise RemoteApiError(getattr(exc, "message", None) or str(exc)) from exc
        return {"Authorization": f"Bearer {access_token.token}"}

    @staticmethod
    async def _error_from_response(response: Any) -> RemoteApiError:
        """Build a RemoteApiError from a Graph error response.

        Graph errors look like ``{"error": {"code": "...", "message": "..."}}``;
        anything else is reported as the raw body text.
        """
        text = await response.text()
        code = None
        message = None
        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            code = body["error"].get("code")
            message = body["error"].get("message")
        if not message:
            message = text or getattr(response, "reason", None) or f"HTTP {response.status}"
        return RemoteApiError(message, status=response.status, code=code)

    async def send_mail(self, user_id: str, request: SendMailRequest) -> None:
        """Submit ``request`` as the mailbox ``user_id``.

        Raises:
            RemoteApiError: Token acquisition failed or Graph answered >= 400.
            aiohttp.ClientError: Transport-level failure.
        """
        headers = await self._authorization_header()
        session = self._get_session()
        async with session.post(
            self.send_mail_url(user_id),
            json=request.to_payload(),
            headers=headers,
        ) as response:
            if response.status >= 400:
                raise await self._error_from_response(response)

    async def close(self) -> None:
        """Close the HTTP session and the credential, if this client created them."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
        if not self._owns_credential:
            return
        close = getattr(self._credential, "close", None)
        if close is not None:
            await close()
