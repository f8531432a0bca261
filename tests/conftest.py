# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: fake credential and dummy aiohttp session."""

from __future__ import annotations

import json

import pytest
from azure.core.credentials import AccessToken

from graph_mailer.config_loader import GraphSettings
from graph_mailer.graph_client import GraphClient


class FakeCredential:
    """Async credential returning a fixed token (or raising ``error``)."""

    def __init__(self, token: str = "test-token", error: Exception | None = None):
        self.token = token
        self.error = error
        self.requested_scopes: list[tuple[str, ...]] = []
        self.closed = False

    async def get_token(self, *scopes, **kwargs):
        self.requested_scopes.append(scopes)
        if self.error is not None:
            raise self.error
        return AccessToken(self.token, 4102444800)

    async def close(self):
        self.closed = True


class DummyResponse:
    def __init__(self, status: int = 202, body=None, reason: str = "Accepted"):
        self.status = status
        self.reason = reason
        if body is None:
            self._text = ""
        elif isinstance(body, str):
            self._text = body
        else:
            self._text = json.dumps(body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def text(self):
        return self._text


class DummySession:
    """Records POSTs and answers with queued responses (202 by default)."""

    def __init__(self, *responses: DummyResponse, error: Exception | None = None):
        self._responses = list(responses)
        self.error = error
        self.requests: list[dict] = []
        self.closed = False

    def post(self, url, json=None, headers=None):
        self.requests.append({"url": url, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        if self._responses:
            return self._responses.pop(0)
        return DummyResponse()

    async def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return GraphSettings(
        tenant_id="contoso-tenant",
        client_id="app-client-id",
        client_secret="app-secret",
    )


@pytest.fixture
def credential():
    return FakeCredential()


@pytest.fixture
def session():
    return DummySession()


@pytest.fixture
def graph_client(credential, session, settings):
    return GraphClient(
        credential,
        scope=settings.scope,
        base_url=settings.base_url,
        session=session,
    )
