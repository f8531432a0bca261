# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the graph-mailer CLI."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from click.testing import CliRunner

from graph_mailer import cli
from graph_mailer.cli import _mask, main, run_async
from graph_mailer.errors import ConfigurationError, RemoteApiError

REAL_CONFIGURE_LOGGING = cli.configure_logging


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GRAPH_MAILER_TENANT_ID", "GRAPH_MAILER_CLIENT_ID", "GRAPH_MAILER_CLIENT_SECRET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_sender(monkeypatch):
    sender = MagicMock()
    sender.send_bulk_with_attachments = AsyncMock()
    sender.__aenter__ = AsyncMock(return_value=sender)
    sender.__aexit__ = AsyncMock(return_value=False)
    from_config = MagicMock(return_value=sender)
    monkeypatch.setattr(cli.MailSender, "from_config", from_config)
    return sender, from_config


@pytest.fixture
def runner():
    return CliRunner()


def test_run_async():
    async def async_func():
        return 42

    assert run_async(async_func()) == 42


def test_mask():
    assert _mask(None) == "-"
    assert _mask("abc") == "***"
    assert _mask("abcdefgh") == "ab***gh"


def test_send_passes_arguments(runner, fake_sender, tmp_path):
    sender, from_config = fake_sender
    attachment = tmp_path / "report.pdf"
    attachment.write_bytes(b"%PDF")

    result = runner.invoke(main, [
        "send",
        "--config", "cfg.ini",
        "--from", "noreply@x.com",
        "--to", "a@x.com", "--to", "b@x.com",
        "--cc", "c@x.com",
        "--bcc", "d@x.com",
        "--subject", "Report",
        "--body", "<p>See attached</p>",
        "--attach", str(attachment),
    ])

    assert result.exit_code == 0, result.output
    assert "Email sent" in result.output
    from_config.assert_called_once_with("cfg.ini")
    args, kwargs = sender.send_bulk_with_attachments.await_args
    assert args == ("noreply@x.com", ["a@x.com", "b@x.com"], "Report", "<p>See attached</p>")
    assert kwargs["cc_addresses"] == ["c@x.com"]
    assert kwargs["bcc_addresses"] == ["d@x.com"]
    [att] = kwargs["attachments"]
    assert att.file_name == "report.pdf"
    assert att.content == b"%PDF"


def test_send_reads_body_file(runner, fake_sender, tmp_path):
    sender, _ = fake_sender
    body_file = tmp_path / "body.html"
    body_file.write_text("<h1>Hi</h1>", encoding="utf-8")

    result = runner.invoke(main, [
        "send", "--from", "f@x.com", "--to", "t@x.com", "--subject", "s",
        "--body-file", str(body_file),
    ])

    assert result.exit_code == 0, result.output
    assert sender.send_bulk_with_attachments.await_args.args[3] == "<h1>Hi</h1>"


def test_send_reports_cleaned_recipient_count(runner, fake_sender):
    result = runner.invoke(main, [
        "send", "--from", "f@x.com",
        "--to", "a@x.com", "--to", "A@X.com", "--to", "  ",
        "--cc", "a@x.com",
        "--subject", "s", "--body", "b",
    ])

    assert result.exit_code == 0, result.output
    assert "to 1 recipient(s)" in result.output


def test_send_rejects_non_utf8_body_file(runner, fake_sender, tmp_path):
    sender, _ = fake_sender
    body_file = tmp_path / "body.html"
    body_file.write_bytes(b"<p>caf\xe9</p>")

    result = runner.invoke(main, [
        "send", "--from", "f@x.com", "--to", "t@x.com", "--subject", "s",
        "--body-file", str(body_file),
    ])

    assert result.exit_code == 2
    assert "--body-file" in result.output
    assert "UTF-8" in result.output
    sender.send_bulk_with_attachments.assert_not_awaited()


def test_send_requires_exactly_one_body(runner, fake_sender):
    result = runner.invoke(main, ["send", "--from", "f@x.com", "--to", "t@x.com", "--subject", "s"])
    assert result.exit_code == 2
    assert "--body" in result.output


def test_send_reports_remote_error(runner, fake_sender):
    sender, _ = fake_sender
    sender.send_bulk_with_attachments.side_effect = RemoteApiError("Access is denied.", status=403)

    result = runner.invoke(main, [
        "send", "--from", "f@x.com", "--to", "t@x.com", "--subject", "s", "--body", "b",
    ])

    assert result.exit_code == 1
    assert "Access is denied." in result.output


def test_send_reports_configuration_error(runner, monkeypatch):
    monkeypatch.setattr(
        cli.MailSender, "from_config", MagicMock(side_effect=ConfigurationError("Graph credentials are missing"))
    )
    result = runner.invoke(main, [
        "send", "--from", "f@x.com", "--to", "t@x.com", "--subject", "s", "--body", "b",
    ])
    assert result.exit_code == 1
    assert "Graph credentials are missing" in result.output


def test_check_config_complete(runner, tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[graph]\ntenant_id = t\nclient_id = c\nclient_secret = verysecret\n")

    result = runner.invoke(main, ["check-config", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "verysecret" not in result.output
    assert "All required settings present" in result.output


def test_check_config_missing(runner, tmp_path):
    result = runner.invoke(main, ["check-config", "--config", str(tmp_path / "none.ini")])
    assert result.exit_code == 1
    assert "Missing credentials" in result.output


def test_configure_logging_sets_level(monkeypatch):
    basic_config = MagicMock()
    monkeypatch.setattr("graph_mailer.cli.logging.basicConfig", basic_config)

    REAL_CONFIGURE_LOGGING("debug")

    kwargs = basic_config.call_args.kwargs
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["force"] is True
