# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for graph-mailer.

Usage:
    graph-mailer send --from noreply@contoso.com --to alice@contoso.com \\
        --subject "Hello" --body "<p>Hi</p>" --attach report.pdf
    graph-mailer check-config --config /etc/graph-mailer/config.ini

Credentials come from the ``[graph]`` section of ``--config`` or from the
``GRAPH_MAILER_*`` environment variables.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .attachments import AttachmentInput
from .config_loader import REQUIRED_FIELDS, resolve_graph_settings
from .errors import MailSenderError
from .logger import LOG_DATEFMT, LOG_FORMAT
from .recipients import build_recipient_set
from .sender import MailSender

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the CLI process."""
    level_name = (level or os.getenv("GRAPH_MAILER_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        force=True,
    )


def run_async(coro):
    """Execute an async coroutine synchronously from CLI context."""
    return asyncio.run(coro)


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def _mask(value: str | None) -> str:
    if not value:
        return "-"
    if len(value) <= 4:
        return "***"
    return f"{value[:2]}***{value[-2:]}"


async def _send(
    config_path: str | None,
    from_address: str,
    to_addresses: list[str],
    subject: str,
    html_body: str,
    cc_addresses: list[str],
    bcc_addresses: list[str],
    attachments: list[AttachmentInput],
) -> None:
    async with MailSender.from_config(config_path) as sender:
        await sender.send_bulk_with_attachments(
            from_address,
            to_addresses,
            subject,
            html_body,
            cc_addresses=cc_addresses,
            bcc_addresses=bcc_addresses,
            attachments=attachments,
        )


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: GRAPH_MAILER_LOG_LEVEL or INFO).")
def main(log_level: str | None) -> None:
    """graph-mailer: send email through Microsoft Graph."""
    configure_logging(log_level)


@main.command("send")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to config.ini with a [graph] section.")
@click.option("--from", "from_address", required=True, help="Mailbox to send as.")
@click.option("--to", "to_addresses", multiple=True, required=True, help="Recipient (repeatable).")
@click.option("--cc", "cc_addresses", multiple=True, help="Cc recipient (repeatable).")
@click.option("--bcc", "bcc_addresses", multiple=True, help="Bcc recipient (repeatable).")
@click.option("--subject", required=True, help="Message subject.")
@click.option("--body", default=None, help="HTML body.")
@click.option("--body-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Read the HTML body from a file.")
@click.option("--attach", "attach_paths", multiple=True,
              type=click.Path(exists=True, dir_okay=False), help="File to attach (repeatable).")
def send_cmd(
    config_path: str | None,
    from_address: str,
    to_addresses: tuple[str, ...],
    cc_addresses: tuple[str, ...],
    bcc_addresses: tuple[str, ...],
    subject: str,
    body: str | None,
    body_file: str | None,
    attach_paths: tuple[str, ...],
) -> None:
    """Send an HTML email, optionally with attachments."""
    if (body is None) == (body_file is None):
        raise click.UsageError("Provide exactly one of --body or --body-file.")
    if body is not None:
        html_body = body
    else:
        try:
            html_body = Path(body_file).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise click.BadParameter(
                f"{body_file} is not valid UTF-8 ({e.reason} at byte {e.start}).",
                param_hint="--body-file",
            ) from e
    attachments = [AttachmentInput.from_path(path) for path in attach_paths]

    try:
        run_async(_send(
            config_path,
            from_address,
            list(to_addresses),
            subject,
            html_body,
            list(cc_addresses),
            list(bcc_addresses),
            attachments,
        ))
    except MailSenderError as e:
        print_error(e.message)
        raise SystemExit(1) from e

    sent_to = build_recipient_set(to_addresses, cc_addresses, bcc_addresses)
    total = len(sent_to.to) + len(sent_to.cc) + len(sent_to.bcc)
    print_success(f"Email sent as {from_address} to {total} recipient(s)")


@main.command("check-config")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to config.ini with a [graph] section.")
def check_config_cmd(config_path: str | None) -> None:
    """Show the resolved Graph settings and whether they are complete."""
    settings, sources = resolve_graph_settings(config_path)

    table = Table(title="Graph settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")
    for name in ("tenant_id", "client_id", "client_secret", "scope", "base_url"):
        value = getattr(settings, name)
        shown = _mask(value) if name == "client_secret" else (value or "-")
        table.add_row(name, shown, sources.get(name, "default"))
    console.print(table)

    missing = settings.missing_fields()
    if missing:
        print_error(f"Missing credentials: {', '.join(missing)}")
        raise SystemExit(1)
    print_success(f"All required settings present ({', '.join(REQUIRED_FIELDS)})")


if __name__ == "__main__":
    main()
