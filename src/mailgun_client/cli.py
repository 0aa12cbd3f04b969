# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for the Mailgun client.

Credentials come from ``--config`` (INI file with a ``[mailgun]`` section),
``MAILGUN_*`` environment variables, or the ``--api-key``/``--domain`` options.

Usage:
    mailgun send --from me@mg.example.com --to bob@example.com \\
        --subject "Hello" --text "Hi Bob" --attach report.pdf
    mailgun send-mime --to bob@example.com message.eml
    mailgun get /domains -p limit=5
    mailgun domains
    mailgun verify-webhook 1700000000 5d1c...token 4f2a...signature

Example:
    $ MAILGUN_API_KEY=key-xxx MAILGUN_DOMAIN=mg.example.com \\
        mailgun send --from me@mg.example.com --to bob@example.com \\
        --subject "Report" --text "See attached" --attach report.pdf --tag reports
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mailgun_client.client import Mailgun
from mailgun_client.errors import ConfigurationError, MailgunError, ProviderError

console = Console()
err_console = Console(stderr=True)


def run_async(coro):
    """Execute an async coroutine synchronously from CLI context.

    Args:
        coro: Async coroutine to execute.

    Returns:
        The coroutine's return value.
    """
    return asyncio.run(coro)


def print_error(message: str) -> None:
    """Print a formatted error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a formatted success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_json(data: Any) -> None:
    """Print data as syntax-highlighted JSON (plain text is printed as is)."""
    if isinstance(data, str):
        console.print(data, markup=False, highlight=False)
        return
    console.print_json(json.dumps(data, indent=2, default=str))


def _configure_logging() -> None:
    log_level = os.getenv("MAILGUN_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _parse_params(params: tuple[str, ...]) -> list[tuple[str, str]]:
    pairs = []
    for item in params:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--param")
        pairs.append((key, value))
    return pairs


def get_client(ctx: click.Context, **overrides: Any) -> Mailgun:
    """Build a client from the group options, exiting on configuration errors."""
    options = ctx.obj or {}
    try:
        return Mailgun.from_config(
            options.get("config_path"),
            api_key=options.get("api_key"),
            domain=options.get("domain"),
            **overrides,
        )
    except ConfigurationError as exc:
        print_error(str(exc))
        sys.exit(1)


def call_api(coro) -> Any:
    """Run an API coroutine, turning Mailgun errors into exit code 1."""
    try:
        return run_async(coro)
    except ProviderError as exc:
        print_error(f"Mailgun returned {exc.status}: {exc.message}")
        sys.exit(1)
    except MailgunError as exc:
        print_error(str(exc))
        sys.exit(1)


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              envvar="MAILGUN_CONFIG", help="INI file with a [mailgun] section.")
@click.option("--api-key", default=None, help="Private API key (default: MAILGUN_API_KEY).")
@click.option("--domain", default=None, help="Sending domain (default: MAILGUN_DOMAIN).")
@click.version_option(package_name="mailgun-client")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, api_key: str | None, domain: str | None) -> None:
    """Mailgun API command-line client."""
    _configure_logging()
    ctx.obj = {"config_path": config_path, "api_key": api_key, "domain": domain}


@main.command("send")
@click.option("--from", "from_addr", required=True, help="Sender address.")
@click.option("--to", "to", required=True, multiple=True, help="Recipient (repeatable).")
@click.option("--cc", multiple=True, help="Cc recipient (repeatable).")
@click.option("--bcc", multiple=True, help="Bcc recipient (repeatable).")
@click.option("--subject", required=True, help="Message subject.")
@click.option("--text", default=None, help="Plain-text body.")
@click.option("--html", default=None, help="HTML body.")
@click.option("--attach", multiple=True, type=click.Path(exists=True, dir_okay=False),
              help="File to attach (repeatable).")
@click.option("--inline", multiple=True, type=click.Path(exists=True, dir_okay=False),
              help="File to attach inline (repeatable).")
@click.option("--tag", multiple=True, help="Tag (repeatable).")
@click.option("--test-mode", is_flag=True, help="Ask Mailgun to accept but not deliver the message.")
@click.option("--dry-run", is_flag=True, help="Print the request instead of sending it.")
@click.pass_context
def send(
    ctx: click.Context,
    from_addr: str,
    to: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    subject: str,
    text: str | None,
    html: str | None,
    attach: tuple[str, ...],
    inline: tuple[str, ...],
    tag: tuple[str, ...],
    test_mode: bool,
    dry_run: bool,
) -> None:
    """Send a message assembled from options."""
    if text is None and html is None:
        print_error("one of --text or --html is required")
        sys.exit(1)

    client = get_client(ctx, test_mode=True if dry_run else None)
    data: dict[str, Any] = {
        "from": from_addr,
        "to": list(to),
        "cc": list(cc) or None,
        "bcc": list(bcc) or None,
        "subject": subject,
        "text": text,
        "html": html,
        "attachment": list(attach) or None,
        "inline": list(inline) or None,
        "o:tag": list(tag) or None,
        "o:testmode": True if test_mode else None,
    }
    result = call_api(client.messages().send({k: v for k, v in data.items() if v is not None}))
    if dry_run:
        print_json(result)
        return
    print_success(f"Queued {result.get('id', '') if isinstance(result, dict) else ''}".rstrip())


@main.command("send-mime")
@click.option("--to", "to", required=True, multiple=True, help="Recipient (repeatable).")
@click.argument("mime_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def send_mime(ctx: click.Context, to: tuple[str, ...], mime_file: str) -> None:
    """Send a pre-built MIME file (.eml/.mime)."""
    client = get_client(ctx)
    result = call_api(client.messages().send_mime({"to": list(to), "message": mime_file}))
    print_success(f"Queued {result.get('id', '') if isinstance(result, dict) else ''}".rstrip())


@main.command("get")
@click.argument("resource")
@click.option("--param", "-p", "params", multiple=True, help="Query parameter as key=value (repeatable).")
@click.pass_context
def get_resource(ctx: click.Context, resource: str, params: tuple[str, ...]) -> None:
    """GET any API resource and print the response."""
    client = get_client(ctx)
    result = call_api(client.get(resource, _parse_params(params)))
    print_json(result)


@main.command("domains")
@click.option("--limit", type=int, default=100, show_default=True)
@click.option("--skip", type=int, default=0, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
@click.pass_context
def list_domains(ctx: click.Context, limit: int, skip: int, as_json: bool) -> None:
    """List the domains of the account."""
    client = get_client(ctx)
    result = call_api(client.domains().list(limit=limit, skip=skip))
    if as_json:
        print_json(result)
        return

    items = result.get("items", []) if isinstance(result, dict) else []
    if not items:
        console.print("[dim]No domains found.[/dim]")
        return

    table = Table(title=f"Domains ({result.get('total_count', len(items))})")
    table.add_column("Name", style="cyan")
    table.add_column("State")
    table.add_column("Type")
    table.add_column("Created")
    for item in items:
        state = item.get("state", "")
        state_style = "green" if state == "active" else "yellow"
        table.add_row(
            item.get("name", ""),
            f"[{state_style}]{state}[/{state_style}]",
            item.get("type", ""),
            item.get("created_at", ""),
        )
    console.print(table)


@main.command("verify-webhook")
@click.argument("timestamp")
@click.argument("token")
@click.argument("signature")
@click.pass_context
def verify_webhook(ctx: click.Context, timestamp: str, token: str, signature: str) -> None:
    """Check a webhook signature; exits 1 when it is not valid."""
    client = get_client(ctx)
    if client.validate_webhook(timestamp, token, signature):
        print_success("Signature is valid")
        return
    print_error("Signature is not valid")
    sys.exit(1)


if __name__ == "__main__":
    main()
