"""Command-line interface for the Mailchimp list janitor.

Usage:
    # Archive every unsubscribed member
    janitor archive --api-key KEY --base-url https://us2.api.mailchimp.com --list-id LIST

    # Dump unsubscribed members as CSV
    janitor list > unsubscribed.csv

Connection options fall back to MAILCHIMP_API_KEY, MAILCHIMP_BASE_URL and
MAILCHIMP_LIST_ID (a .env at the git root is loaded first).
"""

import asyncio
import csv
import sys
import uuid
from dataclasses import dataclass
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from janitor.lib.config_manager import config
from janitor.lib.logging_config import setup_logging
from janitor.services.mailchimp import (
    FetchMembersError,
    PipelineConfig,
    create_gateway,
    create_janitor,
)

app = typer.Typer(help="Archive unsubscribed users from a Mailchimp list")
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


@dataclass
class Options:
    """Connection options shared by every command."""

    api_key: Optional[str]
    base_url: Optional[str]
    list_id: Optional[str]
    page_size: Optional[int]
    concurrency: Optional[int]
    timeout: Optional[float]


@app.callback()
def main(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(None, "--api-key", "-a", envvar="MAILCHIMP_API_KEY", help="Mailchimp API key"),
    base_url: Optional[str] = typer.Option(None, "--base-url", "-b", envvar="MAILCHIMP_BASE_URL", help="Mailchimp API base URL"),
    list_id: Optional[str] = typer.Option(None, "--list-id", "-l", envvar="MAILCHIMP_LIST_ID", help="List (audience) id"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Members fetched per page"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-c", min=1, help="Max archive requests in flight"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-request timeout in seconds"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level (default: JANITOR_LOG_LEVEL)"),
):
    """Archive unsubscribed users from a Mailchimp list."""
    try:
        setup_logging(
            "janitor",
            log_level or config.get("JANITOR_LOG_LEVEL"),
            run_id=uuid.uuid4().hex[:12],
        )
    except ValueError as e:
        _invalid_configuration(e)
    ctx.obj = Options(api_key, base_url, list_id, page_size, concurrency, timeout)


def _invalid_configuration(error: ValueError) -> NoReturn:
    err_console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(error))}")
    raise typer.Exit(2)


def _build_config(options: Options) -> PipelineConfig:
    try:
        return PipelineConfig.from_env(
            api_key=options.api_key,
            base_url=options.base_url,
            list_id=options.list_id,
            page_size=options.page_size,
            max_concurrency=options.concurrency,
            timeout=options.timeout,
        )
    except ValueError as e:
        _invalid_configuration(e)


@app.command()
def archive(ctx: typer.Context):
    """Archives all the unsubscribed users."""
    pipeline_config = _build_config(ctx.obj)
    failed = asyncio.run(_archive(pipeline_config))
    if failed:
        raise typer.Exit(1)


async def _archive(pipeline_config: PipelineConfig) -> int:
    """Run the archive pipeline, printing one line per member.

    Returns:
        Number of failures (an enumeration failure counts as one)
    """
    archived = 0
    failed = 0
    async with create_gateway(pipeline_config) as gateway:
        janitor = create_janitor(gateway)
        try:
            outcomes = await janitor.move_unsubscribed_to_archive()
        except FetchMembersError as e:
            err_console.print(f"[bold red]Could not list unsubscribed users:[/bold red] {escape(str(e))}", highlight=False)
            return 1

        async for outcome in outcomes:
            if outcome.success:
                archived += 1
                console.print(f"Archived user with id {outcome.member_id}", highlight=False)
            else:
                failed += 1
                err_console.print(str(outcome.error), style="red", highlight=False, markup=False)

    err_console.print(f"[bold]Done:[/bold] {archived} archived, {failed} failed")
    return failed


@app.command("list")
def list_members(ctx: typer.Context):
    """Lists all the unsubscribed users."""
    pipeline_config = _build_config(ctx.obj)
    ok = asyncio.run(_list(pipeline_config))
    if not ok:
        raise typer.Exit(1)


async def _list(pipeline_config: PipelineConfig) -> bool:
    """Stream unsubscribed members to stdout as CSV."""
    writer = csv.writer(sys.stdout, lineterminator="\n")
    writer.writerow(["id", "email_address", "full_name"])
    async with create_gateway(pipeline_config) as gateway:
        try:
            async for member in create_janitor(gateway).fetch_unsubscribed():
                writer.writerow([member.id, member.email_address or "", member.full_name or ""])
        except FetchMembersError as e:
            err_console.print(f"[bold red]Could not list unsubscribed users:[/bold red] {escape(str(e))}", highlight=False)
            return False
    return True


if __name__ == "__main__":
    app()
