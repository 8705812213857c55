"""Flask CLI commands for inspecting and revoking refresh sessions."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authsession.core.extensions import get_token_service
from authsession.core.logger import redact_tokens
from authsession.services._shared.errors import InternalError

LOGGER = logging.getLogger(__name__)


def _fail(action: str, exc: InternalError) -> click.ClickException:
    LOGGER.error("sessions.%s.failed", action, exc_info=True)
    return click.ClickException(f"Refresh store unavailable: {exc}")


@click.group("sessions")
def sessions_cli() -> None:
    """Inspect and revoke refresh token sessions."""


@sessions_cli.command("show")
@click.argument("subject_id")
@click.option("--reveal", is_flag=True, help="Print the raw refresh token instead of a mask.")
@with_appcontext
def show_command(subject_id: str, reveal: bool) -> None:
    """Show whether SUBJECT_ID has an active session."""
    try:
        record = get_token_service().store.find_by_subject(subject_id)
    except InternalError as exc:
        raise _fail("show", exc) from exc
    if record is None:
        click.echo(f"{subject_id}: no active session")
        return
    token = record.refresh_token if reveal else redact_tokens(record.refresh_token)
    click.echo(f"{subject_id}: active  refresh_token={token}")


@sessions_cli.command("whois")
@click.argument("refresh_token")
@with_appcontext
def whois_command(refresh_token: str) -> None:
    """Print the subject currently holding REFRESH_TOKEN."""
    try:
        subject_id = get_token_service().session_of(refresh_token)
    except InternalError as exc:
        raise _fail("whois", exc) from exc
    if subject_id is None:
        raise click.ClickException("Token is not the active refresh token of any subject")
    click.echo(subject_id)


@sessions_cli.command("revoke")
@click.argument("subject_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@with_appcontext
def revoke_command(subject_id: str, yes: bool) -> None:
    """End the session of SUBJECT_ID."""
    if not yes:
        click.confirm(f"Revoke the session of subject {subject_id}?", abort=True)
    try:
        removed = get_token_service().revoke(subject_id)
    except InternalError as exc:
        raise _fail("revoke", exc) from exc
    click.echo("revoked" if removed else "no active session")
