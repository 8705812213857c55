"""Tests for the ``flask sessions`` command group."""

from __future__ import annotations

import pytest

from authsession.core.extensions import TOKEN_SERVICE_KEY


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def tokens(app):
    return app.extensions[TOKEN_SERVICE_KEY]


def test_show_without_session(runner):
    result = runner.invoke(args=["sessions", "show", "1"])
    assert result.exit_code == 0
    assert "no active session" in result.output


def test_show_masks_token_by_default(runner, tokens):
    pair = tokens.issue("1")

    masked = runner.invoke(args=["sessions", "show", "1"])
    assert masked.exit_code == 0
    assert pair.refresh_token not in masked.output
    assert "[redacted-jwt]" in masked.output

    revealed = runner.invoke(args=["sessions", "show", "1", "--reveal"])
    assert pair.refresh_token in revealed.output


def test_whois(runner, tokens):
    pair = tokens.issue("42")

    result = runner.invoke(args=["sessions", "whois", pair.refresh_token])
    assert result.exit_code == 0
    assert result.output.strip() == "42"

    unknown = runner.invoke(args=["sessions", "whois", "nope"])
    assert unknown.exit_code != 0


def test_revoke(runner, tokens):
    pair = tokens.issue("7")

    result = runner.invoke(args=["sessions", "revoke", "7", "--yes"])
    assert result.exit_code == 0
    assert "revoked" in result.output
    assert tokens.session_of(pair.refresh_token) is None

    again = runner.invoke(args=["sessions", "revoke", "7", "--yes"])
    assert "no active session" in again.output


def test_revoke_asks_for_confirmation(runner, tokens):
    tokens.issue("7")
    result = runner.invoke(args=["sessions", "revoke", "7"], input="n\n")
    assert result.exit_code != 0
    assert tokens.store.find_by_subject("7") is not None
