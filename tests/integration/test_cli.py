"""
Test feed CLI commands against a file-backed database
"""

import uuid

import pytest
from typer.testing import CliRunner

from feedsync.cli import feed_commands
from feedsync.cli.feed_commands import app
from feedsync.core.database import db_manager
from feedsync.core.exceptions import WriteError
from feedsync.core.logging import setup_logging
from feedsync.services.orchestrator import FeedRunOrchestrator


runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(tmp_path, monkeypatch):
    monkeypatch.setattr(db_manager, "_url", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr(db_manager, "_engine", None)
    monkeypatch.setattr(db_manager, "_sessionmaker", None)
    monkeypatch.setattr(feed_commands.console, "width", 200)
    result = runner.invoke(app, ["--log-level", "ERROR", "init-db"])
    assert result.exit_code == 0, result.output
    yield
    # The CLI sink points at the runner's closed stream
    setup_logging()


def invoke(*args):
    return runner.invoke(app, ["--log-level", "ERROR", *args])


def test_add_and_list_feeds():
    result = invoke("add", "Vendor", "https://vendor.example.com/export.yml", "--profile", "yml", "--mode", "full_import")

    assert result.exit_code == 0, result.output
    assert "Registered feed" in result.output

    listing = invoke("list")

    assert listing.exit_code == 0, listing.output
    assert "Vendor" in listing.output
    assert "full_import" in listing.output


def test_generic_feed_needs_item_path():
    result = invoke("add", "Plain", "https://feeds.example.com/catalog.xml")

    assert result.exit_code == 2


def test_unknown_profile_is_rejected():
    result = invoke("add", "Acme", "https://acme.example.com/feed.xml", "--profile", "acme", "--item-path", "a.b")

    assert result.exit_code == 2


def test_run_without_enabled_feeds():
    invoke("add", "Paused", "https://feeds.example.com/catalog.xml", "--item-path", "catalog.item", "--disabled")

    result = invoke("run", "--op", "stock_only")

    assert result.exit_code == 0, result.output
    assert "Total written: 0" in result.output


def test_run_unknown_feed():
    result = invoke("run", "--feed-id", str(uuid.uuid4()))

    assert result.exit_code == 1
    assert "not found" in result.output


def test_run_rejects_malformed_feed_id():
    result = invoke("run", "--feed-id", "nope")

    assert result.exit_code == 2


def test_run_reports_unrecorded_status(monkeypatch):
    async def locked(self, *, op=None, feed_id=None):
        raise WriteError("Error updating SupplierFeed: database is locked")

    monkeypatch.setattr(FeedRunOrchestrator, "run", locked)

    result = invoke("run")

    assert result.exit_code == 1
    assert "database is locked" in result.output
