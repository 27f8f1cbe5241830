"""Tests for the janitor command-line interface (janitor/cli/main.py)."""

import csv
import io
import logging
import re
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from janitor.cli.main import app
from janitor.services.mailchimp import MailchimpGateway

runner = CliRunner()

BASE_ARGS = [
    "--api-key", "api-key-123",
    "--base-url", "https://us2.api.mailchimp.test",
    "--list-id", "list-id",
    "--page-size", "2",
]


class FakeMailchimp:
    """Transport handler serving a members list and accepting PATCHes."""

    def __init__(self, members, patch_errors=None, list_error=None):
        self.members = members
        self.patch_errors = patch_errors or {}
        self.list_error = list_error
        self.patched: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            if self.list_error:
                return httpx.Response(self.list_error["status"], json=self.list_error)
            offset = int(request.url.params["offset"])
            count = int(request.url.params["count"])
            return httpx.Response(200, json={"members": self.members[offset:offset + count]})

        member_id = request.url.path.rsplit("/", 1)[-1]
        self.patched.append(member_id)
        if member_id in self.patch_errors:
            error = self.patch_errors[member_id]
            return httpx.Response(error["status"], json=error)
        return httpx.Response(200, json={"id": member_id})


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def serve():
    """Route every gateway the CLI creates to the given fake server."""

    def _serve(server: FakeMailchimp):
        def build(config):
            http = httpx.AsyncClient(transport=httpx.MockTransport(server))
            return MailchimpGateway(config, http=http)

        return patch("janitor.cli.main.create_gateway", side_effect=build)

    return _serve


def members(*ids):
    return [{"id": i, "email_address": f"{i}@example.com", "full_name": f"User {i}"} for i in ids]


class TestArchiveCommand:
    """Tests for `janitor archive`."""

    def test_all_archived(self, serve):
        server = FakeMailchimp(members("id1", "id2", "id3", "id4"))

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "archive"])

        assert result.exit_code == 0, result.output
        archived = re.findall(r"Archived user with id (\w+)", result.stdout)
        assert sorted(archived) == ["id1", "id2", "id3", "id4"]
        assert sorted(server.patched) == ["id1", "id2", "id3", "id4"]
        assert "4 archived, 0 failed" in result.output

    def test_failed_member_reported_individually(self, serve):
        error = {"type": "t", "title": "Bad", "status": 400, "detail": "x"}
        server = FakeMailchimp(members("id1", "id2", "id3", "id4"), patch_errors={"id3": error})

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "archive"])

        assert result.exit_code == 1
        assert "Mailchimp error while archiving user id3: Bad (400): x" in result.output
        archived = re.findall(r"Archived user with id (\w+)", result.stdout)
        assert sorted(archived) == ["id1", "id2", "id4"]
        assert "3 archived, 1 failed" in result.output

    def test_enumeration_failure_archives_nothing(self, serve):
        error = {"type": "auth", "title": "API Key Invalid", "status": 401, "detail": "bad key"}
        server = FakeMailchimp(members("id1"), list_error=error)

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "archive"])

        assert result.exit_code == 1
        assert "Could not list unsubscribed users" in result.output
        assert "API Key Invalid (401): bad key" in result.output
        assert server.patched == []

    def test_no_members(self, serve):
        server = FakeMailchimp([])

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "archive"])

        assert result.exit_code == 0
        assert "0 archived, 0 failed" in result.output

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("MAILCHIMP_API_KEY", raising=False)

        result = runner.invoke(
            app,
            ["--base-url", "https://x.test", "--list-id", "list-id", "archive"],
        )

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output

    def test_unknown_log_level(self, serve):
        server = FakeMailchimp(members("id1"))

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "--log-level", "verbose", "archive"])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output
        assert "verbose" in result.output
        assert server.patched == []

    def test_unknown_log_level_from_environment(self, serve, monkeypatch):
        monkeypatch.setenv("JANITOR_LOG_LEVEL", "chatty")
        server = FakeMailchimp(members("id1"))

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "list"])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output

    def test_options_read_from_environment(self, serve, monkeypatch):
        monkeypatch.setenv("MAILCHIMP_API_KEY", "env-key")
        monkeypatch.setenv("MAILCHIMP_BASE_URL", "https://us2.api.mailchimp.test")
        monkeypatch.setenv("MAILCHIMP_LIST_ID", "list-id")
        server = FakeMailchimp(members("only"))

        with serve(server) as build:
            result = runner.invoke(app, ["--concurrency", "3", "archive"])

        assert result.exit_code == 0, result.output
        config = build.call_args.args[0]
        assert config.api_key == "env-key"
        assert config.max_concurrency == 3


class TestListCommand:
    """Tests for `janitor list`."""

    def test_csv_output(self, serve):
        rows = members("id1", "id2", "id3")
        rows[1]["full_name"] = "Doe, Jane"
        server = FakeMailchimp(rows)

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "list"])

        assert result.exit_code == 0, result.output
        parsed = list(csv.reader(io.StringIO(result.stdout)))
        assert parsed[0] == ["id", "email_address", "full_name"]
        assert parsed[1:] == [
            ["id1", "id1@example.com", "User id1"],
            ["id2", "id2@example.com", "Doe, Jane"],
            ["id3", "id3@example.com", "User id3"],
        ]
        assert server.patched == []

    def test_list_failure(self, serve):
        error = {"type": "nf", "title": "Resource Not Found", "status": 404}
        server = FakeMailchimp([], list_error=error)

        with serve(server):
            result = runner.invoke(app, [*BASE_ARGS, "list"])

        assert result.exit_code == 1
        assert "Resource Not Found (404)" in result.output
