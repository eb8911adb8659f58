"""
Tests for CLI commands and settings.

Commands are invoked through click's CliRunner with database access
replaced by doubles.
"""

from unittest.mock import AsyncMock

import pytest
from click.testing import CliRunner

from bookstore.cli import commands
from bookstore.cli.commands import cli
from bookstore.config.settings import MongoSettings


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_run_catalog(monkeypatch):
    run = AsyncMock(return_value=True)
    monkeypatch.setattr(commands, "run_catalog", run)
    return run


class TestRunCommand:
    def test_runs_all_steps(self, runner, fake_run_catalog):
        result = runner.invoke(cli, ["run"])

        assert result.exit_code == 0
        assert fake_run_catalog.await_args.args[0] is None

    def test_selected_steps(self, runner, fake_run_catalog):
        result = runner.invoke(cli, ["run", "--step", "4", "-s", "5"])

        assert result.exit_code == 0
        assert fake_run_catalog.await_args.args[0] == [4, 5]

    def test_failure_exit_code(self, runner, fake_run_catalog):
        fake_run_catalog.return_value = False

        result = runner.invoke(cli, ["run"])

        assert result.exit_code == 1

    def test_step_out_of_range(self, runner, fake_run_catalog):
        result = runner.invoke(cli, ["run", "--step", "15"])

        assert result.exit_code == 2
        fake_run_catalog.assert_not_awaited()


class TestOtherCommands:
    def test_steps_lists_catalog(self, runner):
        result = runner.invoke(cli, ["steps"])

        assert result.exit_code == 0
        assert "Aggregation: author with most books" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_page(self, runner, monkeypatch, mock_db, mock_collection):
        from tests.conftest import make_cursor

        cursor = make_cursor([{"title": "1984"}, {"title": "Moby Dick"}])
        mock_collection.find.return_value = cursor
        monkeypatch.setattr(commands, "get_database", AsyncMock(return_value=mock_db))

        result = runner.invoke(cli, ["page", "--page", "2", "--per-page", "2"])

        assert result.exit_code == 0
        cursor.skip.assert_called_once_with(2)
        cursor.limit.assert_called_once_with(2)
        assert "Moby Dick" in result.output

    def test_invalid_page(self, runner, monkeypatch, mock_db):
        monkeypatch.setattr(commands, "get_database", AsyncMock(return_value=mock_db))

        result = runner.invoke(cli, ["page", "--page", "0"])

        assert result.exit_code == 1

    def test_explain(self, runner, monkeypatch, mock_db, ixscan_explain):
        mock_db.command.return_value = ixscan_explain
        monkeypatch.setattr(commands, "get_database", AsyncMock(return_value=mock_db))

        result = runner.invoke(cli, ["explain", "--title", "The Hobbit"])

        assert result.exit_code == 0
        assert "IXSCAN" in result.output
        assert "title_1" in result.output

    def test_seed(self, runner, monkeypatch, mock_collection):
        monkeypatch.setattr(
            commands, "get_books_collection", AsyncMock(return_value=mock_collection)
        )

        result = runner.invoke(cli, ["seed", "--drop"])

        assert result.exit_code == 0
        mock_collection.delete_many.assert_awaited_once_with({})
        assert "Inserted 12 books" in result.output

    def test_indexes(self, runner, monkeypatch, mock_db, mock_collection):
        mock_collection.index_information.return_value = {
            "_id_": {"key": [("_id", 1)]},
            "title_1": {"key": [("title", 1)]},
            "author_1_published_year_1": {"key": [("author", 1), ("published_year", 1)]},
        }
        monkeypatch.setattr(commands, "get_database", AsyncMock(return_value=mock_db))

        result = runner.invoke(cli, ["indexes"])

        assert result.exit_code == 0
        mock_collection.create_indexes.assert_awaited_once()
        assert "author_1_published_year_1" in result.output


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    def test_default_uri_matches_local_server(self, monkeypatch):
        for var in ("MONGO_HOST", "MONGO_PORT", "MONGO_USERNAME", "MONGO_PASSWORD"):
            monkeypatch.delenv(var, raising=False)

        settings = MongoSettings()

        assert settings.uri == "mongodb://localhost:27017"
        assert settings.db_name == "plp_bookstore"
        assert settings.collection_name == "books"

    def test_uri_with_credentials(self):
        settings = MongoSettings(username="reader", password="s3cret", host="db", port=27018)

        assert settings.uri == "mongodb://reader:s3cret@db:27018/?authSource=admin"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MONGO_DB_NAME", "bookstore_test")
        monkeypatch.setenv("MONGO_PORT", "27999")

        settings = MongoSettings()

        assert settings.db_name == "bookstore_test"
        assert settings.port == 27999

    def test_port_range(self):
        with pytest.raises(Exception):
            MongoSettings(port=70000)
