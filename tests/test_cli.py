"""Tests for the argparse front end: commands end to end against temp storage."""

import io
import json

import pytest
from rich.console import Console

from memory_cli.__main__ import CommandContext, build_parser, main, run_command
from memory_cli.entries import ENCRYPTED_PLACEHOLDER
from memory_cli.presenter import Presenter
from memory_cli.providers import ContentSource, EditResult
from memory_cli.storage import JsonStorage


class FakeEditPrompt:
    def __init__(self, content, tags_text):
        self.result = EditResult(content=content, tags_text=tags_text)

    def request(self, current_content, current_tags):
        return self.result


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(tmp_path / "db.json", tmp_path / "vault.json")


@pytest.fixture
def cli(storage, out, err, make_passwords):
    """Run a command line; returns (exit code, stdout, stderr)."""
    copied = []

    def run(argv, passwords=(), clipboard="", edit=None):
        ctx = CommandContext(
            storage=storage,
            passwords=make_passwords(*passwords),
            content_source=ContentSource(clipboard_reader=lambda: clipboard),
            edit_prompt=edit or FakeEditPrompt("unused", ""),
            presenter=Presenter(
                console=Console(file=out, width=200),
                err_console=Console(file=err, width=200),
            ),
            clipboard_writer=copied.append,
        )
        code = run_command(build_parser().parse_args(argv), ctx)
        return code, out.getvalue(), err.getvalue()

    run.copied = copied
    return run


def _db(storage):
    return json.loads(storage.db_path.read_text())


def _vault(storage):
    return json.loads(storage.vault_path.read_text())


class TestAdd:

    def test_add_text(self, cli, storage):
        code, stdout, _ = cli(["add", "docker system prune", "-t", "docker, cleanup"])
        assert code == 0
        assert "100" in stdout
        entry = _db(storage)["entries"][0]
        assert entry["content"] == "docker system prune"
        assert entry["tags"] == ["docker", "cleanup"]
        assert entry["usageCount"] == 0

    def test_add_alias_and_clipboard(self, cli, storage):
        code, _, _ = cli(["a", "-c"], clipboard="  from clipboard \n")
        assert code == 0
        assert _db(storage)["entries"][0]["content"] == "from clipboard"

    def test_add_empty_fails_without_writing(self, cli, storage):
        code, _, stderr = cli(["add"])
        assert code == 1
        assert "empty" in stderr
        assert not storage.db_path.exists()

    def test_add_encrypted(self, cli, storage):
        code, _, _ = cli(["add", "AKIA123", "-e", "-t", "aws"], passwords=["pw"])
        assert code == 0
        entry = _db(storage)["entries"][0]
        assert entry["encrypted"] is True
        assert entry["content"] == ENCRYPTED_PLACEHOLDER
        assert list(_vault(storage)["secrets"]) == ["100"]
        assert "AKIA123" not in storage.db_path.read_text()
        assert "AKIA123" not in storage.vault_path.read_text()


class TestFind:

    def test_find_plain_listing(self, cli):
        cli(["add", "React hook"])
        cli(["add", "JavaScript"])
        code, stdout, _ = cli(["find", "rea*"])
        assert code == 0
        assert "ID: 100" in stdout
        assert "React hook" in stdout
        assert "JavaScript" not in stdout

    def test_find_table(self, cli):
        cli(["add", "React hook", "-t", "react"])
        code, stdout, _ = cli(["search", "-t"])
        assert code == 0
        assert "Content" in stdout
        assert "React hook" in stdout

    def test_find_no_matches(self, cli):
        code, stdout, _ = cli(["f", "nothing"])
        assert code == 0
        assert "No matches" in stdout

    def test_find_bad_date(self, cli):
        code, _, stderr = cli(["find", "-d", "someday"])
        assert code == 1
        assert "someday" in stderr

    def test_find_today(self, cli):
        cli(["add", "fresh note"])
        code, stdout, _ = cli(["find", "-d", "today"])
        assert code == 0
        assert "fresh note" in stdout


class TestGet:

    def test_get_increments_usage(self, cli, storage):
        cli(["add", "ls -la"])
        code, stdout, _ = cli(["get", "100"])
        assert code == 0
        assert "ls -la" in stdout
        assert _db(storage)["entries"][0]["usageCount"] == 1

    def test_get_encrypted_and_copy(self, cli, storage):
        cli(["add", "AKIA123", "-e"], passwords=["pw"])
        code, stdout, _ = cli(["g", "100", "-c"], passwords=["pw"])
        assert code == 0
        assert "AKIA123" in stdout
        assert cli.copied == ["AKIA123"]
        assert _db(storage)["entries"][0]["usageCount"] == 1

    def test_get_wrong_password_keeps_usage(self, cli, storage):
        cli(["add", "AKIA123", "-e"], passwords=["pw"])
        code, _, stderr = cli(["get", "100"], passwords=["wrong"])
        assert code == 1
        assert "password" in stderr.lower()
        assert _db(storage)["entries"][0]["usageCount"] == 0

    def test_get_unknown(self, cli):
        code, _, stderr = cli(["get", "999"])
        assert code == 1
        assert "999" in stderr


class TestEditTagsDelete:

    def test_edit(self, cli, storage):
        cli(["add", "old", "-t", "a"])
        code, _, _ = cli(["edit", "100"], edit=FakeEditPrompt("new", "b, c"))
        assert code == 0
        entry = _db(storage)["entries"][0]
        assert entry["content"] == "new"
        assert entry["tags"] == ["b", "c"]

    def test_edit_encrypted_wrong_password_writes_nothing(self, cli, storage):
        cli(["add", "secret", "-e"], passwords=["pw"])
        before = storage.vault_path.read_text()
        code, _, _ = cli(["e", "100"], passwords=["wrong"], edit=FakeEditPrompt("x", ""))
        assert code == 1
        assert storage.vault_path.read_text() == before

    def test_tags(self, cli):
        cli(["add", "1", "-t", "react, js"])
        cli(["add", "2", "-t", "react"])
        code, stdout, _ = cli(["tags"])
        assert code == 0
        assert stdout.index("react") < stdout.index("js")

    def test_delete(self, cli, storage):
        cli(["add", "secret", "-e"], passwords=["pw"])
        code, _, _ = cli(["rm", "100"])
        assert code == 0
        assert _db(storage)["entries"] == []
        assert _vault(storage)["secrets"] == {}

    def test_delete_unknown(self, cli, storage):
        code, _, stderr = cli(["delete", "100"])
        assert code == 1
        assert "100" in stderr
        assert not storage.db_path.exists()

    def test_location(self, cli, storage):
        code, stdout, _ = cli(["loc"])
        assert code == 0
        assert "db.json" in stdout
        assert "vault.json" in stdout


class TestMain:

    def test_main_uses_save_location(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MEMORY_CLI_SAVE_LOCATION", str(tmp_path / "data"))
        monkeypatch.setenv("MEMORY_CLI_AUDIT_LOG", "0")

        assert main(["add", "hello world", "-t", "greeting"]) == 0
        assert (tmp_path / "data" / "db.json").exists()
        assert main(["find", "hello"]) == 0
        assert "hello world" in capsys.readouterr().out

    def test_main_bad_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MEMORY_CLI_LOG_LEVEL", "LOUD")
        assert main(["loc"]) == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "memory-cli" in capsys.readouterr().out

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
