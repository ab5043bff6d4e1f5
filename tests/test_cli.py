import asyncio

import pytest

from mlsbox.core.database import ServerDatabase
from mlsbox.core.utils import new_id
from mlsbox.main import build_parser, main


def test_parser_requires_command():
    parser = build_parser()
    args = parser.parse_args(["init", "--role", "client"])
    assert args.role == "client"


def test_init_stats_and_purge(tmp_path, capsys):
    url = f"sqlite+aiosqlite:///{tmp_path / 'server.db'}"
    assert main(["--url", url, "init"]) == 0

    async def seed():
        db = ServerDatabase(url)
        await db.enqueue(new_id(), "alice", b"one")
        await db.enqueue(new_id(), "alice", b"two")
        await db.publish(new_id(), "alice", b"kp")
        await db.close()

    asyncio.run(seed())

    assert main(["--url", url, "stats", "--recipient", "alice", "--client-id", "alice"]) == 0
    out = capsys.readouterr().out
    assert "alice: 2 pending message(s)" in out
    assert "alice: 1 key package(s)" in out

    assert main(["--url", url, "purge", "alice"]) == 0
    assert "2 message(s) purged" in capsys.readouterr().out


def test_store_error_exit_code(tmp_path, capsys):
    assert main(["--url", f"sqlite+aiosqlite:///{tmp_path}", "init"]) == 1
    assert "StorageUnavailable" in capsys.readouterr().err


def test_init_with_uncreatable_directory(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    assert main(["--url", f"sqlite+aiosqlite:///{blocker}/server.db", "init"]) == 1
    assert "StorageUnavailable" in capsys.readouterr().err


def test_stats_without_target_is_usage_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--url", f"sqlite+aiosqlite:///{tmp_path / 'server.db'}", "stats"])
    assert excinfo.value.code == 2
    assert "--recipient" in capsys.readouterr().err
