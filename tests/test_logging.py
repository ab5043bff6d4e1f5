from mlsbox import logging as mlogging


def test_group_headers_printed_once(capsys):
    log = mlogging.init_logger("server")
    log.log("PUBLISH", group="KeyPackages", client_id="alice")
    log.log("REMOVE", group="KeyPackages", package_id="00ff")
    out = capsys.readouterr().out.splitlines()

    assert sum("KeyPackages" in line for line in out) == 1
    assert any("client_id" in line and "alice" in line for line in out)


def test_branch_prefix(capsys):
    log = mlogging.TreeLogger(db_name="client")
    with log.branch("INIT"):
        log.log("CREATE_ALL")
    out = capsys.readouterr().out
    assert "├───INIT" in out
    assert "CREATE_ALL" in out


def test_get_logger_creates_default():
    assert mlogging.default_logger is None
    log = mlogging.get_logger()
    assert log is mlogging.get_logger()


def test_store_logs_operations(capsys):
    import asyncio
    from mlsbox.core.database import ClientDatabase

    async def run():
        db = ClientDatabase("sqlite+aiosqlite:///:memory:")
        await db.init()
        await db.create("alice", b"k", b"c")
        await db.close()

    asyncio.run(run())
    out = capsys.readouterr().out
    assert "CREATE" in out
    assert "username" in out
    # secret bytes never reach the log
    assert "b'k'" not in out
