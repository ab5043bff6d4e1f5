import pytest
import pytest_asyncio

from mlsbox import logging as mlogging
from mlsbox.core.database import ClientDatabase, ServerDatabase


@pytest.fixture(autouse=True)
def isolate_global_state():
    """Reset the package-level logger so printed group headers don't leak between tests."""
    mlogging.default_logger = None
    mlogging.TreeLogger._local.__dict__.clear()
    yield
    mlogging.default_logger = None
    mlogging.TreeLogger._local.__dict__.clear()


@pytest_asyncio.fixture
async def server_db(tmp_path):
    """Fresh server database in a temporary file."""
    database = ServerDatabase(f"sqlite+aiosqlite:///{tmp_path / 'server.db'}")
    await database.init()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def client_db(tmp_path):
    """Fresh client database in a temporary file."""
    database = ClientDatabase(f"sqlite+aiosqlite:///{tmp_path / 'client.db'}")
    await database.init()
    yield database
    await database.close()
