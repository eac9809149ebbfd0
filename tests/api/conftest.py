import pytest
import pytest_asyncio

from tests.fakes import FakeEngine, api_client, page


@pytest.fixture
def engine():
    return FakeEngine(pages={None: page(["_col0"], [["_col0"], ["1"]])})


@pytest_asyncio.fixture(scope="function")
async def client(engine):
    async with api_client(engine) as ac:
        yield ac
