import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig
from src.adapter.database import Database
from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyImmutableEventRepository,
    SqlAlchemyTransactionRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger import EnsureAccount


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path):
    """Fresh file-backed SQLite database per test (shared by every session)"""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}")
    await database.create_all()

    yield database

    await database.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """Create a new database session for each test"""
    async with database.session() as session:
        yield session


class Ledger:
    """Wires use cases to a fresh session, the way one request would"""

    def __init__(self, database: Database):
        self.database = database

    async def run(self, use_case_class, command, max_attempts=3):
        async with self.database.session() as session:
            use_case = use_case_class(
                SqlAlchemyUnitOfWork(session),
                SqlAlchemyAccountRepository(session),
                SqlAlchemyTransactionRepository(session),
                SqlAlchemyImmutableEventRepository(session),
                SqlAlchemyAuditLogRepository(session),
                max_attempts=max_attempts,
            )
            return await use_case.execute(command)

    async def ensure_account(self, user_id):
        async with self.database.session() as session:
            result = await EnsureAccount(
                SqlAlchemyUnitOfWork(session), SqlAlchemyAccountRepository(session)
            ).execute(user_id)
            return result.value

    async def account(self, user_id):
        async with self.database.session() as session:
            return await SqlAlchemyAccountRepository(session).get_by_user_id(user_id)


@pytest.fixture
def ledger(database):
    return Ledger(database)


@pytest_asyncio.fixture
async def client(database):
    """Create test client serving from the test database"""
    from src.api.app import create_app

    app = create_app(ApplicationConfig, database=database)

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
