import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.db.database import Database
from app.db.init_data import create_default_admin
from app.main import create_app
from app.services.post_service import PostService


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        STORAGE_TYPE="local",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin1234",
    )


@pytest.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await db.create_tables()
    async with db.session_factory() as session:
        await create_default_admin(session, test_settings)
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def post_service(session):
    return PostService(session)


@pytest.fixture
async def app(test_settings, database):
    application = create_app(test_settings, database=database)
    await application.state.file_manager.ensure_upload_dir()
    return application


@pytest.fixture
async def client(app):
    # 세션 쿠키가 Secure 이므로 https 로 요청한다
    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://test") as ac:
        yield ac


@pytest.fixture
async def admin_client(client):
    response = await client.post("/api/auth/login", json={"username": "admin", "password": "admin1234"})
    assert response.status_code == 200
    return client
