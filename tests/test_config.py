import pytest

from app.core.config import Settings


@pytest.mark.parametrize("url, expected", [
    ("postgres://u:p@db:5432/app", "postgresql+asyncpg://u:p@db:5432/app"),
    ("postgresql://u:p@db:5432/app", "postgresql+asyncpg://u:p@db:5432/app"),
    ("postgresql+asyncpg://u:p@db:5432/app", "postgresql+asyncpg://u:p@db:5432/app"),
    ("sqlite+aiosqlite:///./test.db", "sqlite+aiosqlite:///./test.db"),
])
def test_database_url_uses_async_driver(url, expected):
    assert Settings(DATABASE_URL=url).get_database_url == expected


def test_upload_limits():
    config = Settings()

    assert config.MAX_IMAGE_SIZE == 10 * 1024 * 1024
    assert config.MAX_DOCUMENT_SIZE == 20 * 1024 * 1024
    assert config.MAX_FILES_PER_UPLOAD == 10
    assert config.ACCESS_TOKEN_EXPIRE_DAYS == 7
