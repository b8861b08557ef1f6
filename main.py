# uvicorn 실행 진입점 (Railway 등 PORT 환경변수를 주는 플랫폼 포함)
import os
import logging

import uvicorn

from app.core.config import settings
from app.main import app

log_level = "debug" if settings.DEBUG else "info"

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    host = os.environ.get("HOST", "0.0.0.0")
    logging.getLogger("app").info(f"Starting Sharing Love API on {host}:{port}")

    uvicorn.run(app, host=host, port=port, log_level=log_level)
