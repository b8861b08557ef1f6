from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from datetime import datetime, timezone

from app.db.database import Database, get_database

router = APIRouter()


@router.get("")
async def health_check(db: Database = Depends(get_database)):
    """시스템 헬스체크 엔드포인트"""
    database_ok = await db.ping()
    health_data = {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=health_data)
