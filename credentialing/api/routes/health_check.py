from fastapi import APIRouter, Request, status
from sqlalchemy import text

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Liveness plus a round trip to the database"""
    async with request.app.state.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return {"status": "ok"}
