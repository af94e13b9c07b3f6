# invitation_service/routers/summary.py

# =================================================================================
# 📊 SUMMARY + HEALTH
# =================================================================================

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from invitation_service import schemas
from invitation_service.crud import summary_crud
from invitation_service.db import get_db

router = APIRouter(prefix="/api", tags=["summary"])


@router.get("/summary", response_model=schemas.SummaryOut)
def summary(db: Session = Depends(get_db)):
    return summary_crud.get_summary(db)


@router.get("/health")
def health(request: Request):
    if request.app.state.database.ping():
        return {"status": "ok", "database": "ok"}
    return JSONResponse(status_code=503, content={"status": "error", "database": "unreachable"})
