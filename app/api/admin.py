from app.db.Connection import database
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.schemas.AnalyticsSummary import AnalyticsSummary
from app.services.Analytics import Analytics

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["analytics"])

@router.get("/analytics", response_model=AnalyticsSummary)
def get_analytics_endpoint(db: Session = Depends(database.get_db)):
    return Analytics.summary(db)
