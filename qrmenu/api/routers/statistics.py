from typing import Optional

from celery.result import AsyncResult
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from qrmenu.api.dependencies import http_error
from qrmenu.celery_worker import celery_app
from qrmenu.data.database import get_db
from qrmenu.domain.errors import OrderingError
from qrmenu.domain.schemas import StatisticsJobOut, StatisticsOut
from qrmenu.services.analytics_service import AnalyticsService
from qrmenu.tasks.statistics import compute_statistics_task

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("", response_model=StatisticsOut)
def get_statistics(
    restaurant_id: Optional[int] = Query(None, gt=0),
    top_n: Optional[int] = Query(None, gt=0, le=100),
    recent_n: Optional[int] = Query(None, gt=0, le=100),
    db: Session = Depends(get_db),
):
    try:
        return AnalyticsService(db).get_statistics(restaurant_id, top_n=top_n, recent_n=recent_n)
    except OrderingError as e:
        raise http_error(e)


@router.post("/jobs", response_model=StatisticsJobOut, status_code=202)
def enqueue_statistics(
    restaurant_id: Optional[int] = Query(None, gt=0),
    top_n: Optional[int] = Query(None, gt=0, le=100),
    recent_n: Optional[int] = Query(None, gt=0, le=100),
):
    """Liczy statystyki w workerze Celery (duze zbiory danych)."""
    task = compute_statistics_task.delay(restaurant_id, top_n, recent_n)
    return {"task_id": task.id, "state": task.state}


@router.get("/jobs/{task_id}", response_model=StatisticsJobOut)
def get_statistics_job(task_id: str):
    res = AsyncResult(task_id, app=celery_app)
    result = res.result if res.successful() else None
    return {"task_id": task_id, "state": res.state, "result": result}
