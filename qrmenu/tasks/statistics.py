# qrmenu/tasks/statistics.py
from qrmenu.celery_worker import celery_app
from qrmenu.data.database import SessionLocal
from qrmenu.domain.schemas import StatisticsOut
from qrmenu.services.analytics_service import AnalyticsService
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="qrmenu.tasks.statistics.compute_statistics_task")
def compute_statistics_task(restaurant_id=None, top_n=None, recent_n=None):
    """Raport liczony w workerze; wynik (json) laduje w result backend."""
    logger.info(f"Statistics task started (restaurant={restaurant_id})")

    db = SessionLocal()
    try:
        stats = AnalyticsService(db).get_statistics(restaurant_id, top_n=top_n, recent_n=recent_n)
        return StatisticsOut(**stats).model_dump(mode="json")
    finally:
        db.close()
