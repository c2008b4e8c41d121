"""
Удаление уведомлений с истёкшим сроком жизни.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewnotify.core.utils import to_naive_utc, utcnow
from crewnotify.models.notice import Notice

logger = logging.getLogger(__name__)

SWEEP_BATCH_SIZE = 500


class RetentionService:
    """Очистка истёкших уведомлений."""

    def __init__(self, db: Session, batch_size: int = SWEEP_BATCH_SIZE):
        self.db = db
        self.batch_size = batch_size

    def sweep(self, now: Optional[datetime] = None) -> int:
        """
        Удаляет уведомления с expires_at <= now пачками, фиксируя каждую.
        Ошибка пачки логируется, следующий запуск повторит удаление.
        """
        now = to_naive_utc(now) if now is not None else utcnow()
        deleted = 0
        while True:
            ids = [
                row.id
                for row in self.db.query(Notice.id)
                .filter(Notice.expires_at.is_not(None), Notice.expires_at <= now)
                .order_by(Notice.id)
                .limit(self.batch_size)
                .all()
            ]
            if not ids:
                break
            try:
                count = (
                    self.db.query(Notice)
                    .filter(Notice.id.in_(ids))
                    .delete(synchronize_session=False)
                )
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Sweep batch of {len(ids)} notices failed: {e}")
                break
            deleted += count
            if len(ids) < self.batch_size:
                break

        if deleted:
            logger.info(f"Swept {deleted} expired notices (now={now})")
        return deleted
