"""
API endpoints для уведомлений.
"""
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, sessionmaker

from crewnotify.core.database import get_db, get_session_factory
from crewnotify.core.exceptions import NotFoundException
from crewnotify.core.security import verify_api_key, get_current_user_id
from crewnotify.schemas.notice import (
    AnnouncementCreate,
    BulkNotifyResult,
    CountResponse,
    DateRange,
    NoticeBulkCreate,
    NoticeCategory,
    NoticeCreate,
    NoticeFilter,
    NoticeGroupResponse,
    NoticeIdsRequest,
    NoticeListResponse,
    NoticePriority,
    NoticeResponse,
    NoticeSpec,
    NoticeStatsResponse,
    NotifyResult,
)
from crewnotify.services.fanout_service import FanoutService
from crewnotify.services.notice_service import NoticeService
from crewnotify.services.retention_service import RetentionService
from crewnotify.services.stats_service import StatsService
from crewnotify.services.user_directory import UserDirectory, get_user_directory

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(verify_api_key)],
)


def get_fanout_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    user_directory: UserDirectory = Depends(get_user_directory),
) -> FanoutService:
    return FanoutService(session_factory, user_directory)


# ---- чтение ----

@router.get("", response_model=NoticeListResponse)
def list_notifications(
    category: Optional[NoticeCategory] = Query(None),
    priority: Optional[NoticePriority] = Query(None),
    is_read: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    date_range: DateRange = Query("all"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Уведомления текущего пользователя, новые первыми."""
    service = NoticeService(db)
    filters = NoticeFilter(
        category=category,
        priority=priority,
        is_read=is_read,
        search=search,
        date_range=date_range,
    )
    items = service.list_notices(user_id, filters, skip=skip, limit=limit)

    return NoticeListResponse(
        items=[NoticeResponse.model_validate(n) for n in items],
        total=service.count(user_id, filters),
        skip=skip,
        limit=limit,
    )


@router.get("/groups", response_model=list[NoticeGroupResponse])
def get_notification_groups(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Уведомления, сгруппированные по давности (Today / Yesterday / This Week / Older)."""
    groups = NoticeService(db).group_by_recency(user_id)
    return [
        NoticeGroupResponse(
            label=g["label"],
            notices=[NoticeResponse.model_validate(n) for n in g["notices"]],
            count=g["count"],
        )
        for g in groups
    ]


@router.get("/stats", response_model=NoticeStatsResponse)
def get_notification_stats(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Счётчики уведомлений текущего пользователя."""
    return NoticeStatsResponse(**StatsService(db).stats(user_id))


@router.get("/unread-count", response_model=CountResponse)
def get_unread_count(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Количество непрочитанных."""
    return CountResponse(count=StatsService(db).unread_count(user_id))


@router.get("/{notice_id}", response_model=NoticeResponse)
def get_notification(
    notice_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Получить уведомление по ID."""
    notice = NoticeService(db).get_by_id(notice_id, user_id=user_id)
    if not notice:
        raise NotFoundException("Notice", notice_id)
    return NoticeResponse.model_validate(notice)


# ---- прочтение ----

@router.post("/read-all", response_model=CountResponse)
def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Отметить все уведомления прочитанными."""
    return CountResponse(count=NoticeService(db).mark_all_read(user_id))


@router.post("/read", response_model=CountResponse)
def mark_many_read(
    data: NoticeIdsRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Отметить прочитанными несколько уведомлений."""
    return CountResponse(count=NoticeService(db).mark_many_read(data.ids, user_id=user_id))


@router.post("/{notice_id}/read", response_model=NoticeResponse)
def mark_read(
    notice_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Отметить уведомление прочитанным (повторная отметка не меняет read_at)."""
    service = NoticeService(db)
    notice = service.get_by_id(notice_id, user_id=user_id)
    if not notice:
        raise NotFoundException("Notice", notice_id)
    service.mark_read(notice_id, user_id=user_id)
    db.refresh(notice)
    return NoticeResponse.model_validate(notice)


# ---- удаление ----

@router.post("/delete", response_model=CountResponse)
def delete_many(
    data: NoticeIdsRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Удалить несколько уведомлений."""
    return CountResponse(count=NoticeService(db).delete_many(data.ids, user_id))


@router.delete("/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notice_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Удалить уведомление."""
    if not NoticeService(db).delete(notice_id, user_id):
        raise NotFoundException("Notice", notice_id)


@router.delete("", response_model=CountResponse)
def clear_all(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Удалить все уведомления текущего пользователя."""
    return CountResponse(count=NoticeService(db).clear_all(user_id))


# ---- создание (для других модулей бэкенда) ----

@router.post("", response_model=NotifyResult)
def create_notification(
    data: NoticeCreate,
    fanout: FanoutService = Depends(get_fanout_service),
):
    """
    Создать уведомление пользователю (из шаблона, если title/message не заданы).
    persisted=False: пользователь отключил эту категорию.
    """
    spec = NoticeSpec(**data.model_dump(exclude={"user_id"}))
    return NotifyResult(persisted=fanout.notify(data.user_id, spec))


@router.post("/bulk", response_model=BulkNotifyResult)
def create_bulk_notifications(
    data: NoticeBulkCreate,
    fanout: FanoutService = Depends(get_fanout_service),
):
    """Создать одно и то же уведомление списку пользователей."""
    spec = NoticeSpec(**data.model_dump(exclude={"user_ids"}))
    persisted = fanout.notify_many(data.user_ids, spec)
    return BulkNotifyResult(requested=len(data.user_ids), persisted=persisted)


@router.post("/announcements", response_model=CountResponse)
def create_announcement(
    data: AnnouncementCreate,
    fanout: FanoutService = Depends(get_fanout_service),
):
    """Системное объявление всем активным пользователям."""
    ttl = timedelta(days=data.ttl_days) if data.ttl_days else None
    persisted = fanout.announce(data.message, priority=data.priority, ttl=ttl)
    return CountResponse(count=persisted)


@router.post("/sweep", response_model=CountResponse)
def sweep_expired(db: Session = Depends(get_db)):
    """Удалить уведомления с истёкшим сроком жизни."""
    return CountResponse(count=RetentionService(db).sweep())
