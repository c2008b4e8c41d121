"""
Pydantic схемы для уведомлений.
"""
from datetime import datetime
from typing import Optional, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


NOTICE_CATEGORIES = (
    "certificate_expiry",
    "travel_reminder",
    "new_circular",
    "signoff_reminder",
    "system_announcement",
    "document_update",
    "crew_message",
    "general",
)
NoticeCategory = Literal[
    "certificate_expiry",
    "travel_reminder",
    "new_circular",
    "signoff_reminder",
    "system_announcement",
    "document_update",
    "crew_message",
    "general",
]

# порядок важен: low < medium < high < urgent
PRIORITIES = ("low", "medium", "high", "urgent")
NoticePriority = Literal["low", "medium", "high", "urgent"]

DateRange = Literal["today", "yesterday", "this_week", "this_month", "all"]


class NoticeSpec(BaseModel):
    """
    Описание уведомления без получателя.
    Если title и message не заданы, уведомление рендерится из шаблона категории
    с подстановкой variables.
    """
    category: NoticeCategory
    title: Optional[str] = None
    message: Optional[str] = None
    variables: dict[str, Any] = Field(default_factory=dict)
    priority: Optional[NoticePriority] = None
    action_url: Optional[str] = None
    action_text: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _title_and_message_together(self):
        if (self.title is None) != (self.message is None):
            raise ValueError("title and message must be given together")
        return self

    @property
    def uses_template(self) -> bool:
        return self.title is None


class NoticeCreate(NoticeSpec):
    """Схема создания уведомления для одного пользователя."""
    user_id: str


class NoticeBulkCreate(NoticeSpec):
    """Схема создания уведомления для списка пользователей."""
    user_ids: list[str] = Field(min_length=1)


class AnnouncementCreate(BaseModel):
    """Схема системного объявления для всех активных пользователей."""
    message: str = Field(min_length=1)
    priority: NoticePriority = "medium"
    ttl_days: Optional[int] = Field(default=None, ge=1, le=365)


class NoticeFilter(BaseModel):
    """Фильтры списка уведомлений."""
    category: Optional[NoticeCategory] = None
    priority: Optional[NoticePriority] = None
    is_read: Optional[bool] = None
    search: Optional[str] = None
    date_range: DateRange = "all"


class NoticeResponse(BaseModel):
    """Схема ответа с данными уведомления."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    category: str
    title: str
    message: str
    priority: str
    action_url: Optional[str] = None
    action_text: Optional[str] = None
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("payload", "metadata")
    )
    is_read: bool = False
    created_at: datetime
    read_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class NoticeListResponse(BaseModel):
    """Схема списка уведомлений."""
    items: list[NoticeResponse]
    total: int
    skip: int = 0
    limit: int = 50


class NoticeGroupResponse(BaseModel):
    """Группа уведомлений по давности."""
    label: str
    notices: list[NoticeResponse]
    count: int


class NoticeStatsResponse(BaseModel):
    """Счётчики по уведомлениям пользователя."""
    total: int
    unread: int
    high_priority: int
    urgent: int
    by_category: dict[str, int]


class NoticeIdsRequest(BaseModel):
    """Список идентификаторов для пакетных операций."""
    ids: list[int]


class NotifyResult(BaseModel):
    """Результат создания уведомления. persisted=False: категория отключена."""
    persisted: bool


class BulkNotifyResult(BaseModel):
    """Результат пакетного создания."""
    requested: int
    persisted: int


class CountResponse(BaseModel):
    """Количество затронутых записей."""
    count: int
