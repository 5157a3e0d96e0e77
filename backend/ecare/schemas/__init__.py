from ecare.schemas.complaint import (
    ComplaintCreate,
    ComplaintDetailResponse,
    ComplaintForward,
    ComplaintResponse,
    ComplaintStatsResponse,
    ComplaintStatusUpdate,
    ForwardHistoryResponse,
)
from ecare.schemas.notification import (
    NotificationCountResponse,
    NotificationResponse,
    RenderedNotificationResponse,
)
from ecare.schemas.remark import RemarkCreate, RemarkResponse, RemarkResult

__all__ = [
    "ComplaintCreate",
    "ComplaintDetailResponse",
    "ComplaintForward",
    "ComplaintResponse",
    "ComplaintStatsResponse",
    "ComplaintStatusUpdate",
    "ForwardHistoryResponse",
    "NotificationCountResponse",
    "NotificationResponse",
    "RemarkCreate",
    "RemarkResponse",
    "RemarkResult",
    "RenderedNotificationResponse",
]
