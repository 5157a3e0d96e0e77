from ecare.repositories.account_repository import (
    AdminRepository,
    TechnicianRepository,
    UserRepository,
)
from ecare.repositories.complaint_repository import ComplaintFilters, ComplaintRepository
from ecare.repositories.forward_history_repository import ForwardHistoryRepository
from ecare.repositories.notification_repository import NotificationRepository
from ecare.repositories.remark_repository import RemarkRepository

__all__ = [
    "AdminRepository",
    "ComplaintFilters",
    "ComplaintRepository",
    "ForwardHistoryRepository",
    "NotificationRepository",
    "RemarkRepository",
    "TechnicianRepository",
    "UserRepository",
]
