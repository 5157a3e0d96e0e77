from ecare.models.account import ActorRole, Admin, Technician, User, UserStatus
from ecare.models.complaint import Complaint, ComplaintStatus, ComplaintType
from ecare.models.forward_history import ForwardHistory
from ecare.models.notification import Notification, NotificationType
from ecare.models.remark import AdminRemark, RemarkKind, TechnicianRemark

__all__ = [
    "ActorRole",
    "Admin",
    "AdminRemark",
    "Complaint",
    "ComplaintStatus",
    "ComplaintType",
    "ForwardHistory",
    "Notification",
    "NotificationType",
    "RemarkKind",
    "Technician",
    "TechnicianRemark",
    "User",
    "UserStatus",
]
