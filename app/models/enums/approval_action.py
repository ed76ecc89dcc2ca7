# app/models/enums/approval_action.py
import enum


class ApprovalAction(str, enum.Enum):
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"
    revised = "revised"
