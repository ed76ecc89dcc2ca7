# app/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ---------------- USERS / ROLES ----------------
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_EMAIL_EXISTS = "USER_EMAIL_EXISTS"
    USER_ROLE_INVALID = "USER_ROLE_INVALID"
    USER_VERSION_CONFLICT = "USER_VERSION_CONFLICT"
    USER_ALREADY_INACTIVE = "USER_ALREADY_INACTIVE"
    USER_ALREADY_ACTIVE = "USER_ALREADY_ACTIVE"
    CANNOT_DEACTIVATE_SELF = "CANNOT_DEACTIVATE_SELF"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    ROLE_CODE_EXISTS = "ROLE_CODE_EXISTS"
    ROLE_IN_USE = "ROLE_IN_USE"

    # ---------------- MASTER DATA ----------------
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"
    CLIENT_CODE_EXISTS = "CLIENT_CODE_EXISTS"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_NAME_EXISTS = "CATEGORY_NAME_EXISTS"
    CONTAINER_SIZE_NOT_FOUND = "CONTAINER_SIZE_NOT_FOUND"
    CONTAINER_SIZE_EXISTS = "CONTAINER_SIZE_EXISTS"
    TRUCK_SIZE_NOT_FOUND = "TRUCK_SIZE_NOT_FOUND"
    TRUCK_SIZE_EXISTS = "TRUCK_SIZE_EXISTS"
    MASTER_DATA_VERSION_CONFLICT = "MASTER_DATA_VERSION_CONFLICT"

    # ---------------- TRANSACTIONS ----------------
    QUOTATION_NOT_FOUND = "QUOTATION_NOT_FOUND"
    QUOTATION_CANNOT_DELETE = "QUOTATION_CANNOT_DELETE"
    RFP_NOT_FOUND = "RFP_NOT_FOUND"
    RFP_CANNOT_DELETE = "RFP_CANNOT_DELETE"
    TRANSACTION_NOT_EDITABLE = "TRANSACTION_NOT_EDITABLE"

    # ---------------- APPROVALS ----------------
    INVALID_STATE = "INVALID_STATE"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    NO_LINE_ITEMS = "NO_LINE_ITEMS"
    APPROVER_ROLE_REQUIRED = "APPROVER_ROLE_REQUIRED"
    OVERRIDE_NOT_ALLOWED = "OVERRIDE_NOT_ALLOWED"
    APPROVAL_RULE_NOT_FOUND = "APPROVAL_RULE_NOT_FOUND"
