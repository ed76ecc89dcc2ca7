# app/constants/activity_codes.py

from enum import Enum


class ActivityCode(str, Enum):
    # ---------------- AUTH ----------------
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"

    # ---------------- USERS / ROLES ----------------
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DEACTIVATE_USER = "DEACTIVATE_USER"
    REACTIVATE_USER = "REACTIVATE_USER"
    CREATE_ROLE = "CREATE_ROLE"
    UPDATE_ROLE = "UPDATE_ROLE"
    DELETE_ROLE = "DELETE_ROLE"
    UPDATE_ROLE_PERMISSIONS = "UPDATE_ROLE_PERMISSIONS"

    # ---------------- MASTER DATA ----------------
    CREATE_MASTER_DATA = "CREATE_MASTER_DATA"
    UPDATE_MASTER_DATA = "UPDATE_MASTER_DATA"
    DEACTIVATE_MASTER_DATA = "DEACTIVATE_MASTER_DATA"

    # ---------------- TRANSACTIONS ----------------
    CREATE_TRANSACTION = "CREATE_TRANSACTION"
    UPDATE_TRANSACTION = "UPDATE_TRANSACTION"
    DELETE_TRANSACTION = "DELETE_TRANSACTION"
    RESTORE_TRANSACTION = "RESTORE_TRANSACTION"

    # ---------------- APPROVALS ----------------
    SUBMIT_TRANSACTION = "SUBMIT_TRANSACTION"
    APPROVE_TRANSACTION = "APPROVE_TRANSACTION"
    REJECT_TRANSACTION = "REJECT_TRANSACTION"
    CANCEL_TRANSACTION = "CANCEL_TRANSACTION"
    REVISE_TRANSACTION = "REVISE_TRANSACTION"
    OVERRIDE_TRANSACTION = "OVERRIDE_TRANSACTION"

    # ---------------- APPROVAL MATRIX ----------------
    CREATE_APPROVAL_RULE = "CREATE_APPROVAL_RULE"
    UPDATE_APPROVAL_RULE = "UPDATE_APPROVAL_RULE"
    DELETE_APPROVAL_RULE = "DELETE_APPROVAL_RULE"
