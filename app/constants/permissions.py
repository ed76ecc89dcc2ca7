# app/constants/permissions.py

# module -> actions that can be granted on it
PERMISSION_CATALOG = {
    "quotations": ["view", "create", "edit", "delete", "submit"],
    "rfp": ["view", "create", "edit", "delete", "submit"],
    "approvals": ["view", "approve", "reject"],
    "approval_matrix": ["view", "manage"],
    "master_data": ["view", "create", "edit", "delete"],
    "users": ["view", "create", "edit", "delete"],
    "roles": ["view", "create", "edit", "delete"],
}

ADMIN_ROLE = "admin"

DEFAULT_ROLES = [
    # (role_code, role_name, description)
    ("admin", "System Administrator", "Full system access"),
    ("manager", "Department Manager", "Department-level management access"),
    ("supervisor", "Supervisor", "Supervisory access with limited approval rights"),
    ("operator", "Operator", "Operational access for daily tasks"),
    ("viewer", "Viewer", "Read-only access"),
]

_DOCUMENT_WORK = ["view", "create", "edit", "submit"]

# Seeded by init_database. The approval modules are granted by their own
# migrations (APPROVAL_PERMISSIONS, APPROVAL_MATRIX_PERMISSIONS).
_MIGRATED_MODULES = {"approvals", "approval_matrix"}

BASE_ROLE_PERMISSIONS = {
    "admin": {
        module: list(actions)
        for module, actions in PERMISSION_CATALOG.items()
        if module not in _MIGRATED_MODULES
    },
    "manager": {
        "quotations": list(PERMISSION_CATALOG["quotations"]),
        "rfp": list(PERMISSION_CATALOG["rfp"]),
        "master_data": list(PERMISSION_CATALOG["master_data"]),
        "users": ["view"],
    },
    "supervisor": {
        "quotations": _DOCUMENT_WORK,
        "rfp": _DOCUMENT_WORK,
        "master_data": ["view"],
    },
    "operator": {
        "quotations": _DOCUMENT_WORK,
        "rfp": _DOCUMENT_WORK,
        "master_data": ["view"],
    },
    "viewer": {
        "quotations": ["view"],
        "rfp": ["view"],
        "master_data": ["view"],
    },
}

# Seeded by add_approval_history
APPROVAL_PERMISSIONS = [
    ("admin", "approvals", "view"),
    ("admin", "approvals", "approve"),
    ("admin", "approvals", "reject"),
    ("manager", "approvals", "view"),
    ("manager", "approvals", "approve"),
    ("manager", "approvals", "reject"),
    ("supervisor", "approvals", "view"),
    ("viewer", "approvals", "view"),
]

# Seeded by add_approval_matrix
APPROVAL_MATRIX_PERMISSIONS = [
    ("admin", "approval_matrix", "view"),
    ("admin", "approval_matrix", "manage"),
    ("manager", "approval_matrix", "view"),
    ("manager", "approval_matrix", "manage"),
    ("supervisor", "approval_matrix", "view"),
    ("operator", "approval_matrix", "view"),
    ("viewer", "approval_matrix", "view"),
]


def flatten_grants(grants: dict[str, dict[str, list[str]]]) -> list[tuple[str, str, str]]:
    return [
        (role_code, module, action)
        for role_code, modules in grants.items()
        for module, actions in modules.items()
        for action in actions
    ]


def is_known_permission(module: str, action: str) -> bool:
    return action in PERMISSION_CATALOG.get(module, [])
