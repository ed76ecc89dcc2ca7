# app/routers/__init__.py

from .auth.auth_router import router as auth_router
from .auth.activity_router import router as activity_router

from .users.user_router import router as user_router
from .users.role_router import router as role_router

from .masters.client_router import router as client_router
from .masters.category_router import router as category_router
from .masters.equipment_size_router import container_router, truck_router

from .transactions.quotation_router import router as quotation_router
from .transactions.rfp_router import router as rfp_router

from .approvals.approval_router import router as approval_router
from .approvals.approval_matrix_router import router as approval_matrix_router


__all__ = [
    "auth_router",
    "activity_router",

    "user_router",
    "role_router",

    "client_router",
    "category_router",
    "container_router",
    "truck_router",

    "quotation_router",
    "rfp_router",

    "approval_router",
    "approval_matrix_router",
]
