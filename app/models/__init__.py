# Users and auth
from app.models.users.user_models import User, RefreshToken
from app.models.users.role_models import Role, RolePermission
from app.models.support.activity_models import UserActivity

# Masters
from app.models.masters.client_models import Client
from app.models.masters.category_models import Category
from app.models.masters.equipment_size_models import ContainerSize, TruckSize

# Transactions
from app.models.transactions.quotation_models import Quotation, QuotationItem
from app.models.transactions.rfp_models import RequestForPayment, RfpParticular

# Approvals
from app.models.approvals.approval_history_models import ApprovalHistory
from app.models.approvals.approval_matrix_models import ApprovalRule, ApprovalLevel
