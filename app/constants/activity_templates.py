from app.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_role} ({actor_email}) logged in",

    ActivityCode.LOGOUT:
        "{actor_role} ({actor_email}) logged out",

    # ---------------- USERS / ROLES ----------------
    ActivityCode.CREATE_USER:
        "{actor_role} ({actor_email}) created user {target_email} with role {target_role}",

    ActivityCode.UPDATE_USER:
        "{actor_role} ({actor_email}) updated user {target_email}: {changes}",

    ActivityCode.DEACTIVATE_USER:
        "{actor_role} ({actor_email}) deactivated user {target_email}",

    ActivityCode.REACTIVATE_USER:
        "{actor_role} ({actor_email}) reactivated user {target_email}",

    ActivityCode.CREATE_ROLE:
        "{actor_role} ({actor_email}) created role {target_name}",

    ActivityCode.UPDATE_ROLE:
        "{actor_role} ({actor_email}) updated role {target_name}: {changes}",

    ActivityCode.DELETE_ROLE:
        "{actor_role} ({actor_email}) deleted role {target_name}",

    ActivityCode.UPDATE_ROLE_PERMISSIONS:
        "{actor_role} ({actor_email}) replaced permissions of role {target_name} ({count} grants)",

    # ---------------- MASTER DATA ----------------
    ActivityCode.CREATE_MASTER_DATA:
        "{actor_role} ({actor_email}) created {entity} {target_name}",

    ActivityCode.UPDATE_MASTER_DATA:
        "{actor_role} ({actor_email}) updated {entity} {target_name}: {changes}",

    ActivityCode.DEACTIVATE_MASTER_DATA:
        "{actor_role} ({actor_email}) deactivated {entity} {target_name}",

    # ---------------- TRANSACTIONS ----------------
    ActivityCode.CREATE_TRANSACTION:
        "{actor_role} ({actor_email}) created {entity} {target_name}",

    ActivityCode.UPDATE_TRANSACTION:
        "{actor_role} ({actor_email}) updated {entity} {target_name}: {changes}",

    ActivityCode.DELETE_TRANSACTION:
        "{actor_role} ({actor_email}) deleted {entity} {target_name}",

    ActivityCode.RESTORE_TRANSACTION:
        "{actor_role} ({actor_email}) restored {entity} {target_name}",

    # ---------------- APPROVALS ----------------
    ActivityCode.SUBMIT_TRANSACTION:
        "{actor_role} ({actor_email}) submitted {entity} {target_name} for approval",

    ActivityCode.APPROVE_TRANSACTION:
        "{actor_role} ({actor_email}) approved {entity} {target_name}",

    ActivityCode.REJECT_TRANSACTION:
        "{actor_role} ({actor_email}) rejected {entity} {target_name}",

    ActivityCode.CANCEL_TRANSACTION:
        "{actor_role} ({actor_email}) withdrew {entity} {target_name} from approval",

    ActivityCode.REVISE_TRANSACTION:
        "{actor_role} ({actor_email}) reopened {entity} {target_name} for revision",

    ActivityCode.OVERRIDE_TRANSACTION:
        "{actor_role} ({actor_email}) overrode {entity} {target_name}: {previous_status} → {new_status}",

    # ---------------- APPROVAL MATRIX ----------------
    ActivityCode.CREATE_APPROVAL_RULE:
        "{actor_role} ({actor_email}) created approval rule {target_name} with {levels} level(s)",

    ActivityCode.UPDATE_APPROVAL_RULE:
        "{actor_role} ({actor_email}) updated approval rule {target_name}",

    ActivityCode.DELETE_APPROVAL_RULE:
        "{actor_role} ({actor_email}) deleted approval rule {target_name}",
}
