"""Role and department authorization rules shared by routers and services."""

from app.models.user import User


VIEWER = "viewer"
EDITOR = "editor"
ADMIN = "admin"
SUPER_ADMIN = "super_admin"

ROLE_HIERARCHY = {
    VIEWER: 0,
    EDITOR: 1,
    ADMIN: 2,
    SUPER_ADMIN: 3,
}
ALL_ROLES = tuple(ROLE_HIERARCHY)

DEPARTMENTS = ("ems", "police", "doj", "fire", "government")


def has_permission(user_role: str, required_role: str) -> bool:
    # Unknown roles rank below viewer; unknown requirements cannot be met.
    if required_role not in ROLE_HIERARCHY:
        return False
    return ROLE_HIERARCHY.get(user_role, -1) >= ROLE_HIERARCHY[required_role]


def can_edit_content(user_role: str, user_department: str, content_department: str) -> bool:
    if user_role == SUPER_ADMIN:
        return True
    if user_role in (ADMIN, EDITOR) and user_department == content_department:
        return True
    return False


def can_publish_content(user_role: str, user_department: str, content_department: str) -> bool:
    if user_role == SUPER_ADMIN:
        return True
    if user_role == ADMIN and user_department == content_department:
        return True
    return False


def is_super_admin(user: User) -> bool:
    return user.role == SUPER_ADMIN


def can_view_department(user: User, department_slug: str) -> bool:
    return is_super_admin(user) or user.department == department_slug


def can_manage_user(actor: User, target: User) -> bool:
    if is_super_admin(actor):
        return True
    if actor.role != ADMIN or actor.department != target.department:
        return False
    # Department admins cannot touch peers or super admins.
    return ROLE_HIERARCHY.get(target.role, -1) < ROLE_HIERARCHY[ADMIN]
