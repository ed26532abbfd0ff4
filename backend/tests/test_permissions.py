import pytest

from app.utils.permissions import (
    ALL_ROLES,
    can_edit_content,
    can_publish_content,
    has_permission,
)


@pytest.mark.parametrize(
    "user_role, required_role, expected",
    [
        ("viewer", "viewer", True),
        ("viewer", "editor", False),
        ("editor", "viewer", True),
        ("editor", "editor", True),
        ("editor", "admin", False),
        ("admin", "editor", True),
        ("admin", "super_admin", False),
        ("super_admin", "admin", True),
        ("super_admin", "super_admin", True),
    ],
)
def test_has_permission_follows_role_hierarchy(user_role, required_role, expected):
    assert has_permission(user_role, required_role) is expected


def test_has_permission_rejects_unknown_roles():
    assert has_permission("guest", "viewer") is False
    assert has_permission("super_admin", "owner") is False


EDIT_TABLE = {
    # role: (same department, other department)
    "viewer": (False, False),
    "editor": (True, False),
    "admin": (True, False),
    "super_admin": (True, True),
}

PUBLISH_TABLE = {
    "viewer": (False, False),
    "editor": (False, False),
    "admin": (True, False),
    "super_admin": (True, True),
}


@pytest.mark.parametrize("role", ALL_ROLES)
@pytest.mark.parametrize("same_department", [True, False])
def test_can_edit_content_truth_table(role, same_department):
    content_department = "ems" if same_department else "fire"
    expected = EDIT_TABLE[role][0 if same_department else 1]
    assert can_edit_content(role, "ems", content_department) is expected


@pytest.mark.parametrize("role", ALL_ROLES)
@pytest.mark.parametrize("same_department", [True, False])
def test_can_publish_content_truth_table(role, same_department):
    content_department = "ems" if same_department else "fire"
    expected = PUBLISH_TABLE[role][0 if same_department else 1]
    assert can_publish_content(role, "ems", content_department) is expected


def test_publish_is_stricter_than_edit():
    assert can_edit_content("editor", "ems", "ems") is True
    assert can_publish_content("editor", "ems", "ems") is False
    assert can_edit_content("admin", "ems", "fire") is False
    assert can_edit_content("super_admin", "ems", "fire") is True
