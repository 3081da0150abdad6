"""Tests for the role and permission stores and their association tables."""

import unittest
from unittest.mock import patch

from support import DatabaseTestCase

from warden.core.errors import ConflictError, ErrorKind, NotFoundError
from warden.models import Permission, Role, RolePermission, UserRole
from warden.schemas.rbac import PermissionCreate, PermissionUpdate, RoleCreate, RoleUpdate
from warden.services import permissions as permission_store
from warden.services import roles as role_store


class TestRoleCrud(DatabaseTestCase):
    def test_create_and_find_by_name(self) -> None:
        role = role_store.create_role(self.db, RoleCreate(role_name="Auditor", description="reads"))
        found = role_store.find_role_by_name(self.db, "Auditor")
        self.assertEqual(found.id, role.id)
        self.assertIsNone(role_store.find_role_by_name(self.db, "auditor"))

    def test_duplicate_name(self) -> None:
        role_store.create_role(self.db, RoleCreate(role_name="Auditor"))
        with self.assertRaises(ConflictError) as ctx:
            role_store.create_role(self.db, RoleCreate(role_name="Auditor"))
        self.assertEqual(ctx.exception.kind, ErrorKind.DUPLICATE_ROLE_NAME)

    def test_update_keeps_unset_fields(self) -> None:
        role = role_store.create_role(self.db, RoleCreate(role_name="Auditor", description="reads"))
        updated = role_store.update_role(self.db, role.id, RoleUpdate(role_name="Reviewer"))
        self.assertEqual(updated.role_name, "Reviewer")
        self.assertEqual(updated.description, "reads")

    def test_get_unknown_role(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            role_store.get_role_with_permissions(self.db, 7)
        self.assertEqual(ctx.exception.kind, ErrorKind.ROLE_NOT_FOUND)

    def test_list_roles_does_not_load_permissions(self) -> None:
        self.add_role("Auditor", ("report:view",))
        roles = role_store.list_roles(self.db)
        self.assertEqual([r.role_name for r in roles], ["Auditor"])
        self.assertFalse(hasattr(roles[0], "permissions"))

    def test_get_role_with_permissions(self) -> None:
        role = self.add_role("Auditor", ("report:view", "report:export"))
        loaded = role_store.get_role_with_permissions(self.db, role.id)
        self.assertEqual(
            sorted(p.permission_name for p in loaded.permissions),
            ["report:export", "report:view"],
        )


class TestDeleteRole(DatabaseTestCase):
    def test_cascades_both_link_tables(self) -> None:
        self.add_role("RegularUser")
        auditor = self.add_role("Auditor", ("report:view",))
        self.add_user("alice", "pw123", auditor)
        auditor_id = auditor.id

        role_store.delete_role(self.db, auditor_id)

        self.assertEqual(
            self.db.query(RolePermission).filter(RolePermission.role_id == auditor_id).count(), 0
        )
        self.assertEqual(self.db.query(UserRole).filter(UserRole.role_id == auditor_id).count(), 0)
        # The permission itself survives; only the link goes.
        self.assertEqual(self.count(Permission), 1)
        with self.assertRaises(NotFoundError):
            role_store.get_role(self.db, auditor_id)

    def test_unknown_role(self) -> None:
        with self.assertRaises(NotFoundError):
            role_store.delete_role(self.db, 99)


class TestUserRoleLinks(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.add_role("RegularUser")
        self.auditor = self.add_role("Auditor")
        self.user = self.add_user("alice")

    def _links(self) -> int:
        return (
            self.db.query(UserRole)
            .filter(UserRole.user_id == self.user.id, UserRole.role_id == self.auditor.id)
            .count()
        )

    def test_assign_twice_leaves_one_row(self) -> None:
        self.assertTrue(role_store.link_user_role(self.db, self.user.id, self.auditor.id))
        self.assertFalse(role_store.link_user_role(self.db, self.user.id, self.auditor.id))
        self.assertEqual(self._links(), 1)

    def test_roles_for_user(self) -> None:
        role_store.link_user_role(self.db, self.user.id, self.auditor.id)
        names = [r.role_name for r in role_store.roles_for_user(self.db, self.user.id)]
        self.assertEqual(names, ["RegularUser", "Auditor"])

    def test_unlink_absent_pair_is_noop(self) -> None:
        self.assertFalse(role_store.unlink_user_role(self.db, self.user.id, self.auditor.id))
        self.assertEqual(self.count(UserRole), 1)

    def test_unlink_removes_pair(self) -> None:
        role_store.link_user_role(self.db, self.user.id, self.auditor.id)
        self.assertTrue(role_store.unlink_user_role(self.db, self.user.id, self.auditor.id))
        self.assertEqual(self._links(), 0)

    def test_link_unknown_role(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            role_store.link_user_role(self.db, self.user.id, 999)
        self.assertEqual(ctx.exception.kind, ErrorKind.ROLE_NOT_FOUND)

    def test_link_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            role_store.link_user_role(self.db, 999, self.auditor.id)
        self.assertEqual(ctx.exception.kind, ErrorKind.USER_NOT_FOUND)

    def test_concurrent_duplicate_insert_is_absorbed(self) -> None:
        # Another request already wrote the pair between our check and our insert.
        user_id, role_id = self.user.id, self.auditor.id
        self.db.add(UserRole(user_id=user_id, role_id=role_id))
        self.db.commit()
        self.db.expunge_all()

        with patch(
            "warden.services.roles._user_role_exists", side_effect=[False, True]
        ) as exists:
            created = role_store.link_user_role(self.db, user_id, role_id)

        self.assertFalse(created)
        self.assertEqual(exists.call_count, 2)
        self.assertEqual(
            self.db.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .count(),
            1,
        )


class TestRolePermissionLinks(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.role = self.add_role("Auditor")
        self.permission = self.add_permission("report:view")

    def test_link_twice_leaves_one_row(self) -> None:
        self.assertTrue(role_store.link_role_permission(self.db, self.role.id, self.permission.id))
        self.assertFalse(role_store.link_role_permission(self.db, self.role.id, self.permission.id))
        self.assertEqual(self.count(RolePermission), 1)

    def test_unlink_absent_pair_is_noop(self) -> None:
        self.assertFalse(
            role_store.unlink_role_permission(self.db, self.role.id, self.permission.id)
        )
        self.assertEqual(self.count(RolePermission), 0)
        self.assertEqual(self.count(Role), 1)
        self.assertEqual(self.count(Permission), 1)

    def test_permissions_for_role(self) -> None:
        role_store.link_role_permission(self.db, self.role.id, self.permission.id)
        names = [p.permission_name for p in role_store.permissions_for_role(self.db, self.role.id)]
        self.assertEqual(names, ["report:view"])

    def test_link_unknown_permission(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            role_store.link_role_permission(self.db, self.role.id, 404)
        self.assertEqual(ctx.exception.kind, ErrorKind.PERMISSION_NOT_FOUND)


class TestPermissionCrud(DatabaseTestCase):
    def test_create_update_delete(self) -> None:
        permission = permission_store.create_permission(
            self.db, PermissionCreate(permission_name="report:view", description="Read reports")
        )
        updated = permission_store.update_permission(
            self.db, permission.id, PermissionUpdate(description="View reports")
        )
        self.assertEqual(updated.permission_name, "report:view")
        self.assertEqual(updated.description, "View reports")

        permission_id = permission.id
        permission_store.delete_permission(self.db, permission_id)
        with self.assertRaises(NotFoundError) as ctx:
            permission_store.get_permission(self.db, permission_id)
        self.assertEqual(ctx.exception.kind, ErrorKind.PERMISSION_NOT_FOUND)

    def test_duplicate_name(self) -> None:
        self.add_permission("report:view")
        with self.assertRaises(ConflictError) as ctx:
            permission_store.create_permission(
                self.db, PermissionCreate(permission_name="report:view")
            )
        self.assertEqual(ctx.exception.kind, ErrorKind.DUPLICATE_PERMISSION_NAME)

    def test_delete_detaches_from_roles(self) -> None:
        role = self.add_role("Auditor", ("report:view", "report:export"))
        view = permission_store.find_permission_by_name(self.db, "report:view")

        permission_store.delete_permission(self.db, view.id)

        names = [p.permission_name for p in role_store.permissions_for_role(self.db, role.id)]
        self.assertEqual(names, ["report:export"])


if __name__ == "__main__":
    unittest.main()
