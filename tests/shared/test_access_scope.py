"""Tests for AccessScope and role checks."""

from types import SimpleNamespace

import pytest
from protean.utils.query import Q
from shared.access import (
    DELETE_ROLES,
    TRANSITION_ROLES,
    AccessScope,
    PermissionDenied,
    Requester,
    Role,
    require_role,
)


def _scope(role, user_id="user-1"):
    return AccessScope.for_requester(Requester(user_id, role))


class TestVisibility:
    @pytest.mark.parametrize("role", [Role.ADMIN, Role.SUPERADMIN])
    def test_staff_roles_are_unrestricted(self, role):
        scope = _scope(role)
        assert scope.is_unrestricted
        assert scope.predicate == Q()

    @pytest.mark.parametrize("role", [Role.CUSTOMER, Role.SUPPORT, None])
    def test_other_roles_see_only_their_own(self, role):
        scope = _scope(role)
        assert not scope.is_unrestricted
        assert scope.predicate == Q(customer_id="user-1")

    def test_permits_own_record(self):
        assert _scope(Role.CUSTOMER).permits(SimpleNamespace(customer_id="user-1"))

    def test_rejects_foreign_record(self):
        assert not _scope(Role.SUPPORT).permits(SimpleNamespace(customer_id="user-2"))

    def test_unrestricted_permits_anything(self):
        assert _scope(Role.ADMIN).permits(SimpleNamespace(customer_id="user-2"))

    def test_custom_owner_field(self):
        scope = AccessScope(Requester("user-1", Role.CUSTOMER), owner_field="user_id")
        assert scope.predicate == Q(user_id="user-1")
        assert scope.permits(SimpleNamespace(user_id="user-1"))

    def test_apply_filters_restricted_querysets(self):
        calls = []

        class FakeQuerySet:
            def filter(self, *args, **kwargs):
                calls.append(args)
                return self

        _scope(Role.CUSTOMER).apply(FakeQuerySet())
        assert calls == [(Q(customer_id="user-1"),)]

    def test_apply_leaves_unrestricted_querysets_alone(self):
        queryset = object()
        assert _scope(Role.SUPERADMIN).apply(queryset) is queryset


class TestRequireRole:
    def test_allowed_role_passes(self):
        require_role(Requester("u", Role.ADMIN), TRANSITION_ROLES, "change order status")

    @pytest.mark.parametrize("role", [Role.CUSTOMER, Role.SUPPORT, None])
    def test_transition_denied_below_admin(self, role):
        with pytest.raises(PermissionDenied):
            require_role(Requester("u", role), TRANSITION_ROLES, "change order status")

    def test_admin_cannot_delete(self):
        with pytest.raises(PermissionDenied) as exc:
            require_role(Requester("u", Role.ADMIN), DELETE_ROLES, "delete orders")
        assert "delete orders" in exc.value.message

    def test_superadmin_can_delete(self):
        require_role(Requester("u", Role.SUPERADMIN), DELETE_ROLES, "delete orders")
