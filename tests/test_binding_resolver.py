#!/usr/bin/env python3
"""
Binding Resolver Tests

Subject matching across RoleBindings and ClusterRoleBindings.
"""

import pytest

from rback.libs.core.exceptions import MalformedRecordError
from rback.libs.rbac.binding_resolver import lookup_bindings_and_roles
from rback.libs.rbac.models import BindingAndRole, BindingRecord, NamespacedName

from test_constants import RbackTestConstants as C, RecordFactory


class TestClusterRoleBindings:
    """Test resolution against ClusterRoleBindings"""

    def test_subject_matches_name_and_namespace(self):
        """A subject matches only when name and namespace are both equal"""
        # Arrange
        bindings = [RecordFactory.cluster_role_binding(
            "ci-admin", "admin", [RecordFactory.subject("build-bot", "ci")]
        )]

        # Act
        matches = lookup_bindings_and_roles(bindings, "build-bot", "ci")
        other_namespace = lookup_bindings_and_roles(bindings, "build-bot", "default")

        # Assert
        assert len(matches) == 1
        assert other_namespace == []

    def test_result_identities(self):
        bindings = [RecordFactory.cluster_role_binding(
            "ci-admin", "admin", [RecordFactory.subject("build-bot", "ci")]
        )]

        matches = lookup_bindings_and_roles(bindings, "build-bot", "ci")

        assert matches == [BindingAndRole(
            binding=NamespacedName(namespace="", name="ci-admin"),
            role=NamespacedName(namespace="", name="admin"),
        )]
        assert matches[0].role_kind == "ClusterRole"

    def test_subject_without_namespace_is_not_a_wildcard(self):
        bindings = [RecordFactory.cluster_role_binding(
            "crb", "admin", [{"kind": "User", "name": "build-bot"}]
        )]

        assert lookup_bindings_and_roles(bindings, "build-bot", "ci") == []
        assert len(lookup_bindings_and_roles(bindings, "build-bot", "")) == 1


class TestRoleBindings:
    """Test resolution against RoleBindings"""

    def test_role_reference_inherits_binding_namespace(self):
        """A roleRef of kind Role lives in the binding's namespace"""
        bindings = [RecordFactory.role_binding(
            C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [RecordFactory.subject(C.SERVICE_ACCOUNT, C.NAMESPACE)]
        )]

        matches = lookup_bindings_and_roles(bindings, C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert matches == [BindingAndRole(
            binding=NamespacedName(C.NAMESPACE, C.ROLE_BINDING),
            role=NamespacedName(C.NAMESPACE, C.ROLE),
        )]

    def test_explicit_role_ref_namespace(self):
        bindings = [RecordFactory.role_binding(
            C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [RecordFactory.subject(C.SERVICE_ACCOUNT, C.NAMESPACE)],
            role_kind="", role_namespace=C.NAMESPACE,
        )]

        matches = lookup_bindings_and_roles(bindings, C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert matches[0].role == NamespacedName(C.NAMESPACE, C.ROLE)
        assert matches[0].role_kind is None

    def test_cluster_role_bound_locally_is_cluster_scoped(self):
        bindings = [RecordFactory.role_binding(
            C.ROLE_BINDING, C.NAMESPACE, C.CLUSTER_ROLE,
            [RecordFactory.subject(C.SERVICE_ACCOUNT, C.NAMESPACE)], role_kind="ClusterRole",
        )]

        matches = lookup_bindings_and_roles(bindings, C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert matches[0].binding == NamespacedName(C.NAMESPACE, C.ROLE_BINDING)
        assert matches[0].role.is_cluster_scoped

    def test_results_follow_binding_order(self):
        subject = RecordFactory.subject(C.SERVICE_ACCOUNT, C.NAMESPACE)
        bindings = [
            RecordFactory.role_binding("b-second", C.NAMESPACE, "r2", [subject]),
            RecordFactory.role_binding("a-first", C.NAMESPACE, "r1", [subject]),
        ]

        matches = lookup_bindings_and_roles(bindings, C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert [m.binding.name for m in matches] == ["b-second", "a-first"]

    def test_each_matching_subject_yields_a_result(self):
        subject = RecordFactory.subject(C.SERVICE_ACCOUNT, C.NAMESPACE)
        bindings = [RecordFactory.role_binding(C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [subject, subject])]

        assert len(lookup_bindings_and_roles(bindings, C.SERVICE_ACCOUNT, C.NAMESPACE)) == 2

    def test_binding_without_subjects_contributes_nothing(self):
        binding = RecordFactory.role_binding(C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [])
        del binding["subjects"]

        assert lookup_bindings_and_roles([binding], C.SERVICE_ACCOUNT, C.NAMESPACE) == []

    def test_no_bindings(self):
        assert lookup_bindings_and_roles(None, C.SERVICE_ACCOUNT, C.NAMESPACE) == []
        assert lookup_bindings_and_roles([], C.SERVICE_ACCOUNT, C.NAMESPACE) == []

    def test_accepts_decoded_records(self):
        record = BindingRecord.from_dict(RecordFactory.role_binding(
            C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [RecordFactory.subject(C.SERVICE_ACCOUNT, C.NAMESPACE)]
        ))

        assert len(lookup_bindings_and_roles([record], C.SERVICE_ACCOUNT, C.NAMESPACE)) == 1


class TestMalformedBindings:
    """Test error reporting for malformed binding records"""

    def test_missing_metadata_name(self):
        binding = RecordFactory.role_binding(C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [])
        del binding["metadata"]["name"]

        with pytest.raises(MalformedRecordError) as exc_info:
            lookup_bindings_and_roles([binding], C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert exc_info.value.field == "metadata.name"

    def test_missing_role_ref(self):
        binding = RecordFactory.role_binding(C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [])
        del binding["roleRef"]

        with pytest.raises(MalformedRecordError) as exc_info:
            lookup_bindings_and_roles([binding], C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert exc_info.value.field == "roleRef"

    def test_missing_role_ref_name(self):
        binding = RecordFactory.role_binding(C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [])
        del binding["roleRef"]["name"]

        with pytest.raises(MalformedRecordError):
            lookup_bindings_and_roles([binding], C.SERVICE_ACCOUNT, C.NAMESPACE)

    def test_non_list_subjects(self):
        binding = RecordFactory.role_binding(C.ROLE_BINDING, C.NAMESPACE, C.ROLE, [])
        binding["subjects"] = {"name": C.SERVICE_ACCOUNT}

        with pytest.raises(MalformedRecordError) as exc_info:
            lookup_bindings_and_roles([binding], C.SERVICE_ACCOUNT, C.NAMESPACE)

        assert exc_info.value.field == "subjects"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
