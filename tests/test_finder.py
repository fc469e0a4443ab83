"""
Tests for PolicyFinder.

Tests cover:
- Policy and scope name derivation for every subject kind
- Lenient and strict policy lookups
- Lenient and strict scope lookups
- policy_class overrides
"""

from __future__ import annotations

import pytest

from gatekeep import (
    ConfigurationError,
    NotDefinedError,
    Policy,
    PolicyFinder,
    PolicyRegistry,
    ResolverConfig,
    Scope,
)
from tests.conftest import Collection, Post, PostPolicy


class Admin:
    class PostPolicy(Policy):
        def show(self) -> bool:
            return self.user.admin

        class Scope(Scope):
            def resolve(self):
                return list(self.scope)


class Comment:
    pass


class ArchivedPolicy(Policy):
    def show(self) -> bool:
        return False


class ArchivedPost:
    policy_class = ArchivedPolicy


class LegacyPost:
    policy_class = "Legacy.PostPolicy"


class DashboardPolicy(Policy):
    def show(self) -> bool:
        return True


class TestPolicyNames:
    """Tests for policy_name and scope_name."""

    def test_instance(self, own_post: Post):
        assert PolicyFinder(own_post).policy_name == "PostPolicy"

    def test_class(self):
        assert PolicyFinder(Post).policy_name == "PostPolicy"

    def test_nested_class_keeps_namespace(self):
        assert PolicyFinder(Admin.PostPolicy).policy_name == "Admin.PostPolicyPolicy"

    def test_sequence_uses_namespace(self, own_post: Post):
        assert PolicyFinder([Admin, own_post]).policy_name == "Admin.PostPolicy"

    def test_sequence_with_symbol_namespace(self, own_post: Post):
        assert PolicyFinder(["admin", own_post]).policy_name == "Admin.PostPolicy"

    def test_symbol(self):
        assert PolicyFinder("dashboard").policy_name == "DashboardPolicy"

    def test_none(self):
        assert PolicyFinder(None).policy_name == "NonePolicy"

    def test_empty_string_has_no_name(self):
        finder = PolicyFinder("")
        assert finder.policy_name is None
        assert finder.scope_name is None

    @pytest.mark.parametrize(
        "subject",
        [Post, "dashboard", None, ["admin", Post], ("admin", "reports", Comment)],
    )
    def test_scope_name_nests_under_policy_name(self, subject):
        finder = PolicyFinder(subject)
        assert finder.scope_name == f"{finder.policy_name}.Scope"

    def test_collection_is_named_after_its_policy_model(self, posts: Collection):
        finder = PolicyFinder(posts)
        assert finder.policy_name == "PostPolicy"
        assert finder.scope_name == "PostPolicy.Scope"

    def test_model_attribute_alone_keeps_runtime_type(self):
        class Sedan:
            pass

        class Widget:
            model = Sedan

        assert PolicyFinder(Widget()).policy_name == "WidgetPolicy"

    def test_instance_and_class_agree(self, own_post: Post):
        assert PolicyFinder(own_post).policy_name == PolicyFinder(Post).policy_name

    def test_names_are_deterministic(self, own_post: Post):
        first = PolicyFinder(own_post)
        second = PolicyFinder(own_post)
        assert first.policy_name == second.policy_name
        assert first.scope_name == second.scope_name

    def test_custom_config(self, own_post: Post):
        config = ResolverConfig(policy_suffix="Permissions", scope_attribute="Visible")
        finder = PolicyFinder(own_post, config=config)
        assert finder.policy_name == "PostPermissions"
        assert finder.scope_name == "PostPermissions.Visible"

    def test_custom_separator(self, own_post: Post):
        finder = PolicyFinder(["admin", own_post], config=ResolverConfig(separator="::"))
        assert finder.policy_name == "Admin::PostPolicy"
        assert finder.scope_name == "Admin::PostPolicy::Scope"


class TestPolicyLookup:
    """Tests for policy() and policy_or_raise()."""

    def test_finds_registered_policy(self, post_registry: PolicyRegistry, own_post: Post):
        assert PolicyFinder(own_post, post_registry).policy() is PostPolicy

    def test_finds_policy_for_class(self, post_registry: PolicyRegistry):
        assert PolicyFinder(Post, post_registry).policy() is PostPolicy

    def test_missing_policy_returns_none(self, post_registry: PolicyRegistry):
        assert PolicyFinder(Comment(), post_registry).policy() is None

    def test_strict_missing_policy_raises(self, post_registry: PolicyRegistry):
        comment = Comment()
        with pytest.raises(NotDefinedError) as exc_info:
            PolicyFinder(comment, post_registry).policy_or_raise()

        assert exc_info.value.record is comment
        assert exc_info.value.policy_name == "CommentPolicy"
        assert "CommentPolicy" in str(exc_info.value)

    def test_namespaced_policy(self, policy_registry: PolicyRegistry, own_post: Post):
        policy_registry.register_by_convention(Admin.PostPolicy)
        finder = PolicyFinder([Admin, own_post], policy_registry)
        assert finder.policy() is Admin.PostPolicy

    def test_namespaced_policy_through_namespace_holder(
        self, policy_registry: PolicyRegistry, own_post: Post
    ):
        policy_registry.register("Admin", Admin)
        finder = PolicyFinder([Admin, own_post], policy_registry)
        assert finder.policy() is Admin.PostPolicy

    def test_namespace_does_not_fall_back_to_global_policy(
        self, post_registry: PolicyRegistry, own_post: Post
    ):
        assert PolicyFinder(["admin", own_post], post_registry).policy() is None

    def test_symbol_policy(self, policy_registry: PolicyRegistry):
        policy_registry.register_by_convention(DashboardPolicy)
        assert PolicyFinder("dashboard", policy_registry).policy() is DashboardPolicy

    def test_uses_global_registry_by_default(self, own_post: Post):
        from gatekeep import get_global_registry

        get_global_registry().register_by_convention(PostPolicy)
        assert PolicyFinder(own_post).policy() is PostPolicy


class TestScopeLookup:
    """Tests for scope() and scope_or_raise()."""

    def test_finds_nested_scope(self, post_registry: PolicyRegistry, posts: Collection):
        assert PolicyFinder(Post, post_registry).scope() is PostPolicy.Scope
        assert PolicyFinder(posts, post_registry).scope() is PostPolicy.Scope

    def test_finds_scope_for_instance_list_element(self, post_registry: PolicyRegistry, own_post):
        assert PolicyFinder([own_post], post_registry).scope() is PostPolicy.Scope

    def test_explicitly_registered_scope(self, policy_registry: PolicyRegistry):
        class StandaloneScope(Scope):
            pass

        policy_registry.register("CommentPolicy.Scope", StandaloneScope)
        assert PolicyFinder(Comment, policy_registry).scope() is StandaloneScope

    def test_policy_without_scope_returns_none(self, policy_registry: PolicyRegistry):
        policy_registry.register_by_convention(DashboardPolicy)
        assert PolicyFinder("dashboard", policy_registry).scope() is None

    def test_missing_scope_returns_none(self, post_registry: PolicyRegistry):
        assert PolicyFinder(Comment, post_registry).scope() is None

    def test_strict_missing_scope_raises(self, post_registry: PolicyRegistry):
        with pytest.raises(NotDefinedError) as exc_info:
            PolicyFinder(Comment, post_registry).scope_or_raise()

        assert exc_info.value.policy_name == "CommentPolicy.Scope"
        assert exc_info.value.record is Comment

    def test_namespaced_scope(self, policy_registry: PolicyRegistry, own_post: Post):
        policy_registry.register_by_convention(Admin.PostPolicy)
        finder = PolicyFinder(["admin", Post], policy_registry)
        assert finder.scope_or_raise() is Admin.PostPolicy.Scope


class TestPolicyClassOverride:
    """Tests for subjects that declare their own policy_class."""

    def test_class_override_on_instance(self, policy_registry: PolicyRegistry):
        finder = PolicyFinder(ArchivedPost(), policy_registry)
        assert finder.policy() is ArchivedPolicy
        assert finder.policy_name == "ArchivedPolicy"

    def test_class_override_on_class(self, policy_registry: PolicyRegistry):
        assert PolicyFinder(ArchivedPost, policy_registry).policy() is ArchivedPolicy

    def test_class_override_without_scope(self, policy_registry: PolicyRegistry):
        assert PolicyFinder(ArchivedPost(), policy_registry).scope() is None

    def test_string_override_is_looked_up(self, policy_registry: PolicyRegistry):
        finder = PolicyFinder(LegacyPost(), policy_registry)
        assert finder.policy_name == "Legacy.PostPolicy"
        assert finder.policy() is None

        policy_registry.register("Legacy.PostPolicy", PostPolicy)
        assert finder.policy() is PostPolicy
        assert finder.scope() is PostPolicy.Scope

    def test_string_override_keeps_sequence_namespace(self, policy_registry: PolicyRegistry):
        finder = PolicyFinder([Admin, LegacyPost()], policy_registry)
        assert finder.policy_name == "Admin.Legacy.PostPolicy"
        assert finder.scope_name == "Admin.Legacy.PostPolicy.Scope"

    def test_string_override_resolves_under_namespace(self, policy_registry: PolicyRegistry):
        class RenamedPost:
            policy_class = "PostPolicy"

        policy_registry.register_by_convention(Admin.PostPolicy)
        finder = PolicyFinder([Admin, RenamedPost()], policy_registry)
        assert finder.policy_name == "Admin.PostPolicy"
        assert finder.policy() is Admin.PostPolicy

    def test_class_override_inside_sequence_is_used_directly(self, policy_registry):
        finder = PolicyFinder(["admin", ArchivedPost()], policy_registry)
        assert finder.policy() is ArchivedPolicy
        assert finder.policy_name == "ArchivedPolicy"

    def test_classmethod_override_is_called(self, policy_registry: PolicyRegistry):
        class ReviewedPost:
            @classmethod
            def policy_class(cls):
                return ArchivedPolicy

        assert PolicyFinder(ReviewedPost(), policy_registry).policy() is ArchivedPolicy
        assert PolicyFinder(ReviewedPost, policy_registry).policy() is ArchivedPolicy

    def test_classmethod_override_returning_name(self, policy_registry: PolicyRegistry):
        class ReviewedPost:
            @classmethod
            def policy_class(cls):
                return "DashboardPolicy"

        policy_registry.register_by_convention(DashboardPolicy)
        finder = PolicyFinder(ReviewedPost(), policy_registry)
        assert finder.policy_name == "DashboardPolicy"
        assert finder.policy() is DashboardPolicy

    def test_invalid_override_is_rejected(self, policy_registry: PolicyRegistry):
        class MisconfiguredPost:
            policy_class = 42

        with pytest.raises(ConfigurationError) as exc_info:
            PolicyFinder(MisconfiguredPost(), policy_registry).policy()

        assert exc_info.value.config_key == "policy_class"
