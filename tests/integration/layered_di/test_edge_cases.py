"""Integration tests for edge cases."""

import pytest

from layered_di import (
    Blueprint,
    CircularDependencyError,
    ContainerDisposedError,
    DIContainer,
    LifetimeError,
    MalformedDependencyKeyError,
)


class TestCycleDetectionPerContainer:
    """Cycle detection uses one resolution stack per container."""

    def test_cycle_detected_in_child(self):
        """A cycle among child registrations is reported by the child."""
        root = DIContainer()
        child = root.create_child_container()
        child.register("a", lambda b: b, ["b"])
        child.register("b", lambda a: a, ["a"])

        with pytest.raises(CircularDependencyError):
            child.resolve("a")

        assert child._resolution_context.stack == []
        assert root._resolution_context.stack == []

    def test_cycle_through_parent_singletons(self):
        """A cycle among inherited singletons is detected in the owning container."""
        root = DIContainer()
        root.register("a", lambda b: b, ["b"])
        root.register("b", lambda a: a, ["a"])
        child = root.create_child_container()

        with pytest.raises(CircularDependencyError):
            child.resolve("a")

    def test_same_name_at_two_levels_is_not_a_cycle(self):
        """A child override depending on the parent's registration of another name works."""
        root = DIContainer()
        root.register_instance("base", "root-base")
        child = root.create_child_container()
        child.register("service", lambda base: f"service({base})", ["base"])

        assert child.resolve("service") == "service(root-base)"


class TestLifecycleHandleEdgeCases:
    """Edge cases of lifetime changes."""

    def test_stale_handle_after_re_registration(self):
        """A handle for a replaced registration cannot change the new one."""
        container = DIContainer()
        handle = container.register("service", object)
        container.register("service", dict)

        with pytest.raises(LifetimeError):
            handle.singleton_per_container()

    def test_handle_reads_cache_without_building(self):
        """The cached instance is only available after a resolve."""
        container = DIContainer()
        handle = container.register("service", object)

        assert handle.get_cached_instance() is None
        instance = container.resolve("service")
        assert handle.get_cached_instance() is instance

    def test_lifetime_change_after_children_created(self):
        """Children see lifetime changes made to the parent's registration."""
        root = DIContainer()
        handle = root.register("service", object)
        child = root.create_child_container()

        handle.singleton_per_container()

        assert child.resolve("service") is not root.resolve("service")


class TestDisposedContainers:
    """Operations on disposed containers."""

    @pytest.mark.parametrize(
        "operation",
        [
            lambda c: c.register("x", object),
            lambda c: c.register_instance("x", 1),
            lambda c: c.resolve("x"),
            lambda c: c.add_resolver("kind", object()),
            lambda c: c.create_child_container(),
        ],
    )
    def test_operations_raise_after_dispose(self, operation):
        """Every mutating or resolving operation fails after dispose."""
        container = DIContainer()
        container.dispose()

        with pytest.raises(ContainerDisposedError):
            operation(container)

    def test_child_of_disposed_parent_is_disposed(self):
        """Children cannot be used once their parent is disposed."""
        root = DIContainer()
        child = root.create_child_container()
        child.register("x", object)
        root.dispose()

        with pytest.raises(ContainerDisposedError):
            child.resolve("x")

    def test_dispose_never_raises_on_failing_instance(self):
        """A failing dispose of an instance does not escape container disposal."""

        class Broken:
            def dispose(self):
                raise RuntimeError("boom")

        container = DIContainer()
        container.register("broken", Broken)
        container.resolve("broken")
        child = container.create_child_container()

        container.dispose()

        assert container.is_disposed
        assert child.is_disposed


class TestRecipeShapes:
    """Unusual recipes and keys."""

    def test_blueprint_template_with_dispose(self):
        """Instances derived from a template are disposed individually."""

        class Template:
            disposed = 0

            def init(self):
                self.disposed = 0

            def dispose(self):
                self.disposed += 1

        root = DIContainer()
        template = Template()
        root.register("session", Blueprint(template=template)).singleton_per_container()
        child = root.create_child_container()
        session = child.resolve("session")

        child.dispose()

        assert session.disposed == 1
        assert template.disposed == 0

    def test_malformed_key_in_nested_dependency(self):
        """The error names the registration that declared the bad key."""
        container = DIContainer()
        container.register("inner", lambda value: value, [3.14])
        container.register("outer", lambda inner: inner, ["inner"])

        with pytest.raises(MalformedDependencyKeyError) as exc_info:
            container.resolve("outer")

        assert exc_info.value.name == "inner"
        assert exc_info.value.index == 0

    def test_recipe_returning_registered_instance(self):
        """A recipe may hand back an external instance unchanged."""
        container = DIContainer()
        shared = object()
        container.register_instance("shared", shared)
        container.register("alias", lambda value: value, ["shared"])

        assert container.resolve("alias") is shared
