"""Integration tests for end-to-end resolution scenarios."""

import pytest

from layered_di import (
    CircularDependencyError,
    ContainerDisposedError,
    DependencyKey,
    DIContainer,
    UnknownDependencyError,
)


class Logger:
    def __init__(self):
        self.messages = []

    def info(self, message):
        self.messages.append(message)


class Service:
    def __init__(self, logger):
        self.logger = logger


class TestApplicationGraph:
    """Test resolving a realistic object graph."""

    def test_service_receives_external_logger(self):
        """A singleton service depending on an external logger."""
        container = DIContainer()
        logger = Logger()
        container.register_instance("logger", logger)
        container.register("service", lambda logger: {"logger": logger}, ["logger"])

        assert container.resolve("service")["logger"] is logger

    def test_child_shares_root_singleton_service(self):
        """A child container returns the same singleton service as the root."""
        container = DIContainer()
        container.register_instance("logger", Logger())
        container.register("service", Service, ["logger"])
        child = container.create_child_container()

        assert child.resolve("service") is container.resolve("service")

    def test_child_resolving_first_still_shares_with_root(self):
        """The singleton is cached at the root even when a child builds it first."""
        container = DIContainer()
        container.register_instance("logger", Logger())
        container.register("service", Service, ["logger"])
        child = container.create_child_container()

        from_child = child.resolve("service")

        assert container.resolve("service") is from_child

    def test_multi_level_graph(self):
        """Dependencies of dependencies are resolved and shared."""

        class Config:
            pass

        class Database:
            def __init__(self, config):
                self.config = config

        class Repository:
            def __init__(self, database, logger):
                self.database = database
                self.logger = logger

        class UserService:
            def __init__(self, repository, logger):
                self.repository = repository
                self.logger = logger

        container = DIContainer()
        container.register_instance("logger", Logger())
        container.register("config", Config)
        container.register("database", Database, ["config"])
        container.register("repository", Repository, ["database", "logger"])
        container.register("user_service", UserService, ["repository", "logger"])

        service = container.resolve("user_service")

        assert service.repository.database.config is container.resolve("config")
        assert service.logger is service.repository.logger


class TestDeferredDependencies:
    """Test deferred dependencies through autoFactory."""

    def test_auto_factory_returns_current_logger(self):
        """The autoFactory argument resolves the logger when invoked."""
        container = DIContainer()
        logger = Logger()
        container.register_instance("logger", logger)
        container.register("worker", lambda get_logger: get_logger, [{"kind": "autoFactory", "name": "logger"}])

        get_logger = container.resolve("worker")

        assert get_logger() is logger

    def test_auto_factory_breaks_construction_cycle(self):
        """Two registrations can reference each other through a deferred key."""

        class Parent:
            def __init__(self, child):
                self.child = child

        class Child:
            def __init__(self, get_parent):
                self.get_parent = get_parent

        container = DIContainer()
        container.register("parent", Parent, ["child"])
        container.register("child", Child, [DependencyKey.for_auto_factory("parent")])

        parent = container.resolve("parent")

        assert parent.child.get_parent() is parent

    def test_auto_factory_can_target_unregistered_name_until_called(self):
        """Nothing is resolved until the deferred callable runs."""
        container = DIContainer()
        container.register("worker", lambda get_logger: get_logger, [DependencyKey.for_auto_factory("logger")])

        get_logger = container.resolve("worker")

        with pytest.raises(UnknownDependencyError):
            get_logger()

        container.register_instance("logger", "late")
        assert get_logger() == "late"

    def test_factory_key_builds_value_from_container(self):
        """A factory key computes its value from the container."""
        container = DIContainer()
        container.register_instance("base_url", "https://example.org")
        container.register(
            "client",
            lambda endpoint: endpoint,
            [DependencyKey.for_factory(lambda c: c.resolve("base_url") + "/api")],
        )

        assert container.resolve("client") == "https://example.org/api"


class TestFailureModes:
    """Test the error taxonomy end to end."""

    def test_cycle_across_three_registrations(self):
        """A -> B -> C -> A is reported."""
        container = DIContainer()
        container.register("a", Service, ["b"])
        container.register("b", Service, ["c"])
        container.register("c", Service, ["a"])

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve("a")

        assert exc_info.value.dependency_chain == ["a", "b", "c", "a"]

    def test_missing_transitive_dependency(self):
        """An unknown dependency deep in the graph is reported by name."""
        container = DIContainer()
        container.register("service", Service, ["logger"])

        with pytest.raises(UnknownDependencyError) as exc_info:
            container.resolve("service")

        assert exc_info.value.name == "logger"

    def test_unknown_then_disposed(self):
        """The same call fails differently before and after disposal."""
        container = DIContainer()

        with pytest.raises(UnknownDependencyError):
            container.resolve("missing")

        container.dispose()

        with pytest.raises(ContainerDisposedError):
            container.resolve("missing")
