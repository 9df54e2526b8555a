import logging
from typing import Any, List, Optional, Sequence, Tuple

from layered_di.application.layered_registry import LayeredRegistry
from layered_di.application.lifetime_manager import MISSING, LifecycleHandle, LifetimeManager
from layered_di.application.resolver import create_default_resolvers
from layered_di.domain import (
    ContainerDisposedError,
    ContainerOptions,
    DependencyKey,
    IContainer,
    IDependencyResolver,
    Lifetime,
    MalformedDependencyKeyError,
    Registration,
    ResolutionContext,
    UnknownDependencyError,
    UnresolvableDependencyKindError,
    to_recipe,
)

logger = logging.getLogger(__name__)


class DIContainer(IContainer):
    """Main dependency injection container.

    Maps names to recipes and builds the object graph on demand. Child containers
    layer their registrations, cached instances and resolver plugins over their
    parent's: lookups fall through to the parent, writes stay local.

    Lifetimes:
        - singleton: one instance for the whole tree, cached by the container that
          owns the registration.
        - singletonPerContainer: one instance per container that resolves it.
        - external: the registered instance, shared everywhere, never disposed here.

    Attributes:
        _options: Configuration shared with every child.
        _parent: The container this one was created from, if any.
        _registrations: Registrations keyed by name.
        _lifetime_manager: Instance cache keyed by name.
        _resolvers: Resolver plugins keyed by dependency key kind.
        _resolution_context: Names currently being built by this container.
        _child_containers: Children created from this container.
        _disposed: Whether ``dispose`` has been called.
    """

    def __init__(self, options: Optional[ContainerOptions] = None) -> None:
        """Initialize a root container.

        Args:
            options: Optional container configuration.
        """
        self._options = options or ContainerOptions()
        self._parent: Optional[DIContainer] = None
        self._registrations: LayeredRegistry[Registration] = LayeredRegistry()
        self._lifetime_manager = LifetimeManager()
        self._resolvers: LayeredRegistry[IDependencyResolver] = LayeredRegistry(
            create_default_resolvers() if self._options.install_default_resolvers else None
        )
        self._resolution_context = ResolutionContext()
        self._child_containers: List[DIContainer] = []
        self._disposed = False

    @property
    def options(self) -> ContainerOptions:
        return self._options

    @property
    def parent(self) -> Optional["DIContainer"]:
        return self._parent

    @property
    def is_child(self) -> bool:
        return self._parent is not None

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def child_containers(self) -> Tuple["DIContainer", ...]:
        return tuple(self._child_containers)

    def register(self, name: str, recipe: Any, dependency_list: Optional[Sequence[Any]] = None) -> LifecycleHandle:
        """Register a recipe under a name with singleton lifetime.

        Replaces any registration of the same name in this container's own layer.
        A parent's registration of the same name is shadowed, not modified.

        Args:
            name: The name to register.
            recipe: A class or factory function (called with the dependencies), a
                blueprint object (copied, then its ``init`` is called with the
                dependencies), or a ``Constructible``/``Blueprint`` recipe.
            dependency_list: Dependency names or structured keys, resolved in order.

        Returns:
            Handle to change the lifetime or read the cached instance.

        Raises:
            ContainerDisposedError: If the container has been disposed.

        Example:
            >>> container.register("db", Database, ["config"])
            >>> container.register("session", Session, ["db"]).singleton_per_container()
        """
        self._ensure_not_disposed()
        self._validate_dependency_list(dependency_list)
        registration = Registration(
            name=name,
            recipe=to_recipe(recipe),
            dependency_list=tuple(dependency_list or ()),
            lifetime=Lifetime.SINGLETON,
        )
        self._registrations[name] = registration
        logger.debug("Registered [%s] with %d dependencies", name, len(registration.dependency_list))
        return LifecycleHandle(registration, self._registrations, self._lifetime_manager)

    def register_instance(self, name: str, instance: Any) -> None:
        """Register an externally owned instance.

        The instance is returned as-is by every container that can see the
        registration and is never disposed by the container.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        self._ensure_not_disposed()
        self._registrations[name] = Registration(name=name, lifetime=Lifetime.EXTERNAL)
        self._lifetime_manager.store(name, instance)
        logger.debug("Registered external instance [%s]", name)

    def resolve(self, name: str) -> Any:
        """Resolve and return the instance registered under a name.

        Args:
            name: The name to resolve.

        Returns:
            The cached instance when the lifetime allows reusing it, otherwise a
            newly built one.

        Raises:
            ContainerDisposedError: If the container has been disposed.
            UnknownDependencyError: If nothing is registered under ``name``.
            CircularDependencyError: If ``name`` depends on itself.
            UnresolvableDependencyKindError: If a structured key has no resolver plugin.
            MalformedDependencyKeyError: If a dependency list entry has an unknown shape.

        Example:
            >>> service = container.resolve("service")
        """
        self._ensure_not_disposed()
        registration = self._registrations.get(name)
        if registration is None:
            raise UnknownDependencyError(name)

        instance = self._try_retrieve_from_cache(registration)
        if instance is MISSING:
            instance = self._build_instance(registration)
            if self._lifetime_manager.should_cache(registration.lifetime):
                self._lifetime_manager.store(name, instance)
        return instance

    def add_resolver(self, kind: str, plugin: IDependencyResolver) -> None:
        """Register a resolver plugin for structured dependency keys of ``kind``.

        Any object with a ``resolve(container, dependency_key)`` method is accepted.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        self._ensure_not_disposed()
        self._resolvers[str(kind)] = plugin
        logger.debug("Added resolver plugin for kind [%s]", kind)

    def is_registered(self, name: str) -> bool:
        """Whether a registration for ``name`` is visible to this container."""
        return name in self._registrations

    def has_own_registration(self, name: str) -> bool:
        """Whether ``name`` is registered in this container rather than inherited."""
        return self._registrations.owns(name)

    def create_child_container(self) -> "DIContainer":
        """Create a child container layered over this one.

        The child sees every registration, cached instance and resolver plugin of
        its ancestors; what it registers stays local. It is disposed together with
        this container.

        Raises:
            ContainerDisposedError: If the container has been disposed.

        Example:
            >>> with container.create_child_container() as child:
            ...     child.register_instance("request", request)
            ...     handler = child.resolve("handler")
        """
        self._ensure_not_disposed()
        child = DIContainer(self._options)
        child._attach_to(self)
        return child

    def dispose(self) -> None:
        """Dispose this container and, recursively, its children.

        Calls ``dispose()`` on every non-external instance cached by this
        container itself. Instances cached by ancestors are left alone. A
        disposed child is detached from its parent. Calling it again has no
        effect.
        """
        if self._disposed:
            return
        self._disposed = True
        logger.debug("Disposing container with %d child containers", len(self._child_containers))
        self._lifetime_manager.dispose_instances(self._registrations)
        for child in tuple(self._child_containers):
            child.dispose()
        self._child_containers.clear()
        if self._parent is not None and self in self._parent._child_containers:
            self._parent._child_containers.remove(self)

    def __enter__(self) -> "DIContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.dispose()
        return False

    def _attach_to(self, parent: "DIContainer") -> None:
        """Layer this container's stores over ``parent`` and join its children."""
        self._options = parent._options
        self._parent = parent
        self._registrations = parent._registrations.create_child()
        self._lifetime_manager = parent._lifetime_manager.create_child()
        self._resolvers = parent._resolvers.create_child()
        self._resolution_context = ResolutionContext()
        self._child_containers = []
        self._disposed = False
        parent._child_containers.append(self)
        logger.debug("Created child container (%d children on parent)", len(parent._child_containers))

    def _try_retrieve_from_cache(self, registration: Registration) -> Any:
        """Return the cached instance this container may reuse, or ``MISSING``."""
        name = registration.name
        instance = self._lifetime_manager.get(name)
        if self._parent is None:
            return instance

        owns_registration = self._registrations.owns(name)
        if instance is MISSING:
            # Singletons are built and cached by the container that owns the registration.
            if not owns_registration and registration.lifetime == Lifetime.SINGLETON:
                return self._parent.resolve(name)
            return MISSING

        if self._lifetime_manager.owns(name):
            return instance

        has_overridden_registration = owns_registration
        inherits_per_container = not owns_registration and registration.lifetime == Lifetime.SINGLETON_PER_CONTAINER
        if has_overridden_registration or inherits_per_container:
            return MISSING
        if self._lifetime_manager.layer_of(name) != self._registrations.layer_of(name):
            # Cached above an ancestor that overrides the registration and has not built it yet.
            return self._parent.resolve(name)
        return instance

    def _build_instance(self, registration: Registration) -> Any:
        with self._resolution_context.scope(registration.name):
            dependencies = [
                self._resolve_dependency(registration, index, dependency_key)
                for index, dependency_key in enumerate(registration.dependency_list)
            ]
            logger.debug("Building [%s]", registration.name)
            return registration.recipe.create(dependencies)

    def _resolve_dependency(self, registration: Registration, index: int, dependency_key: Any) -> Any:
        if isinstance(dependency_key, str):
            return self.resolve(dependency_key)

        structured_key = DependencyKey.coerce(dependency_key)
        if structured_key is None:
            raise MalformedDependencyKeyError(registration.name, index, dependency_key)

        resolver = self._resolvers.get(structured_key.kind)
        if resolver is None:
            raise UnresolvableDependencyKindError(registration.name, structured_key.kind)
        # Plugins receive the key as declared.
        return resolver.resolve(self, dependency_key)

    def _validate_dependency_list(self, dependency_list: Optional[Sequence[Any]]) -> None:
        """Hook for validating a dependency list at registration time. Accepts everything."""

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise ContainerDisposedError()
