import logging
from typing import Any, List, Optional, Tuple

from layered_di.application.layered_registry import LayeredRegistry
from layered_di.domain import Lifetime, LifetimeError, Registration

logger = logging.getLogger(__name__)

# Marks a cache miss; ``None`` is a valid cached instance.
MISSING: Any = object()

CACHED_LIFETIMES = frozenset({Lifetime.SINGLETON, Lifetime.SINGLETON_PER_CONTAINER})


class LifetimeManager:
    """Instance cache of one container, layered over its parent's cache.

    Only the own layer is written to. Which visible instance may be reused by a
    given container is decided by the container; this class stores, looks up and
    disposes instances.

    Attributes:
        _cache: Cached instances keyed by registration name.
    """

    def __init__(self, parent: Optional["LifetimeManager"] = None) -> None:
        """Initialize the lifetime manager.

        Args:
            parent: Optional lifetime manager of the parent container.
        """
        self._cache: LayeredRegistry[Any] = parent._cache.create_child() if parent is not None else LayeredRegistry()

    def create_child(self) -> "LifetimeManager":
        """Create a lifetime manager for a child container."""
        return LifetimeManager(self)

    def get(self, name: str, default: Any = MISSING) -> Any:
        """Return the visible cached instance for ``name`` or ``default``."""
        return self._cache.get(name, default)

    def owns(self, name: str) -> bool:
        """Whether the instance for ``name`` is cached in this container's own layer."""
        return self._cache.owns(name)

    def layer_of(self, name: str) -> Optional[int]:
        """Depth of the container layer that cached the visible instance for ``name``."""
        return self._cache.layer_of(name)

    @staticmethod
    def should_cache(lifetime: Lifetime) -> bool:
        """Whether instances built for ``lifetime`` are kept in the cache."""
        return lifetime in CACHED_LIFETIMES

    def store(self, name: str, instance: Any) -> None:
        """Cache ``instance`` in the own layer."""
        self._cache[name] = instance

    def owned_instances(self) -> List[Tuple[str, Any]]:
        """Instances cached in the own layer."""
        return self._cache.own_items()

    def clear_cache(self) -> None:
        """Drop every instance of the own layer without disposing it."""
        self._cache.clear_own()

    def dispose_instances(self, registrations: LayeredRegistry[Registration]) -> None:
        """Dispose the instances cached in the own layer.

        External instances are skipped, as are instances without a callable
        ``dispose`` attribute. A failing ``dispose`` is logged and the remaining
        instances are still disposed.

        Args:
            registrations: The registrations visible to the owning container.
        """
        for name, instance in self.owned_instances():
            registration = registrations.get(name)
            if registration is None or registration.lifetime == Lifetime.EXTERNAL:
                continue
            dispose = getattr(instance, "dispose", None)
            if not callable(dispose):
                continue
            try:
                dispose()
            except Exception:
                logger.exception("Failed to dispose instance [%s]", name)


class LifecycleHandle:
    """Handle returned by ``register`` to adjust and inspect one registration.

    Example:
        >>> container.register("session", Session, ["db"]).singleton_per_container()
        >>> handle = container.register("db", Database)
        >>> handle.get_cached_instance() is None
        True
    """

    def __init__(
        self,
        registration: Registration,
        registrations: LayeredRegistry[Registration],
        lifetime_manager: LifetimeManager,
    ) -> None:
        self._registration = registration
        self._registrations = registrations
        self._lifetime_manager = lifetime_manager

    @property
    def name(self) -> str:
        return self._registration.name

    @property
    def registration(self) -> Registration:
        return self._registration

    @property
    def lifetime(self) -> Lifetime:
        return self._registration.lifetime

    def singleton(self) -> "LifecycleHandle":
        """One instance for the whole container tree, cached by the owning container."""
        return self._set_lifetime(Lifetime.SINGLETON)

    def singleton_per_container(self) -> "LifecycleHandle":
        """One instance per container that resolves the registration."""
        return self._set_lifetime(Lifetime.SINGLETON_PER_CONTAINER)

    def get_cached_instance(self, default: Any = None) -> Any:
        """Return the cached instance visible to the owning container without building one."""
        instance = self._lifetime_manager.get(self.name)
        return default if instance is MISSING else instance

    def _set_lifetime(self, lifetime: Lifetime) -> "LifecycleHandle":
        if self._registrations.get_own(self.name) is not self._registration:
            raise LifetimeError(f"Registration [{self.name}] has been replaced, its lifetime can no longer be changed")
        if self._registration.lifetime != lifetime:
            self._registration = self._registration.model_copy(update={"lifetime": lifetime})
            self._registrations[self.name] = self._registration
            logger.debug("Lifetime of [%s] set to %s", self.name, lifetime)
        return self
