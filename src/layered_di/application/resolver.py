from typing import Any, Callable, Dict, Mapping

from layered_di.domain import IContainer, IDependencyResolver, ResolverKind


def read_key_field(dependency_key: Any, field: str) -> Any:
    """Read ``field`` from a key declared as a mapping or as a ``DependencyKey``."""
    if isinstance(dependency_key, Mapping):
        return dependency_key[field]
    return getattr(dependency_key, field)


class FactoryResolver(IDependencyResolver):
    """Delegates resolution to the dependency key itself.

    Expects a key in the form ``{"kind": "factory", "resolve": lambda container: ...}``.
    """

    def resolve(self, container: IContainer, dependency_key: Any) -> Any:
        return read_key_field(dependency_key, "resolve")(container)


class AutoFactoryResolver(IDependencyResolver):
    """Returns a zero-argument callable that resolves a name when invoked.

    Expects a key in the form ``{"kind": "autoFactory", "name": "aDependencyName"}``.

    Example:
        >>> container.register("worker", Worker, [{"kind": "autoFactory", "name": "logger"}])
        >>> worker = container.resolve("worker")
        >>> logger = worker.get_logger()  # resolves "logger" only now
    """

    def resolve(self, container: IContainer, dependency_key: Any) -> Callable[[], Any]:
        name = read_key_field(dependency_key, "name")

        def factory() -> Any:
            return container.resolve(name)

        return factory


def create_default_resolvers() -> Dict[str, IDependencyResolver]:
    """Build the resolver plugins every root container starts with."""
    return {
        ResolverKind.FACTORY.value: FactoryResolver(),
        ResolverKind.AUTO_FACTORY.value: AutoFactoryResolver(),
    }
