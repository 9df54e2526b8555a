import copy
from contextlib import contextmanager
from typing import Annotated, Any, Callable, Iterator, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from layered_di.domain.enums import Lifetime, ResolverKind
from layered_di.domain.exceptions import CircularDependencyError


class Constructible(BaseModel):
    """Recipe that builds instances by calling a class or factory function.

    Attributes:
        factory: Callable invoked with the resolved dependencies as positional arguments.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["constructible"] = "constructible"
    factory: Callable[..., Any] = Field(..., description="Class or factory function that builds the instance.")

    def create(self, dependencies: Sequence[Any]) -> Any:
        return self.factory(*dependencies)


class Blueprint(BaseModel):
    """Recipe that derives instances from a prototype object.

    Each build shallow-copies the template. If the copy exposes a callable named
    ``initializer`` it is called with the resolved dependencies; a non-``None``
    return value becomes the instance, otherwise the copy itself is used.

    Attributes:
        template: The prototype object instances are derived from.
        initializer: Name of the initializer method, or ``None`` to skip initialization.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["blueprint"] = "blueprint"
    template: Any = Field(..., description="Prototype object new instances are derived from.")
    initializer: Optional[str] = Field(default="init", description="Initializer invoked on each derived object.")

    def create(self, dependencies: Sequence[Any]) -> Any:
        instance = copy.copy(self.template)
        initializer = getattr(instance, self.initializer, None) if self.initializer else None
        if callable(initializer):
            result = initializer(*dependencies)
            if result is not None:
                return result
        return instance


Recipe = Annotated[Union[Constructible, Blueprint], Field(discriminator="kind")]


def to_recipe(recipe: Any) -> Union[Constructible, Blueprint]:
    """Wrap a raw recipe in its variant: callables construct, anything else is a blueprint."""
    if isinstance(recipe, (Constructible, Blueprint)):
        return recipe
    if callable(recipe):
        return Constructible(factory=recipe)
    return Blueprint(template=recipe)


class Registration(BaseModel):
    """Value object representing a named registration.

    Attributes:
        name: Key the registration is stored under.
        recipe: How to build the instance. ``None`` for external instances.
        dependency_list: Ordered dependency keys passed to the recipe.
        lifetime: How long the built instance should live.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="The name the dependency is registered under.")
    recipe: Optional[Recipe] = Field(default=None, description="The recipe used to build the instance.")
    dependency_list: Tuple[Any, ...] = Field(
        default=(),
        description="Dependency names or structured keys, resolved in order.",
    )
    lifetime: Lifetime = Field(default=Lifetime.SINGLETON, description="The lifetime of the registration.")


class DependencyKey(BaseModel):
    """Structured dependency key interpreted by a resolver plugin.

    Extra fields are kept as attributes, e.g. ``key.name`` for ``autoFactory``
    or ``key.resolve`` for ``factory``. Mappings in a dependency list are only
    classified through ``coerce``; plugins receive them unchanged.

    Attributes:
        kind: The resolver plugin the key is routed to.
    """

    model_config = ConfigDict(frozen=True, extra="allow", arbitrary_types_allowed=True)

    kind: str = Field(..., description="Resolver kind handling this key.")

    @classmethod
    def for_factory(cls, resolve: Callable[[Any], Any]) -> "DependencyKey":
        """Key whose value is produced by calling ``resolve(container)``."""
        return cls(kind=ResolverKind.FACTORY.value, resolve=resolve)

    @classmethod
    def for_auto_factory(cls, name: str) -> "DependencyKey":
        """Key whose value is a zero-argument callable resolving ``name`` later."""
        return cls(kind=ResolverKind.AUTO_FACTORY.value, name=name)

    @classmethod
    def coerce(cls, entry: Any) -> Optional["DependencyKey"]:
        """Convert a dependency list entry to a key.

        Accepts an existing key or a mapping carrying a string ``kind`` (or ``type``) tag.

        Returns:
            The key, or ``None`` if the entry has no recognizable shape.
        """
        if isinstance(entry, DependencyKey):
            return entry
        if not isinstance(entry, Mapping):
            return None
        fields = dict(entry)
        if not all(isinstance(field, str) for field in fields):
            return None
        kind = fields.pop("kind", None)
        if kind is None:
            kind = fields.pop("type", None)
        if not isinstance(kind, str):
            return None
        return cls(kind=str(kind), **fields)


class ResolutionContext(BaseModel):
    """Tracks the names currently being built by one container.

    Used for circular dependency detection.

    Attributes:
        stack: Names currently being resolved, outermost first.
    """

    stack: List[str] = Field(
        default_factory=list,
        description="Stack of dependency names currently being resolved.",
    )

    def push(self, name: str) -> None:
        """Add a name to the resolution stack.

        Args:
            name: The name being resolved.

        Raises:
            CircularDependencyError: If the name is already in the stack.
        """
        if name in self.stack:
            cycle = self.stack[self.stack.index(name) :] + [name]
            raise CircularDependencyError(cycle)
        self.stack.append(name)

    def pop(self) -> None:
        """Remove the last (most recent) name from the stack."""
        if self.stack:
            self.stack.pop()

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        self.stack.clear()

    @contextmanager
    def scope(self, name: str) -> Iterator[None]:
        """Keep ``name`` on the stack for the duration of the block."""
        self.push(name)
        try:
            yield
        finally:
            self.pop()


class ContainerOptions(BaseModel):
    """Configuration for a root container, shared by all of its children.

    Attributes:
        install_default_resolvers: Install the ``factory`` and ``autoFactory`` plugins.
    """

    model_config = ConfigDict(frozen=True)

    install_default_resolvers: bool = Field(
        default=True,
        description="Whether the built-in resolver plugins are installed on root containers.",
    )
