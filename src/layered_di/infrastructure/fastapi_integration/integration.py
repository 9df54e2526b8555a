import logging
from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from layered_di.domain import IContainer

logger = logging.getLogger(__name__)

REQUEST_CONTAINER_ATTRIBUTE = "di_container"


def create_fastapi_dependency(container: IContainer, name: str) -> Callable[[], Any]:
    """Build a ``Depends()`` callable resolving ``name`` from a fixed container.

    Use it for application-wide registrations. Lifetimes apply as usual, so a
    ``singleton`` comes back identical on every request.

    Example:
        >>> get_repository = create_fastapi_dependency(container, "user_repository")
        >>>
        >>> @app.get("/users")
        >>> def list_users(repository=Depends(get_repository)):
        ...     return repository.all()
    """

    def resolve_from_container() -> Any:
        return container.resolve(name)

    return resolve_from_container


def create_scoped_dependency(name: str) -> Callable[[Request], Any]:
    """Build a ``Depends()`` callable resolving ``name`` from the request's child container.

    ``singletonPerContainer`` registrations get one instance per request.
    ChildContainerMiddleware must be installed.

    Raises:
        RuntimeError: When called for a request without a child container.
    """

    def resolve_from_request(request: Request) -> Any:
        request_container = getattr(request.state, REQUEST_CONTAINER_ATTRIBUTE, None)
        if request_container is None:
            raise RuntimeError(
                f"No child container on request for [{name}]; install ChildContainerMiddleware on the app"
            )
        return request_container.resolve(name)

    return resolve_from_request


class ChildContainerMiddleware(BaseHTTPMiddleware):
    """Gives every request its own child container.

    The child is stored on ``request.state.di_container`` and disposed when the
    endpoint returns or raises, which disposes whatever it built.

    Example:
        >>> app.add_middleware(ChildContainerMiddleware, container=container)
    """

    def __init__(self, app: FastAPI, container: IContainer):
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_container = self.container.create_child_container()
        setattr(request.state, REQUEST_CONTAINER_ATTRIBUTE, request_container)
        logger.debug("Opened request container for %s %s", request.method, request.url.path)

        try:
            return await call_next(request)
        finally:
            request_container.dispose()
