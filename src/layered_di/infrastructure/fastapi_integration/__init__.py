"""
FastAPI bindings.

Request-scoped child containers and ``Depends()`` callables. Requires the
``fastapi`` extra.
"""

from .integration import ChildContainerMiddleware, create_fastapi_dependency, create_scoped_dependency

__all__ = ["ChildContainerMiddleware", "create_fastapi_dependency", "create_scoped_dependency"]
