"""
Container helpers for test suites.

``TestContainer`` layers mocks and overridden recipes over an application
container without touching it; ``MockScope`` gives a disposable child per test.
"""

from .utilities import MockScope, TestContainer, create_mock_container

__all__ = ["TestContainer", "MockScope", "create_mock_container"]
