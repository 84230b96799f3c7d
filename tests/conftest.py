from __future__ import annotations

from collections.abc import Iterator

import pytest

from modelmap.adapters import InMemoryConnection
from modelmap.config import get_settings
from modelmap.dispatch import default_hierarchy, operations


@pytest.fixture(autouse=True)
def _isolated_registry() -> Iterator[None]:
    """Undo handler registrations and derivations made by a test."""
    tables = {name: op.snapshot() for name, op in operations().items()}
    derivations = default_hierarchy.snapshot()
    get_settings.cache_clear()
    yield
    for name, op in operations().items():
        if name in tables:
            op.restore(tables[name])
    default_hierarchy.restore(derivations)
    get_settings.cache_clear()


@pytest.fixture()
def people_connection() -> InMemoryConnection:
    return InMemoryConnection(
        {
            "people": [
                {"id": 1, "name": "Cam", "created_at": "2020-04-21"},
                {"id": 2, "name": "Sam", "created_at": "2019-01-11"},
                {"id": 3, "name": "Pam", "created_at": "2020-01-01"},
            ]
        }
    )
