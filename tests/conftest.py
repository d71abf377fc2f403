"""
Pytest fixtures for objectquery tests.
"""

import pytest
from datetime import datetime
from typing import Any, Dict, List

from config.settings import Settings
from objectquery.core.collection import Collection
from objectquery.query.builder import ObjectQuery


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any config file on disk."""
    return Settings()


@pytest.fixture
def query(settings: Settings) -> ObjectQuery:
    """An empty query without a collection."""
    return ObjectQuery(settings=settings)


@pytest.fixture
def person_records() -> List[Dict[str, Any]]:
    """Five people with ids, names, ages and creation dates."""
    return [
        {"id": 1, "name": "clinton", "age": 18, "createdAt": datetime(2004, 12, 6, 3, 34, 6)},
        {"id": 2, "name": "necati", "age": 34, "createdAt": datetime(2011, 9, 26, 16, 42, 17)},
        {"id": 3, "name": "norman", "age": 28, "createdAt": datetime(2015, 6, 14, 20, 57, 46)},
        {"id": 4, "name": "elias", "age": 42, "createdAt": datetime(2006, 6, 13, 4, 35, 2)},
        {"id": 5, "name": "martin", "age": 18, "createdAt": datetime(2003, 1, 14, 14, 12, 50)},
    ]


@pytest.fixture
def people(person_records: List[Dict[str, Any]]) -> Collection:
    """A Person collection."""
    return Collection(person_records, name="Person")


@pytest.fixture
def people_query(people: Collection, settings: Settings) -> ObjectQuery:
    """A query over the Person collection."""
    return ObjectQuery(people, settings=settings)
