"""Pytest configuration for backend tests."""
import sys
from pathlib import Path
import pytest
from fastapi.testclient import TestClient

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from app.core.config import Settings
from app.schemas.catalog import Catalog
from app.services.catalog import get_catalog


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    """The shipped v1 catalog from app/data."""
    return get_catalog()


@pytest.fixture
def tiny_catalog() -> Catalog:
    """
    Hand-built catalog with display codes that differ from module ids.

    Also carries the data errors the engine must tolerate: a touchpoint mapped
    to a module that does not exist and a touchpoint with no mapping.
    """
    return Catalog(
        version="test",
        phases=[
            {
                "id": "p1",
                "label": "Phase one",
                "touchpoints": [
                    {"id": "tp1", "label": "Touchpoint one", "module_mapping": ["a", "ghost"]},
                    {"id": "tp2", "label": "Touchpoint two", "module_mapping": []},
                    {
                        "id": "tp3",
                        "label": "Touchpoint three",
                        "sub_touchpoints": [{"id": "s1", "label": "Sub one"}],
                        "module_mapping": ["c"],
                    },
                ],
            },
        ],
        module_groups=[
            {"id": "g1", "label": "Group one"},
            {"id": "g2", "label": "Group two"},
        ],
        modules=[
            {"id": "a", "code": "A-1", "name": "Module A", "group": "g1", "estimated_time": 10, "cost": 100},
            {"id": "b", "code": "B-2", "name": "Module B", "group": "g1", "estimated_time": 10, "cost": 100},
            {"id": "c", "code": "C-3", "name": "Module C", "group": "g2", "estimated_time": 10, "cost": 100},
            {"id": "d", "code": "D-4", "name": "Module D", "group": "g2", "estimated_time": 10, "cost": 100},
        ],
        industries=[
            {"id": "ind1", "name": "industry one", "default_modules": ["b"]},
            {"id": "empty-ind", "name": "empty industry", "default_modules": []},
            {"id": "other", "name": "other", "default_modules": ["d"]},
        ],
        generic_defaults=["d"],
    )


@pytest.fixture
def settings_override():
    """Build a Settings instance with overrides, leaving the global untouched."""
    def _make(**overrides) -> Settings:
        return Settings(**overrides)
    return _make


@pytest.fixture
def client() -> TestClient:
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
