"""
pytest configuration for recordmap tests.

Every test gets its own catalog so cached metadata never leaks between tests
that define synthetic record types.
"""

import pytest

from recordmap.catalog import FieldCatalog
from recordmap.config import Settings
from recordmap.converter import Converter


@pytest.fixture
def catalog() -> FieldCatalog:
    """Provide an empty field catalog."""
    catalog = FieldCatalog()
    yield catalog
    catalog.reset()


@pytest.fixture
def converter(catalog: FieldCatalog) -> Converter:
    """Provide a lenient converter bound to the test catalog."""
    return Converter(catalog=catalog, settings=Settings())


@pytest.fixture
def strict_converter() -> Converter:
    """Provide a converter that raises on any skipped field."""
    return Converter(settings=Settings(strict=True))
