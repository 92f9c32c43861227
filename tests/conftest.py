import pytest

from hexagram_catalog import load_default_catalog


@pytest.fixture(scope="session")
def catalog():
    return load_default_catalog()
