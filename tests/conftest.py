"""Shared fixtures: default reference tables, design inputs and the Flask client."""

import pytest

from flange_calculator import app
from flange_models import FlangeDesignInputs
from flange_tables import default_tables


@pytest.fixture
def tables():
    return default_tables()


@pytest.fixture
def inputs():
    return FlangeDesignInputs()


@pytest.fixture
def client(tables):
    app.config.update(TESTING=True, FLANGE_TABLES=tables)
    with app.test_client() as c:
        yield c
