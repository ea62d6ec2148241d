import pytest

from gridcalc import Evaluator, VariableRegistry, default_registry


@pytest.fixture(autouse=True)
def _clear_default_registry():
    default_registry.clear_variables()
    yield
    default_registry.clear_variables()


@pytest.fixture
def registry():
    return VariableRegistry()


@pytest.fixture
def evaluator(registry):
    return Evaluator(registry)
