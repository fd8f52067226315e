import pytest

from vertexgen.core.registry import VertexFormatRegistry
from vertexgen.diagnostics import DiagnosticCollector, Reporter


@pytest.fixture
def collector():
    """Collects every diagnostic emitted during a test."""
    return DiagnosticCollector()


@pytest.fixture
def reporter(collector):
    return Reporter(collector)


@pytest.fixture(autouse=True)
def clean_registry():
    """Keeps vertex formats declared by one test out of the next."""
    yield
    VertexFormatRegistry.clear()
