import pytest

from gvas.diagnostics import Diagnostics

from . import builders as b


@pytest.fixture
def diagnostics():
    return Diagnostics()


@pytest.fixture
def minimal_save():
    """GVAS v2 file holding a single IntProperty X = 42."""
    return b.document(b.int_prop("X", 42))
