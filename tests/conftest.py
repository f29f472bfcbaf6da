import pytest

from scriptum.scriptum_config import GuardConfig
from scriptum.scriptum_runtime import GuardContext, get_context


@pytest.fixture(autouse=True)
def default_context():
    """Every test starts from an enabled default context with an empty history."""
    ctx = get_context()
    enabled = ctx.enabled
    ctx.enabled = True
    ctx.history.clear()
    yield ctx
    ctx.enabled = enabled
    ctx.history.clear()


@pytest.fixture
def context():
    """A fresh context that shares nothing with the default one."""
    return GuardContext(GuardConfig())
