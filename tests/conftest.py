import pytest

from symbolic_calculus.logging_system import LogLevel, configure_logging


@pytest.fixture(autouse=True)
def default_logging():
    """Every test starts and ends with the package default (warnings only)"""
    configure_logging(LogLevel.MINIMAL)
    yield
    configure_logging(LogLevel.MINIMAL)
