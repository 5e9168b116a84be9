import pytest

from conjoin import CollectingErrorSink, global_config


@pytest.fixture(autouse=True)
def _restore_global_config():
    yield
    global_config.reset()


@pytest.fixture
def collector():
    sink = CollectingErrorSink()
    previous = global_config.set_error_sink(sink)
    yield sink
    global_config.set_error_sink(previous)
