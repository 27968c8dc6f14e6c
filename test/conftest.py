import pytest

from chalicelib.sdk.backends import MemoryBackend
from chalicelib.sdk.client import DataClient, set_sdk


@pytest.fixture(autouse=True)
def sdk():
    client = DataClient(MemoryBackend())
    set_sdk(client)
    yield client
    set_sdk(None)
