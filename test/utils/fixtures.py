import pytest
from chalice.config import Config
from chalice.local import LocalGateway

from app import app
from chalicelib.utils.logger import log_message


def local_gateway(stage: str = 'test') -> LocalGateway:
    log_message(f'local_gateway stage = {stage}')
    return LocalGateway(app, Config(chalice_stage=stage))


@pytest.fixture(scope='session')
def chalice_gateway() -> LocalGateway:
    yield local_gateway()
