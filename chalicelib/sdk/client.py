import os
from copy import deepcopy
from typing import Dict, Optional
from uuid import uuid4

from chalicelib.sdk.backends import MemoryBackend, DynamoDBBackend
from chalicelib.sdk.query_builder import QueryBuilder
from chalicelib.utils import exceptions
from chalicelib.utils.data import now_iso
from chalicelib.utils.logger import logger

BACKENDS = {
    MemoryBackend.name: MemoryBackend,
    DynamoDBBackend.name: DynamoDBBackend,
}

_SDK = None


class DataClient:
    """
    The only way the storefront talks to storage:
    query_builder(...).where(...).sort(...).limit(...).exec(), insert, update, get, delete
    Returned records are copies, changing them does not change storage.
    """

    def __init__(self, backend):
        self.backend = backend

    def query_builder(self, collection: str) -> QueryBuilder:
        return QueryBuilder(self.backend, collection)

    def insert(self, collection: str, partial: Dict) -> Dict:
        record = deepcopy(partial)
        record['id'] = record.get('id') or str(uuid4())
        record.setdefault('date_created', now_iso())
        self.backend.put(collection, record)
        logger.info(f"insert ::: {collection=} id={record['id']} inserted")
        return deepcopy(record)

    def update(self, collection: str, record_id: str, partial: Dict) -> Dict:
        fields = {key: value for key, value in partial.items() if key != 'id' and value is not None}
        fields['date_updated'] = now_iso()
        record = self.backend.update(collection, record_id, fields)
        logger.info(f"update ::: {collection=} {record_id=} fields={list(fields.keys())}")
        return record

    def get(self, collection: str, record_id: str) -> Dict:
        return self.backend.get(collection, record_id)

    def delete(self, collection: str, record_id: str) -> None:
        self.backend.delete(collection, record_id)
        logger.info(f"delete ::: {collection=} {record_id=} deleted")


def create_sdk(backend_name: Optional[str] = None) -> DataClient:
    backend_name = (backend_name or os.environ.get('DATA_BACKEND', DynamoDBBackend.name)).lower()
    if backend_name not in BACKENDS:
        raise exceptions.UnknownDataBackend(f'Unknown DATA_BACKEND={backend_name}, expected one of {list(BACKENDS)}')
    logger.info(f'create_sdk ::: using {backend_name} backend')
    return DataClient(BACKENDS[backend_name]())


def get_sdk() -> DataClient:
    global _SDK
    if _SDK is None:
        _SDK = create_sdk()
    return _SDK


def set_sdk(client: Optional[DataClient]) -> None:
    global _SDK
    _SDK = client
