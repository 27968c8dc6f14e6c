from copy import deepcopy
from typing import Dict, List

from boto3.dynamodb.conditions import Key

from chalicelib.constants import keys_structure
from chalicelib.constants.substitute_keys import from_db, to_db
from chalicelib.utils import db as utils_db, exceptions
from chalicelib.utils.data import substitute_keys
from chalicelib.utils.logger import logger


class MemoryBackend:
    """
    Keeps collections in process memory.
    Used for local runs and tests, a lambda container loses everything on recycle.
    """

    name = 'memory'

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict]] = {}

    def scan(self, collection: str) -> List[Dict]:
        return [deepcopy(record) for record in self._collections.get(collection, {}).values()]

    def get(self, collection: str, record_id: str) -> Dict:
        try:
            return deepcopy(self._collections[collection][record_id])
        except KeyError:
            raise exceptions.RecordNotFound(f'record {collection=} {record_id=} not found')

    def put(self, collection: str, record: Dict) -> None:
        self._collections.setdefault(collection, {})[record['id']] = deepcopy(record)

    def update(self, collection: str, record_id: str, fields: Dict) -> Dict:
        record = self._collections.get(collection, {}).get(record_id)
        if record is None:
            raise exceptions.RecordNotFound(f'record {collection=} {record_id=} not found')
        record.update(deepcopy(fields))
        return deepcopy(record)

    def delete(self, collection: str, record_id: str) -> None:
        self._collections.get(collection, {}).pop(record_id, None)


class DynamoDBBackend:
    """
    One generic table, partkey = collection name, sortkey = record id
    """

    name = 'dynamodb'

    def __init__(self, table=utils_db.get_gen_table):
        self.table = table

    @staticmethod
    def _key(collection: str, record_id: str) -> Dict:
        return {
            'partkey': keys_structure.records_pk.format(collection=collection),
            'sortkey': keys_structure.records_sk.format(record_id=record_id)
        }

    @staticmethod
    def _from_db(item: Dict) -> Dict:
        record = dict(item)
        substitute_keys(dict_to_process=record, base_keys=from_db)
        return record

    def scan(self, collection: str) -> List[Dict]:
        items = utils_db.query_items_paged(
            Key('partkey').eq(keys_structure.records_pk.format(collection=collection)),
            table=self.table
        )
        return [self._from_db(item) for item in items]

    def get(self, collection: str, record_id: str) -> Dict:
        key = self._key(collection, record_id)
        return self._from_db(utils_db.get_db_item(key['partkey'], key['sortkey'], table=self.table))

    def put(self, collection: str, record: Dict) -> None:
        item = dict(record)
        substitute_keys(dict_to_process=item, base_keys=to_db)
        utils_db.put_db_record({**self._key(collection, record['id']), 'record_type': collection, **item},
                               table=self.table)
        logger.info(f"put ::: {collection=} record_id={record['id']} successfully created")

    def update(self, collection: str, record_id: str, fields: Dict) -> Dict:
        # update_item creates missing items, existence is checked first
        current = self.get(collection, record_id)
        set_response, _ = utils_db.update_db_record(
            key=self._key(collection, record_id),
            update_body=fields,
            allowed_attrs_to_update=list(fields.keys()),
            allowed_attrs_to_delete=[],
            table=self.table
        )
        logger.info(f"update ::: {collection=} {record_id=} successfully updated")
        if set_response and 'Attributes' in set_response:
            return self._from_db(set_response['Attributes'])
        return {**current, **fields}

    def delete(self, collection: str, record_id: str) -> None:
        utils_db.delete_db_record(self._key(collection, record_id), table=self.table)
