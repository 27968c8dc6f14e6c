from typing import Callable, Dict, List, Optional

from chalicelib.utils.logger import logger

SORT_ASC = 'asc'
SORT_DESC = 'desc'


class QueryBuilder:
    """
    Chainable query over one collection:

        sdk.query_builder('orders').where(lambda o: o.get('customer_id') == user_id)\
            .sort('order_date', 'desc').limit(10).exec()

    Several where() calls are combined with AND.
    Records without the sort field always go last, whatever the direction is.
    """

    def __init__(self, backend, collection: str):
        self._backend = backend
        self.collection = collection
        self._predicates: List[Callable[[Dict], bool]] = []
        self._sort_field: Optional[str] = None
        self._sort_direction: str = SORT_ASC
        self._limit: Optional[int] = None

    def where(self, predicate: Callable[[Dict], bool]) -> 'QueryBuilder':
        self._predicates.append(predicate)
        return self

    def sort(self, field: str, direction: str = SORT_ASC) -> 'QueryBuilder':
        if direction not in (SORT_ASC, SORT_DESC):
            raise ValueError(f'Unknown sort direction {direction}, expected {SORT_ASC} or {SORT_DESC}')
        self._sort_field = field
        self._sort_direction = direction
        return self

    def limit(self, n: Optional[int] = None) -> 'QueryBuilder':
        if n is not None and n < 0:
            raise ValueError('limit must not be negative')
        self._limit = n
        return self

    def exec(self) -> List[Dict]:
        records = [record for record in self._backend.scan(self.collection)
                   if all(predicate(record) for predicate in self._predicates)]

        if self._sort_field is not None:
            field = self._sort_field
            with_field = [record for record in records if record.get(field) is not None]
            without_field = [record for record in records if record.get(field) is None]
            with_field.sort(key=lambda record: record[field], reverse=self._sort_direction == SORT_DESC)
            records = with_field + without_field

        if self._limit is not None:
            records = records[:self._limit]

        logger.debug(f'exec ::: {self.collection=} returned {len(records)} records')
        return records
