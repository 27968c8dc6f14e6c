to_db = {
    'id': 'id_',
}

from_db = {
    'id_': 'id',
    'partkey': None,
    'sortkey': None,
    'record_type': None,
}
