from typing import Dict, List, Optional

from chalicelib.constants.substitute_keys import from_db, to_db
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import exceptions
from chalicelib.utils.data import substitute_keys
from chalicelib.utils.logger import logger


class EntityBase:
    collection = None

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, id_):
        self.id_: Optional[str] = id_
        self.record_type: str = ''
        self.db_record: Dict = {}

    @classmethod
    def from_record(cls, record: Dict):
        """
        Builds an entity from a record returned by the sdk ('id' -> 'id_')
        """
        item = dict(record)
        substitute_keys(dict_to_process=item, base_keys=to_db)
        return cls(**item)

    @classmethod
    def init_by_id(cls, id_):
        logger.info(f"init_by_id ::: {cls.__name__} {id_=}")
        return cls.from_record(get_sdk().get(cls.collection, id_))

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_
        }

    def _init_db_record(self) -> None:
        self.db_record = self._to_dict()

    def raise_validation_error(self, key):
        message = f'Validation error occurred while validating {self.record_type} field={key}'
        logger.error(f"raise_validation_error ::: {message}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _validate_optional_fields(self):
        for key, validator_func in self.optional_fields_validation.items():
            if self.db_record.get(key) is not None and validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _update_fields_whitelist(self) -> List:
        return [*self.required_mutable_fields_validation.keys(), *self.optional_fields_validation.keys()]

    def _get_validated_update_dict(self, fields: Optional[List] = None) -> Dict:
        """
        Validates fields for update
        Delete field if it is not valid
        :return:
        Clean dict for update
        (all invalid fields will be automatically excluded)
        """
        update_dict = self._to_dict()
        whitelist = self._update_fields_whitelist()
        clean_dict = {}
        validation_dict = {**self.required_mutable_fields_validation, **self.optional_fields_validation}
        for key in fields or whitelist:
            value = update_dict.get(key)
            if key in whitelist and value is not None and validation_dict[key](value) is True:
                clean_dict[key] = value
            elif value is not None:
                logger.warning(f'_get_validated_update_dict ::: {key=}, {value=} is not valid, '
                               f'removing from update dict..')
        return clean_dict

    def _create_db_record(self) -> Dict:
        """
        Creates entity record through the sdk, the sdk assigns id when id_ is empty
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        item = dict(self.db_record)
        substitute_keys(dict_to_process=item, base_keys=from_db)
        record = get_sdk().insert(self.collection, item)
        self.id_ = record['id']
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} successfully created")
        return record

    def _update_db_record(self, fields: Optional[List] = None) -> Dict:
        update_dict = self._get_validated_update_dict(fields)
        record = get_sdk().update(self.collection, self.id_, update_dict)
        logger.info(f"_update_db_record ::: {self.record_type=} {self.id_=} successfully updated "
                    f"fields={list(update_dict.keys())}")
        return record

    def _to_ui(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item

    def to_ui(self) -> Dict:
        return self._to_ui()
