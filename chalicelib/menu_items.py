from decimal import Decimal
from typing import Dict, List, Union

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import CUSTOMIZATION_SINGLE, CUSTOMIZATION_MULTIPLE
from chalicelib.constants.status_codes import http200
from chalicelib.restaurants import Restaurant
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth, exceptions
from chalicelib.utils.data import to_money, to_int, parse_raw_body
from chalicelib.utils.logger import logger

Selections = Dict[str, Union[str, List[str]]]


class MenuItem(EntityBase):
    collection = keys_structure.menu_items_collection

    required_immutable_fields_validation = {
        'restaurant_id': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str),
        'category': lambda x: isinstance(x, str),
        'price': lambda x: isinstance(x, Decimal) and x >= 0,
        'available': lambda x: isinstance(x, bool)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str),
        'featured': lambda x: isinstance(x, bool),
        'allergens': lambda x: isinstance(x, list),
        'nutritional_info': lambda x: isinstance(x, dict),
        'customizations': lambda x: isinstance(x, list)
    }

    def __init__(self, id_=None, restaurant_id=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: str = restaurant_id
        self.name: str = kwargs.get('name')
        self.description: str = kwargs.get('description')
        self.price: Decimal = to_money(kwargs.get('price')) if kwargs.get('price') is not None else None
        self.category: str = kwargs.get('category')
        self.image: str = kwargs.get('image')
        self.available: bool = kwargs.get('available', True)
        self.featured: bool = kwargs.get('featured', False)
        self.allergens: List[str] = kwargs.get('allergens') or []
        self.nutritional_info: Dict = kwargs.get('nutritional_info') or {}
        self.customizations: List[Dict] = [self._normalize_customization(c) for c in kwargs.get('customizations') or []]
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'menu_item'

    @staticmethod
    def _normalize_customization(customization: Dict) -> Dict:
        return {
            'name': customization['name'],
            'type': customization.get('type', CUSTOMIZATION_SINGLE),
            'required': bool(customization.get('required', False)),
            'options': [{'name': option['name'], 'price': to_money(option.get('price'))}
                        for option in customization.get('options', [])]
        }

    @classmethod
    def init_get_by_id(cls, menu_item_id, restaurant_id):
        logger.info("init_get_by_id ::: started")
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda item: item.get('id') == menu_item_id and item.get('restaurant_id') == restaurant_id)\
            .exec()
        if not records:
            raise exceptions.RecordNotFound(f'Menu item {menu_item_id} not found in restaurant {restaurant_id}')
        return cls.from_record(records[0])

    @classmethod
    def get_restaurant_menu(cls, restaurant_id) -> List['MenuItem']:
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda item: item.get('restaurant_id') == restaurant_id and item.get('available') is True)\
            .sort('category')\
            .exec()
        return [cls.from_record(record) for record in records]

    @classmethod
    def get_availability(cls, menu_item_ids: List[str]) -> Dict[str, bool]:
        ids = set(menu_item_ids)
        records = get_sdk().query_builder(cls.collection).where(lambda item: item.get('id') in ids).exec()
        return {record['id']: record.get('available') is True for record in records}

    def create(self) -> Dict:
        return self._create_db_record()

    def build_customizations(self, selections: Selections = None) -> List[Dict]:
        """
        Turns {customization name: option name(s)} into cart lines [{name, option, price}]
        in the order customizations are listed on the item.
        Raises CustomizationRequired when a required customization is not selected
        """
        selections = selections or {}
        known = {customization['name'] for customization in self.customizations}
        unknown = [name for name in selections if name not in known]
        if unknown:
            raise exceptions.ValidationException(f'Unknown customizations: {", ".join(unknown)}')

        missing_required = [customization['name'] for customization in self.customizations
                            if customization['required'] and not selections.get(customization['name'])]
        if missing_required:
            raise exceptions.CustomizationRequired(f'Please select: {", ".join(missing_required)}')

        lines = []
        for customization in self.customizations:
            selected = selections.get(customization['name'])
            if not selected:
                continue
            selected = [selected] if isinstance(selected, str) else list(selected)
            if customization['type'] != CUSTOMIZATION_MULTIPLE and len(selected) > 1:
                raise exceptions.ValidationException(f'Only one option allowed for {customization["name"]}')
            options = {option['name']: option['price'] for option in customization['options']}
            for option_name in selected:
                if option_name not in options:
                    raise exceptions.ValidationException(
                        f'Unknown option {option_name} for {customization["name"]}')
                lines.append({'name': customization['name'], 'option': option_name, 'price': options[option_name]})
        return lines

    def calculate_total_price(self, quantity, selections: Selections = None) -> Decimal:
        quantity = to_int(quantity, default=1)
        options_price = sum((line['price'] for line in self.build_customizations(selections)), Decimal(0))
        return to_money((self.price + options_price) * quantity)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'category': self.category,
            'image': self.image,
            'available': self.available,
            'featured': self.featured,
            'allergens': self.allergens,
            'nutritional_info': self.nutritional_info,
            'customizations': self.customizations,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_menu(request, slug) -> Response:
    restaurant = Restaurant.init_active_by_slug(slug)
    menu_items: List[Dict] = [item.to_ui() for item in MenuItem.get_restaurant_menu(restaurant.id_)]
    logger.info(f"endpoint_get_menu ::: returning menu items={[item['id'] for item in menu_items]}")
    return Response(status_code=http200, body={'restaurant': restaurant.to_ui(), 'menu_items': menu_items})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_menu_item(request, slug, menu_item_id) -> Response:
    restaurant = Restaurant.init_active_by_slug(slug)
    menu_item = MenuItem.init_get_by_id(menu_item_id, restaurant.id_)
    return Response(status_code=http200, body=menu_item.to_ui())


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_menu_item_price(request, slug, menu_item_id) -> Response:
    request_body = parse_raw_body(request)
    restaurant = Restaurant.init_active_by_slug(slug)
    menu_item = MenuItem.init_get_by_id(menu_item_id, restaurant.id_)
    total = menu_item.calculate_total_price(request_body.get('quantity', 1), request_body.get('selections'))
    return Response(status_code=http200, body={'id': menu_item.id_, 'total': total})
