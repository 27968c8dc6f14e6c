from typing import Dict, List

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth
from chalicelib.utils.exceptions import RestaurantNotFound
from chalicelib.utils.logger import logger


class Restaurant(EntityBase):
    collection = keys_structure.restaurants_collection

    required_immutable_fields_validation = {
        'slug': lambda x: isinstance(x, str) and len(x) > 0,
        'owner_id': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str),
        'active': lambda x: isinstance(x, bool)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str),
        'cuisine': lambda x: isinstance(x, str),
        'address': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'website': lambda x: isinstance(x, str),
        'logo': lambda x: isinstance(x, str),
        'cover_image': lambda x: isinstance(x, str),
        'hours': lambda x: isinstance(x, dict),
        'settings': lambda x: isinstance(x, dict)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.name: str = kwargs.get('name')
        self.slug: str = kwargs.get('slug')
        self.owner_id: str = kwargs.get('owner_id')
        self.description: str = kwargs.get('description')
        self.cuisine: str = kwargs.get('cuisine')
        self.address: str = kwargs.get('address')
        self.phone: str = kwargs.get('phone')
        self.email: str = kwargs.get('email')
        self.website: str = kwargs.get('website')
        self.logo: str = kwargs.get('logo')
        self.cover_image: str = kwargs.get('cover_image')
        self.hours: Dict = kwargs.get('hours') or {}
        self.settings: Dict = kwargs.get('settings') or {}
        self.active: bool = kwargs.get('active', True)
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'restaurant'

    @classmethod
    def init_active_by_slug(cls, slug):
        logger.info(f"init_active_by_slug ::: {slug=}")
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda r: r.get('slug') == slug and r.get('active') is True)\
            .exec()
        if not records:
            raise RestaurantNotFound(f'Restaurant {slug} not found')
        return cls.from_record(records[0])

    @classmethod
    def get_active(cls) -> List['Restaurant']:
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda r: r.get('active') is True)\
            .sort('name')\
            .exec()
        return [cls.from_record(record) for record in records]

    @classmethod
    def get_by_ids(cls, restaurant_ids: List[str]) -> List['Restaurant']:
        ids = set(restaurant_ids)
        records = get_sdk().query_builder(cls.collection).where(lambda r: r.get('id') in ids).exec()
        return [cls.from_record(record) for record in records]

    def create(self) -> Dict:
        return self._create_db_record()

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name,
            'slug': self.slug,
            'owner_id': self.owner_id,
            'description': self.description,
            'cuisine': self.cuisine,
            'address': self.address,
            'phone': self.phone,
            'email': self.email,
            'website': self.website,
            'logo': self.logo,
            'cover_image': self.cover_image,
            'hours': self.hours,
            'settings': self.settings,
            'active': self.active,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_all(request) -> Response:
    restaurants: List[Dict] = [restaurant.to_ui() for restaurant in Restaurant.get_active()]
    logger.info(f"endpoint_get_all ::: returning restaurants={[rest['id'] for rest in restaurants]}")
    return Response(status_code=http200, body=restaurants)


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_by_slug(request, slug) -> Response:
    restaurant = Restaurant.init_active_by_slug(slug).to_ui()
    logger.info(f"endpoint_get_by_slug ::: returning restaurant={restaurant['id']}")
    return Response(status_code=http200, body=restaurant)
