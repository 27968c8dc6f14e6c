from copy import deepcopy
from typing import Dict, List, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure, db_structure
from chalicelib.constants.constants import ANONYMOUS_NAME, ORDER_STATUS_PENDING, PAYMENT_STATUS_PENDING
from chalicelib.constants.status_codes import http200
from chalicelib.restaurants import Restaurant
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth, exceptions
from chalicelib.utils.data import parse_raw_body, to_int, floor_int, now_iso
from chalicelib.utils.logger import logger


class Customer(EntityBase):
    collection = keys_structure.customers_collection

    required_immutable_fields_validation = {
        'email': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'loyalty_points': lambda x: isinstance(x, int) and x >= 0,
        'total_orders': lambda x: isinstance(x, int) and x >= 0,
        'favorite_restaurants': lambda x: isinstance(x, list),
        'addresses': lambda x: isinstance(x, list),
        'preferences': lambda x: isinstance(x, dict)
    }

    optional_fields_validation = {
        'user_id': lambda x: isinstance(x, str),
        'name': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'avatar': lambda x: isinstance(x, str),
        'last_order_date': lambda x: isinstance(x, str)
    }

    # fields a customer can change from the profile page
    profile_fields = ['name', 'phone', 'avatar', 'preferences', 'addresses']

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.user_id: str = kwargs.get('user_id')
        self.email: str = kwargs.get('email')
        self.name: str = kwargs.get('name') or ''
        self.phone: str = kwargs.get('phone') or ''
        self.avatar: str = kwargs.get('avatar')
        self.preferences: Dict = kwargs.get('preferences') or {}
        self.loyalty_points: int = to_int(kwargs.get('loyalty_points'))
        self.total_orders: int = to_int(kwargs.get('total_orders'))
        self.favorite_restaurants: List[str] = list(kwargs.get('favorite_restaurants') or [])
        self.addresses: List = list(kwargs.get('addresses') or [])
        self.last_order_date: str = kwargs.get('last_order_date')
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'customer'

    @classmethod
    def init_for_user(cls, user_id, email) -> Optional['Customer']:
        """
        Profile is found by email, users without an email by their user id
        """
        if email:
            query = get_sdk().query_builder(cls.collection).where(lambda c: c.get('email') == email)
        else:
            query = get_sdk().query_builder(cls.collection).where(lambda c: c.get('user_id') == user_id)
        records = query.limit(1).exec()
        return cls.from_record(records[0]) if records else None

    def _to_dict(self):
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'avatar': self.avatar,
            'preferences': self.preferences,
            'loyalty_points': self.loyalty_points,
            'total_orders': self.total_orders,
            'favorite_restaurants': self.favorite_restaurants,
            'addresses': self.addresses,
            'last_order_date': self.last_order_date,
            'date_created': self.date_created
        }


class CustomerAccount:
    """
    Customer profile, orders and reviews of the authenticated user.
    Every change is written through the sdk first, local state is replaced only after the call succeeded.
    A failed sdk call is logged and raised as OperationFailed with the message for the customer.
    """

    def __init__(self, user: Dict):
        self.user: Dict = user
        self.customer: Optional[Customer] = None
        self.orders: List[Dict] = []
        self.reviews: List[Dict] = []

    @classmethod
    @utils_auth.authenticate_class
    def init_request_account(cls, request):
        logger.info("init_request_account ::: started")
        if 'customer' not in (request.auth_result.get('roles') or []):
            raise exceptions.AccessDenied('Customer account is available only for customers')
        account = cls(request.auth_result)
        account.load_customer_data()
        return account

    @property
    def user_id(self) -> str:
        return self.user['user_id']

    @property
    def email(self) -> str:
        return self.user.get('email') or ''

    @property
    def favorite_restaurants(self) -> List[str]:
        return list(self.customer.favorite_restaurants) if self.customer else []

    @property
    def loyalty_points(self) -> int:
        return self.customer.loyalty_points if self.customer else 0

    def _require_customer(self) -> Customer:
        if self.customer is None:
            raise exceptions.CustomerProfileMissing('Customer profile is not loaded')
        return self.customer

    def load_customer_data(self) -> None:
        sdk = get_sdk()
        try:
            customer = Customer.init_for_user(self.user_id, self.email)
            if customer is None:
                logger.info(f"load_customer_data ::: no profile for user {self.user_id}, creating")
                customer = Customer.from_record(sdk.insert(Customer.collection, self._new_profile()))
            orders = sdk.query_builder(keys_structure.orders_collection)\
                .where(lambda order: order.get('customer_id') == self.user_id)\
                .sort('order_date', 'desc')\
                .exec()
            reviews = sdk.query_builder(keys_structure.reviews_collection)\
                .where(lambda review: review.get('customer_id') == self.user_id)\
                .sort('review_date', 'desc')\
                .exec()
        except Exception as error:
            logger.exception(f"load_customer_data ::: failed for user {self.user_id}, {error=}")
            raise exceptions.OperationFailed('Failed to load customer data') from error
        self.customer, self.orders, self.reviews = customer, orders, reviews

    def _new_profile(self, data: Optional[Dict] = None) -> Dict:
        profile = deepcopy(db_structure.CUSTOMER)
        profile.pop('id_')
        profile.update({
            'name': self.user.get('name') or '',
            'phone': self.user.get('phone') or ''
        })
        profile.update({key: value for key, value in (data or {}).items() if key in Customer.profile_fields})
        profile.update({
            'user_id': self.user_id,
            'email': self.email or (data or {}).get('email') or ''
        })
        return profile

    def create_customer(self, data: Dict) -> Dict:
        if self.customer is not None:
            raise exceptions.ValidationException('Customer profile already exists')
        try:
            record = get_sdk().insert(Customer.collection, self._new_profile(data))
        except Exception as error:
            logger.exception(f"create_customer ::: failed for user {self.user_id}, {error=}")
            raise exceptions.OperationFailed('Failed to create customer profile') from error
        self.customer = Customer.from_record(record)
        logger.info(f"create_customer ::: customer {self.customer.id_} created")
        return record

    def _update_customer(self, fields: Dict, error_message: str) -> Dict:
        customer = self._require_customer()
        try:
            record = get_sdk().update(Customer.collection, customer.id_, fields)
        except Exception as error:
            logger.exception(f"_update_customer ::: customer {customer.id_} update failed, {error=}")
            raise exceptions.OperationFailed(error_message) from error
        self.customer = Customer.from_record(record)
        return record

    def update_customer(self, data: Dict) -> Optional[Dict]:
        if self.customer is None:
            return None
        fields = {key: value for key, value in data.items() if key in Customer.profile_fields}
        for key, value in fields.items():
            validator = Customer.required_mutable_fields_validation.get(key) or \
                Customer.optional_fields_validation.get(key)
            if validator(value) is False:
                raise exceptions.ValidationException(f'Validation error occurred while validating customer field={key}')
        return self._update_customer(fields, 'Failed to update profile')

    def add_to_favorites(self, restaurant_id: str) -> List[str]:
        favorites = self._require_customer().favorite_restaurants
        if restaurant_id not in favorites:
            self._update_customer({'favorite_restaurants': [*favorites, restaurant_id]},
                                  'Failed to add to favorites')
        return self.favorite_restaurants

    def remove_from_favorites(self, restaurant_id: str) -> List[str]:
        favorites = self._require_customer().favorite_restaurants
        if restaurant_id in favorites:
            self._update_customer({'favorite_restaurants': [r for r in favorites if r != restaurant_id]},
                                  'Failed to remove from favorites')
        return self.favorite_restaurants

    def spend_points(self, points: int) -> Dict:
        customer = self._require_customer()
        return self._update_customer({'loyalty_points': customer.loyalty_points - points}, 'Failed to redeem reward')

    def place_order(self, order_data: Dict) -> Dict:
        """
        Stores the order of the customer and updates the customer's stats:
        total_orders + 1, loyalty_points + floor(order total), last_order_date
        """
        customer = self._require_customer()
        order_date = now_iso()
        order_record = deepcopy(db_structure.ORDER)
        order_record.pop('id_')
        order_record.update({
            **order_data,
            'customer_id': self.user_id,
            'customer_info': {
                'name': customer.name or self.user.get('name') or '',
                'email': customer.email,
                'phone': customer.phone or '',
                **(order_data.get('customer_info') or {})
            },
            'order_date': order_date,
            'status': ORDER_STATUS_PENDING,
            'payment_status': order_data.get('payment_status') or PAYMENT_STATUS_PENDING
        })
        sdk = get_sdk()
        try:
            order = sdk.insert(keys_structure.orders_collection, order_record)
            customer_record = sdk.update(Customer.collection, customer.id_, {
                'total_orders': customer.total_orders + 1,
                'loyalty_points': customer.loyalty_points + floor_int(order['total']),
                'last_order_date': order_date
            })
        except Exception as error:
            logger.exception(f"place_order ::: failed for customer {customer.id_}, {error=}")
            raise exceptions.OperationFailed('Failed to place order') from error
        self.customer = Customer.from_record(customer_record)
        self.orders.insert(0, order)
        logger.info(f"place_order ::: order {order['id']} placed, loyalty_points={self.customer.loyalty_points}")
        return order

    def submit_review(self, review_data: Dict) -> Dict:
        customer = self._require_customer()
        rating = review_data.get('rating')
        try:
            rating = to_int(rating, default=-1)
        except (TypeError, ValueError):
            rating = -1
        if not 1 <= rating <= 5:
            raise exceptions.ValidationException('rating must be a number from 1 to 5')
        if not review_data.get('restaurant_id'):
            raise exceptions.MandatoryFieldsAreNotFilled('restaurant_id is required')

        review_record = deepcopy(db_structure.REVIEW)
        review_record.pop('id_')
        review_record.update({
            **review_data,
            'rating': rating,
            'customer_id': self.user_id,
            'customer_name': customer.name or self.user.get('name') or ANONYMOUS_NAME,
            'review_date': now_iso(),
            'verified': True,
            'helpful': 0
        })
        try:
            review = get_sdk().insert(keys_structure.reviews_collection, review_record)
        except Exception as error:
            logger.exception(f"submit_review ::: failed for customer {customer.id_}, {error=}")
            raise exceptions.OperationFailed('Failed to submit review') from error
        self.reviews.insert(0, review)
        return review

    def to_ui(self) -> Dict:
        return {
            'customer': self.customer.to_ui() if self.customer else None,
            'orders': self.orders,
            'reviews': self.reviews,
            'favorite_restaurants': self.favorite_restaurants,
            'loyalty_points': self.loyalty_points
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_account(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    return Response(status_code=http200, body=account.to_ui())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_update_account(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    record = account.update_customer(parse_raw_body(request))
    return Response(status_code=http200, body={'customer': record, 'message': 'Profile updated successfully!'})


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_favorites(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    restaurants = Restaurant.get_by_ids(account.favorite_restaurants)
    return Response(status_code=http200, body=[restaurant.to_ui() for restaurant in restaurants if restaurant.active])


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_add_favorite(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    restaurant_id = parse_raw_body(request).get('restaurant_id')
    if not restaurant_id:
        raise exceptions.MandatoryFieldsAreNotFilled('restaurant_id is required')
    favorites = account.add_to_favorites(restaurant_id)
    return Response(status_code=http200, body={'favorite_restaurants': favorites, 'message': 'Added to favorites!'})


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_remove_favorite(request, restaurant_id) -> Response:
    account = CustomerAccount.init_request_account(request)
    favorites = account.remove_from_favorites(restaurant_id)
    return Response(status_code=http200,
                    body={'favorite_restaurants': favorites, 'message': 'Removed from favorites!'})
