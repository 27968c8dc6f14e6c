from typing import Dict, List

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201
from chalicelib.customers import CustomerAccount
from chalicelib.restaurants import Restaurant
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth
from chalicelib.utils.data import parse_raw_body, to_int
from chalicelib.utils.logger import logger


class Review(EntityBase):
    collection = keys_structure.reviews_collection

    required_immutable_fields_validation = {
        'restaurant_id': lambda x: isinstance(x, str),
        'customer_id': lambda x: isinstance(x, str),
        'rating': lambda x: isinstance(x, int) and 1 <= x <= 5,
        'review_date': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'helpful': lambda x: isinstance(x, int) and x >= 0
    }

    optional_fields_validation = {
        'order_id': lambda x: isinstance(x, str),
        'customer_name': lambda x: isinstance(x, str),
        'comment': lambda x: isinstance(x, str),
        'verified': lambda x: isinstance(x, bool)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.customer_id: str = kwargs.get('customer_id')
        self.customer_name: str = kwargs.get('customer_name')
        self.order_id: str = kwargs.get('order_id')
        self.rating: int = to_int(kwargs.get('rating'))
        self.comment: str = kwargs.get('comment')
        self.review_date: str = kwargs.get('review_date')
        self.verified: bool = kwargs.get('verified', False)
        self.helpful: int = to_int(kwargs.get('helpful'))
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'review'

    @classmethod
    def _get_reviews(cls, predicate) -> List['Review']:
        records = get_sdk().query_builder(cls.collection).where(predicate).sort('review_date', 'desc').exec()
        return [cls.from_record(record) for record in records]

    @classmethod
    def get_customer_reviews(cls, customer_id) -> List['Review']:
        return cls._get_reviews(lambda r: r.get('customer_id') == customer_id)

    @classmethod
    def get_restaurant_reviews(cls, restaurant_id) -> List['Review']:
        return cls._get_reviews(lambda r: r.get('restaurant_id') == restaurant_id)

    def mark_helpful(self) -> Dict:
        self.helpful += 1
        return self._update_db_record(['helpful'])

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'customer_id': self.customer_id,
            'customer_name': self.customer_name,
            'order_id': self.order_id,
            'rating': self.rating,
            'comment': self.comment,
            'review_date': self.review_date,
            'verified': self.verified,
            'helpful': self.helpful,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_customer_reviews(request) -> Response:
    reviews = Review.get_customer_reviews(request.auth_result['user_id'])
    return Response(status_code=http200, body=[review.to_ui() for review in reviews])


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_restaurant_reviews(request, slug) -> Response:
    restaurant = Restaurant.init_active_by_slug(slug)
    reviews = [review.to_ui() for review in Review.get_restaurant_reviews(restaurant.id_)]
    logger.info(f"endpoint_get_restaurant_reviews ::: returning {len(reviews)} reviews of {restaurant.id_}")
    return Response(status_code=http200, body=reviews)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_submit_review(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    review = account.submit_review(parse_raw_body(request))
    return Response(status_code=http201, body={'review': review, 'message': 'Review submitted successfully!'})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_mark_helpful(request, review_id) -> Response:
    review = Review.init_by_id(review_id)
    review.mark_helpful()
    return Response(status_code=http200, body=review.to_ui())
