from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.carts import Cart, line_total
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ORDER_TYPES, ORDER_TYPE_DELIVERY, ORDER_TYPE_TAKEOUT, ORDER_STATUSES, \
    ORDER_STATUS_PENDING, ORDER_STATUS_CANCELLED, PAYMENT_STATUS_PAID, PAYMENT_STATUS_PENDING, PAYMENT_STATUSES, \
    PAYMENT_METHOD_TYPES
from chalicelib.constants.status_codes import http200, http201
from chalicelib.customers import CustomerAccount
from chalicelib.restaurants import Restaurant
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth, exceptions
from chalicelib.utils.data import parse_raw_body, to_money
from chalicelib.utils.logger import logger

# never stored with the order
PAYMENT_SECRET_FIELDS = ('card_number', 'cvv', 'expiry_date')


class Order(EntityBase):
    collection = keys_structure.orders_collection

    required_mutable_fields_validation = {
        'status': lambda x: x in ORDER_STATUSES,
        'payment_status': lambda x: x in PAYMENT_STATUSES
    }

    optional_fields_validation = {
        'tip': lambda x: isinstance(x, Decimal),
        'customer_info': lambda x: isinstance(x, dict),
        'delivery_address': lambda x: isinstance(x, (str, dict)),
        'notes': lambda x: isinstance(x, str),
        'payment_method': lambda x: isinstance(x, dict)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.customer_id: str = kwargs.get('customer_id')
        self.customer_info: Dict = kwargs.get('customer_info') or {}
        self.items: List[Dict] = kwargs.get('items') or []
        self.subtotal: Decimal = to_money(kwargs.get('subtotal'))
        self.tax: Decimal = to_money(kwargs.get('tax'))
        self.delivery_fee: Decimal = to_money(kwargs.get('delivery_fee'))
        self.tip: Decimal = to_money(kwargs.get('tip'))
        self.total: Decimal = to_money(kwargs.get('total'))
        self.status: str = kwargs.get('status', ORDER_STATUS_PENDING)
        self.order_type: str = kwargs.get('order_type')
        self.order_date: str = kwargs.get('order_date')
        self.delivery_address = kwargs.get('delivery_address')
        self.notes: str = kwargs.get('notes')
        self.payment_method: Dict = kwargs.get('payment_method')
        self.payment_status: str = kwargs.get('payment_status', PAYMENT_STATUS_PENDING)
        self.date_created: str = kwargs.get('date_created')
        self.date_updated: str = kwargs.get('date_updated')
        self.record_type = 'order'

    @classmethod
    def init_customer_order(cls, order_id, customer_id):
        """
        Order is visible only to the customer who placed it
        """
        try:
            order = cls.init_by_id(order_id)
        except exceptions.RecordNotFound:
            raise exceptions.OrderNotFound(f'Order {order_id} not found')
        if order.customer_id != customer_id:
            logger.warning(f"init_customer_order ::: order {order_id} belongs to another customer")
            raise exceptions.OrderNotFound(f'Order {order_id} not found')
        return order

    @classmethod
    def get_customer_orders(cls, customer_id, status: Optional[str] = None) -> List['Order']:
        query = get_sdk().query_builder(cls.collection).where(lambda o: o.get('customer_id') == customer_id)
        if status:
            query = query.where(lambda o: o.get('status') == status)
        return [cls.from_record(record) for record in query.sort('order_date', 'desc').exec()]

    def reorder_data(self) -> Dict:
        return {
            'restaurant_id': self.restaurant_id,
            'items': self.items,
            'subtotal': self.subtotal,
            'tax': self.tax,
            'delivery_fee': self.delivery_fee,
            'tip': self.tip,
            'total': self.total,
            'order_type': self.order_type,
            'delivery_address': self.delivery_address,
            'notes': self.notes,
            'payment_method': self.payment_method,
            'payment_status': PAYMENT_STATUS_PENDING
        }

    def cancel(self) -> Dict:
        if self.status != ORDER_STATUS_PENDING:
            raise exceptions.ValidationException(f'Order in status {self.status} can not be cancelled')
        self.status = ORDER_STATUS_CANCELLED
        return self._update_db_record(['status'])

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'customer_id': self.customer_id,
            'customer_info': self.customer_info,
            'items': self.items,
            'subtotal': self.subtotal,
            'tax': self.tax,
            'delivery_fee': self.delivery_fee,
            'tip': self.tip,
            'total': self.total,
            'status': self.status,
            'order_type': self.order_type,
            'order_date': self.order_date,
            'delivery_address': self.delivery_address,
            'notes': self.notes,
            'payment_method': self.payment_method,
            'payment_status': self.payment_status,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def sanitize_payment_method(payment_method) -> Dict:
    if isinstance(payment_method, str):
        payment_method = {'type': payment_method}
    payment_method = dict(payment_method or {'type': 'cash'})
    if payment_method.get('type') not in PAYMENT_METHOD_TYPES:
        raise exceptions.ValidationException(f'Payment method must be one of {", ".join(PAYMENT_METHOD_TYPES)}')
    card_number = str(payment_method.get('card_number') or '').replace(' ', '')
    if card_number:
        payment_method['last4'] = card_number[-4:]
    for field in PAYMENT_SECRET_FIELDS:
        payment_method.pop(field, None)
    return payment_method


def parse_tip(tip) -> Decimal:
    try:
        tip = to_money(tip)
    except (InvalidOperation, TypeError, ValueError):
        raise exceptions.ValidationException(f'tip must be a number, got {tip}')
    if not tip.is_finite() or tip < 0:
        raise exceptions.ValidationException('tip can not be negative')
    return tip


def build_order_data(cart: Cart, restaurant: Restaurant, request_body: Dict) -> Dict:
    """
    Order data out of the cart lines and the checkout form
    """
    order_type = request_body.get('order_type', ORDER_TYPE_TAKEOUT)
    if order_type not in ORDER_TYPES:
        raise exceptions.ValidationException(f'Order type must be one of {", ".join(ORDER_TYPES)}')
    delivery_address = request_body.get('delivery_address') if order_type == ORDER_TYPE_DELIVERY else None
    if order_type == ORDER_TYPE_DELIVERY and not delivery_address:
        raise exceptions.MandatoryFieldsAreNotFilled('delivery_address is required for delivery orders')
    payment_method = sanitize_payment_method(request_body.get('payment_method'))
    totals = cart.totals(order_type, parse_tip(request_body.get('tip')))
    return {
        'restaurant_id': restaurant.id_,
        'items': [{
            'menu_item_id': line['id'],
            'name': line['name'],
            'price': line['price'],
            'quantity': line['quantity'],
            'customizations': line['customizations'],
            'special_instructions': line.get('special_instructions'),
            'total': line_total(line)
        } for line in cart.items],
        **totals,
        'order_type': order_type,
        'customer_info': request_body.get('customer_info') or {},
        'delivery_address': delivery_address,
        'notes': request_body.get('notes'),
        'payment_method': payment_method,
        'payment_status': PAYMENT_STATUS_PAID if payment_method['type'] == 'card' else PAYMENT_STATUS_PENDING
    }


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_checkout(request, slug) -> Response:
    account = CustomerAccount.init_request_account(request)
    restaurant = Restaurant.init_active_by_slug(slug)
    cart = Cart.init_by_user(account.user_id, slug)
    if not cart.drop_unavailable():
        cart.save()
        raise exceptions.ItemNotAvailable('Some items in your cart are no longer available, please review the cart')
    if cart.is_empty:
        raise exceptions.EmptyCart('Your cart is empty')
    order = account.place_order(build_order_data(cart, restaurant, parse_raw_body(request)))
    cart.clear()
    return Response(status_code=http201, body={'order': order, 'message': 'Order placed successfully!'})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_orders(request) -> Response:
    status = (request.query_params or {}).get('status')
    orders = Order.get_customer_orders(request.auth_result['user_id'], status)
    logger.info(f"endpoint_get_orders ::: returning {len(orders)} orders, {status=}")
    return Response(status_code=http200, body=[order.to_ui() for order in orders])


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_order(request, order_id) -> Response:
    order = Order.init_customer_order(order_id, request.auth_result['user_id'])
    return Response(status_code=http200, body=order.to_ui())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_reorder(request, order_id) -> Response:
    account = CustomerAccount.init_request_account(request)
    order = Order.init_customer_order(order_id, account.user_id)
    new_order = account.place_order(order.reorder_data())
    return Response(status_code=http201, body={
        'order': new_order,
        'message': 'Order placed successfully! You can track it in your orders.'
    })


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_cancel_order(request, order_id) -> Response:
    order = Order.init_customer_order(order_id, request.auth_result['user_id'])
    order.cancel()
    return Response(status_code=http200, body={'order': order.to_ui(), 'message': 'Order cancelled'})
