from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import TAX_RATE, DELIVERY_FEE, ORDER_TYPE_DELIVERY
from chalicelib.constants.status_codes import http200
from chalicelib.menu_items import MenuItem, Selections
from chalicelib.restaurants import Restaurant
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth, exceptions
from chalicelib.utils.data import parse_raw_body, to_money, to_int
from chalicelib.utils.logger import logger


def line_unit_price(line: Dict) -> Decimal:
    return to_money(line['price']) + sum((to_money(c['price']) for c in line.get('customizations') or []),
                                         Decimal(0))


def to_quantity(value, default: int = 0) -> int:
    if value is None or value == '':
        return default
    try:
        quantity = Decimal(str(value))
    except InvalidOperation:
        raise exceptions.ValidationException(f'quantity must be a whole number, got {value}')
    if not quantity.is_finite() or quantity != quantity.to_integral_value():
        raise exceptions.ValidationException(f'quantity must be a whole number, got {value}')
    return int(quantity)


def line_total(line: Dict) -> Decimal:
    return to_money(line_unit_price(line) * to_int(line['quantity']))


def calculate_totals(items: List[Dict], order_type: Optional[str] = None, tip=None) -> Dict[str, Decimal]:
    subtotal = to_money(sum((line_total(line) for line in items), Decimal(0)))
    tax = to_money(subtotal * TAX_RATE)
    delivery_fee = to_money(DELIVERY_FEE if order_type == ORDER_TYPE_DELIVERY else 0)
    tip = to_money(tip)
    return {
        'subtotal': subtotal,
        'tax': tax,
        'delivery_fee': delivery_fee,
        'tip': tip,
        'total': to_money(subtotal + tax + delivery_fee + tip)
    }


class Cart(EntityBase):
    """
    Items picked in one restaurant by one user, pending checkout.
    Lines with the same menu item and the same customizations are merged into one line.
    """
    collection = keys_structure.carts_collection

    required_immutable_fields_validation = {
        'user_id': lambda x: isinstance(x, str),
        'restaurant_slug': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'items': lambda x: isinstance(x, list)
    }

    def __init__(self, id_=None, user_id=None, restaurant_slug=None, **kwargs):
        EntityBase.__init__(self, id_ or keys_structure.carts_id.format(user_id=user_id,
                                                                      restaurant_slug=restaurant_slug))
        self.user_id: str = user_id
        self.restaurant_slug: str = restaurant_slug
        self.items: List[Dict] = [self._normalize_line(line) for line in kwargs.get('items') or []]
        self.date_updated: str = kwargs.get('date_updated')
        self.persisted: bool = kwargs.get('persisted', False)
        self.record_type = 'cart'

    @staticmethod
    def _normalize_line(line: Dict) -> Dict:
        return {
            **line,
            'price': to_money(line['price']),
            'quantity': to_int(line['quantity']),
            'customizations': [{**c, 'price': to_money(c['price'])} for c in line.get('customizations') or []]
        }

    @classmethod
    def init_by_user(cls, user_id, restaurant_slug):
        cart_id = keys_structure.carts_id.format(user_id=user_id, restaurant_slug=restaurant_slug)
        try:
            return cls.from_record({**get_sdk().get(cls.collection, cart_id), 'persisted': True})
        except exceptions.RecordNotFound:
            logger.info(f"init_by_user ::: no saved cart for {user_id=} {restaurant_slug=}, starting empty")
            return cls(user_id=user_id, restaurant_slug=restaurant_slug)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def find_line(self, menu_item_id: str, customizations: List[Dict]) -> int:
        for index, line in enumerate(self.items):
            if line['id'] == menu_item_id and line['customizations'] == customizations:
                return index
        return -1

    def add_item(self, menu_item: MenuItem, quantity=1, selections: Selections = None,
                 special_instructions: Optional[str] = None) -> Dict:
        quantity = to_quantity(quantity, default=1)
        if quantity <= 0:
            raise exceptions.ValidationException('quantity must be a positive number')
        if not menu_item.available:
            raise exceptions.ItemNotAvailable(f'{menu_item.name} is not available right now')

        customizations = menu_item.build_customizations(selections)
        index = self.find_line(menu_item.id_, customizations)
        if index >= 0:
            self.items[index]['quantity'] += quantity
            return self.items[index]

        line = {
            'id': menu_item.id_,
            'name': menu_item.name,
            'price': menu_item.price,
            'image': menu_item.image,
            'quantity': quantity,
            'customizations': customizations,
            'special_instructions': special_instructions or None
        }
        self.items.append(line)
        return line

    def _check_index(self, index) -> int:
        try:
            index = to_int(index, default=-1)
        except ValueError:
            raise exceptions.ValidationException(f'Cart line index must be a number, got {index}')
        if not 0 <= index < len(self.items):
            raise exceptions.ValidationException(f'Cart line {index} does not exist')
        return index

    def update_quantity(self, index, quantity) -> None:
        index = self._check_index(index)
        quantity = to_quantity(quantity)
        if quantity <= 0:
            self.items.pop(index)
        else:
            self.items[index]['quantity'] = quantity

    def remove_item(self, index) -> Dict:
        return self.items.pop(self._check_index(index))

    def drop_unavailable(self) -> bool:
        """
        :return: True when all items are still available
        """
        if self.is_empty:
            return True
        availability = MenuItem.get_availability([line['id'] for line in self.items])
        items_qnt = len(self.items)
        self.items = [line for line in self.items if availability.get(line['id'], False)]
        return items_qnt == len(self.items)

    def totals(self, order_type: Optional[str] = None, tip=None) -> Dict[str, Decimal]:
        return calculate_totals(self.items, order_type, tip)

    def save(self) -> None:
        if self.persisted:
            self._update_db_record(['items'])
        else:
            self._create_db_record()
            self.persisted = True

    def clear(self) -> None:
        self.items = []
        if self.persisted:
            get_sdk().delete(self.collection, self.id_)
            self.persisted = False
        logger.info(f"clear ::: cart {self.id_} cleared")

    def _to_dict(self):
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'restaurant_slug': self.restaurant_slug,
            'items': self.items
        }

    def to_ui(self, order_type: Optional[str] = None) -> Dict:
        return {
            **self._to_ui(),
            'item_count': sum(line['quantity'] for line in self.items),
            'totals': self.totals(order_type)
        }


def _init_cart(request, slug) -> Cart:
    Restaurant.init_active_by_slug(slug)
    return Cart.init_by_user(request.auth_result['user_id'], slug)


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_cart(request, slug) -> Response:
    cart = _init_cart(request, slug)
    ui_message = None
    if not cart.drop_unavailable():
        cart.save()
        ui_message = 'Some items in your cart are no longer available and were deleted from the cart'
    order_type = (request.query_params or {}).get('order_type')
    return Response(status_code=http200, body={'cart': cart.to_ui(order_type), 'message': ui_message})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_add_item_to_cart(request, slug) -> Response:
    request_body = parse_raw_body(request)
    if not request_body.get('menu_item_id'):
        raise exceptions.MandatoryFieldsAreNotFilled('menu_item_id is required')
    cart = _init_cart(request, slug)
    restaurant = Restaurant.init_active_by_slug(slug)
    menu_item = MenuItem.init_get_by_id(request_body['menu_item_id'], restaurant.id_)
    cart.add_item(
        menu_item,
        quantity=request_body.get('quantity', 1),
        selections=request_body.get('selections'),
        special_instructions=request_body.get('special_instructions')
    )
    cart.save()
    return Response(status_code=http200, body={'cart': cart.to_ui(), 'message': f'{menu_item.name} added to cart!'})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_update_cart_item(request, slug, index) -> Response:
    request_body = parse_raw_body(request)
    if request_body.get('quantity') is None:
        raise exceptions.MandatoryFieldsAreNotFilled('quantity is required')
    cart = _init_cart(request, slug)
    cart.update_quantity(index, request_body['quantity'])
    cart.save()
    return Response(status_code=http200, body={'cart': cart.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_remove_item_from_cart(request, slug, index) -> Response:
    cart = _init_cart(request, slug)
    cart.remove_item(index)
    cart.save()
    return Response(status_code=http200, body={'cart': cart.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_clear_cart(request, slug) -> Response:
    _init_cart(request, slug).clear()
    return Response(status_code=http200, body={'message': 'Cart was successfully cleared'})
