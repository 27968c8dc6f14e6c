from decimal import Decimal

import pytest

from chalicelib.carts import Cart, calculate_totals, to_quantity
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http400, http401, http404
from chalicelib.menu_items import MenuItem
from chalicelib.utils import exceptions
from test.utils.fixtures import chalice_gateway
from test.utils.records import create_test_user, create_test_restaurant, create_test_menu_item, id_user
from test.utils.request_utils import make_request, response_body


@pytest.fixture
def pizza():
    restaurant = create_test_restaurant()
    return MenuItem.from_record(create_test_menu_item(restaurant['id']))


def test_add_same_item_and_customizations_merges_lines(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')

    cart.add_item(pizza, 1, {'Size': 'Large', 'Toppings': ['Olives']})
    cart.add_item(pizza, 2, {'Size': 'Large', 'Toppings': ['Olives']})

    assert len(cart.items) == 1
    assert cart.items[0]['quantity'] == 3


def test_add_item_with_other_customizations_adds_line(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')

    cart.add_item(pizza, 1, {'Size': 'Large'})
    cart.add_item(pizza, 1, {'Size': 'Small'})
    cart.add_item(pizza, 1, {'Size': 'Large', 'Toppings': ['Olives']})
    cart.add_item(pizza, 1, {'Size': 'Large'})

    assert [line['quantity'] for line in cart.items] == [2, 1, 1]
    assert cart.items[2]['customizations'] == [
        {'name': 'Size', 'option': 'Large', 'price': Decimal('3.50')},
        {'name': 'Toppings', 'option': 'Olives', 'price': Decimal('1.00')}
    ]


def test_add_item_without_required_customization(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')

    with pytest.raises(exceptions.CustomizationRequired):
        cart.add_item(pizza, 1, {'Toppings': ['Olives']})
    assert cart.is_empty


def test_add_item_with_two_options_of_single_customization(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')

    with pytest.raises(exceptions.ValidationException):
        cart.add_item(pizza, 1, {'Size': ['Small', 'Large']})


def test_add_unavailable_item(pizza):
    pizza.available = False
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')

    with pytest.raises(exceptions.ItemNotAvailable):
        cart.add_item(pizza, 1, {'Size': 'Small'})


def test_update_quantity_and_remove(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')
    cart.add_item(pizza, 1, {'Size': 'Large'})
    cart.add_item(pizza, 1, {'Size': 'Small'})

    cart.update_quantity(0, 5)
    assert cart.items[0]['quantity'] == 5

    cart.update_quantity(0, 0)
    assert [line['customizations'][0]['option'] for line in cart.items] == ['Small']

    with pytest.raises(exceptions.ValidationException):
        cart.remove_item(3)
    cart.remove_item(0)
    assert cart.is_empty


def test_totals(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')
    cart.add_item(pizza, 2, {'Size': 'Large'})

    assert cart.totals('takeout') == {
        'subtotal': Decimal('27.00'),
        'tax': Decimal('2.16'),
        'delivery_fee': Decimal('0.00'),
        'tip': Decimal('0.00'),
        'total': Decimal('29.16')
    }
    assert cart.totals('delivery', tip=Decimal('2')) == {
        'subtotal': Decimal('27.00'),
        'tax': Decimal('2.16'),
        'delivery_fee': Decimal('3.99'),
        'tip': Decimal('2.00'),
        'total': Decimal('35.15')
    }


def test_calculate_totals_of_empty_cart():
    assert calculate_totals([], 'delivery')['total'] == Decimal('3.99')
    assert calculate_totals([])['total'] == Decimal('0.00')


def test_cart_is_saved_per_user_and_restaurant(pizza, sdk):
    cart = Cart.init_by_user(id_user, 'pasta-place')
    cart.add_item(pizza, 2, {'Size': 'Small'})
    cart.save()

    record = sdk.get(keys_structure.carts_collection, f'{id_user}_pasta-place')
    assert record['items'][0]['quantity'] == 2

    cart = Cart.init_by_user(id_user, 'pasta-place')
    assert cart.persisted
    cart.add_item(pizza, 1, {'Size': 'Small'})
    cart.save()
    assert Cart.init_by_user(id_user, 'pasta-place').items[0]['quantity'] == 3
    assert Cart.init_by_user('another-user', 'pasta-place').is_empty

    cart.clear()
    with pytest.raises(exceptions.RecordNotFound):
        sdk.get(keys_structure.carts_collection, f'{id_user}_pasta-place')


def add_test_item_to_cart(chalice_gateway, menu_item_id, quantity=1, selections=None):
    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", method="POST", token=id_user,
                            json_body={'menu_item_id': menu_item_id, 'quantity': quantity,
                                       'selections': {'Size': 'Large'} if selections is None else selections})
    assert response['statusCode'] == http200, "status code not as expected"
    return response_body(response)


def test_add_item_to_cart(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()
    menu_item = create_test_menu_item(restaurant['id'])

    add_test_item_to_cart(chalice_gateway, menu_item['id'], 1)
    body = add_test_item_to_cart(chalice_gateway, menu_item['id'], 1)

    assert body['message'] == 'Margherita added to cart!'
    assert body['cart']['id'] == f'{id_user}_pasta-place'
    assert body['cart']['item_count'] == 2
    assert len(body['cart']['items']) == 1
    assert body['cart']['totals']['subtotal'] == 27.0


def test_get_cart_with_totals_for_delivery(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()
    menu_item = create_test_menu_item(restaurant['id'])
    add_test_item_to_cart(chalice_gateway, menu_item['id'], 2)

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", query='order_type=delivery',
                            token=id_user)

    assert response['statusCode'] == http200
    body = response_body(response)
    assert body['message'] is None
    assert body['cart']['totals'] == {
        'subtotal': 27.0, 'tax': 2.16, 'delivery_fee': 3.99, 'tip': 0.0, 'total': 33.15
    }


def test_get_cart_drops_unavailable_items(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()
    pizza = create_test_menu_item(restaurant['id'])
    salad = create_test_menu_item(restaurant['id'], name='Caesar Salad', category='Salads', price='8.00',
                                  customizations=[])
    add_test_item_to_cart(chalice_gateway, pizza['id'])
    add_test_item_to_cart(chalice_gateway, salad['id'], selections={})
    sdk.update(keys_structure.menu_items_collection, salad['id'], {'available': False})

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", token=id_user)

    body = response_body(response)
    assert [line['name'] for line in body['cart']['items']] == ['Margherita']
    assert body['message'] is not None
    record = sdk.get(keys_structure.carts_collection, f'{id_user}_pasta-place')
    assert len(record['items']) == 1


def test_update_and_remove_cart_lines(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()
    menu_item = create_test_menu_item(restaurant['id'])
    add_test_item_to_cart(chalice_gateway, menu_item['id'], selections={'Size': 'Large'})
    add_test_item_to_cart(chalice_gateway, menu_item['id'], selections={'Size': 'Small'})

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place/1", method="PUT", token=id_user,
                            json_body={'quantity': 4})
    assert response['statusCode'] == http200
    assert [line['quantity'] for line in response_body(response)['cart']['items']] == [1, 4]

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place/0", method="DELETE", token=id_user)
    assert response['statusCode'] == http200
    assert response_body(response)['cart']['item_count'] == 4

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place/7", method="DELETE", token=id_user)
    assert response['statusCode'] == http400


def test_clear_cart(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()
    menu_item = create_test_menu_item(restaurant['id'])
    add_test_item_to_cart(chalice_gateway, menu_item['id'])

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", method="DELETE", token=id_user)

    assert response['statusCode'] == http200
    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", token=id_user)
    assert response_body(response)['cart']['items'] == []


def test_cart_of_unknown_restaurant(chalice_gateway, sdk):
    create_test_user(sdk)

    response = make_request(chalice_gateway, endpoint="/carts/no-such-place", token=id_user)

    assert response['statusCode'] == http404


def test_cart_requires_authorization(chalice_gateway):
    create_test_restaurant()

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place")

    assert response['statusCode'] == http401


def test_to_quantity():
    assert to_quantity('3') == 3
    assert to_quantity(Decimal('2.0')) == 2
    assert to_quantity(None, default=1) == 1
    for quantity in ('two', Decimal('2.5'), 'Infinity', True):
        with pytest.raises(exceptions.ValidationException):
            to_quantity(quantity)


def test_add_item_with_fractional_quantity(pizza):
    cart = Cart(user_id=id_user, restaurant_slug='pasta-place')

    with pytest.raises(exceptions.ValidationException):
        cart.add_item(pizza, Decimal('2.5'), {'Size': 'Large'})
    assert cart.is_empty


def test_wrong_quantity_from_request(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()
    menu_item = create_test_menu_item(restaurant['id'])
    add_test_item_to_cart(chalice_gateway, menu_item['id'])

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place/0", method="PUT", token=id_user,
                            json_body={'quantity': 'two'})
    assert response['statusCode'] == http400

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", method="POST", token=id_user,
                            json_body={'menu_item_id': menu_item['id'], 'quantity': 2.5,
                                       'selections': {'Size': 'Large'}})
    assert response['statusCode'] == http400

    response = make_request(chalice_gateway, endpoint="/carts/pasta-place", token=id_user)
    assert response_body(response)['cart']['items'][0]['quantity'] == 1
