from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http400, http401
from test.utils.fixtures import chalice_gateway
from test.utils.records import create_test_user, create_test_restaurant, id_user, id_other_user
from test.utils.request_utils import make_request, response_body


def insert_test_review(sdk, restaurant_id, review_date, customer_id=id_user, rating=4):
    return sdk.insert(keys_structure.reviews_collection, {
        'restaurant_id': restaurant_id,
        'customer_id': customer_id,
        'customer_name': 'Jane Doe',
        'rating': rating,
        'comment': 'Tasty',
        'review_date': review_date,
        'verified': True,
        'helpful': 0
    })


def test_submit_review(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()

    response = make_request(chalice_gateway, endpoint="/reviews", method="POST", token=id_user,
                            json_body={'restaurant_id': restaurant['id'], 'rating': 5, 'comment': 'Great pasta'})

    assert response['statusCode'] == http201
    review = response_body(response)['review']
    assert review['customer_id'] == id_user
    assert review['customer_name'] == 'Jane Doe'
    assert review['rating'] == 5
    assert review['verified'] is True
    assert review['helpful'] == 0


def test_submit_review_wrong_rating(chalice_gateway, sdk):
    create_test_user(sdk)
    restaurant = create_test_restaurant()

    response = make_request(chalice_gateway, endpoint="/reviews", method="POST", token=id_user,
                            json_body={'restaurant_id': restaurant['id'], 'rating': 7})

    assert response['statusCode'] == http400
    assert sdk.query_builder(keys_structure.reviews_collection).exec() == []


def test_submit_review_requires_authorization(chalice_gateway):
    response = make_request(chalice_gateway, endpoint="/reviews", method="POST",
                            json_body={'restaurant_id': 'restaurant-1', 'rating': 5})

    assert response['statusCode'] == http401


def test_get_customer_reviews_newest_first(chalice_gateway, sdk):
    create_test_user(sdk)
    old = insert_test_review(sdk, 'restaurant-1', '2024-01-01T10:00:00')
    new = insert_test_review(sdk, 'restaurant-2', '2024-05-01T10:00:00')
    insert_test_review(sdk, 'restaurant-1', '2024-03-01T10:00:00', customer_id=id_other_user)

    response = make_request(chalice_gateway, endpoint="/reviews", token=id_user)

    assert response['statusCode'] == http200
    assert [review['id'] for review in response_body(response)] == [new['id'], old['id']]


def test_get_restaurant_reviews(chalice_gateway, sdk):
    restaurant = create_test_restaurant()
    first = insert_test_review(sdk, restaurant['id'], '2024-01-01T10:00:00')
    second = insert_test_review(sdk, restaurant['id'], '2024-02-01T10:00:00', customer_id=id_other_user)
    insert_test_review(sdk, 'another-restaurant', '2024-03-01T10:00:00')

    response = make_request(chalice_gateway, endpoint="/restaurants/pasta-place/reviews")

    assert response['statusCode'] == http200
    assert [review['id'] for review in response_body(response)] == [second['id'], first['id']]


def test_mark_review_helpful(chalice_gateway, sdk):
    review = insert_test_review(sdk, 'restaurant-1', '2024-01-01T10:00:00')

    for _ in range(2):
        response = make_request(chalice_gateway, endpoint=f"/reviews/{review['id']}/helpful", method="POST")
        assert response['statusCode'] == http200

    assert response_body(response)['helpful'] == 2
    assert sdk.get(keys_structure.reviews_collection, review['id'])['helpful'] == 2
