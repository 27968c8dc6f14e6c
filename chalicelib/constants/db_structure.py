CUSTOMER = {
    'id_': None,
    'user_id': None,
    'email': None,
    'name': '',
    'phone': '',
    'avatar': None,
    'preferences': {},
    'loyalty_points': 0,
    'total_orders': 0,
    'favorite_restaurants': [],
    'addresses': [],
    'last_order_date': None
}

ORDER = {
    'id_': None,
    'restaurant_id': None,
    'customer_id': None,
    'customer_info': {
        'name': None,
        'email': None,
        'phone': None
    },
    'items': [],
    'subtotal': None,
    'tax': None,
    'tip': None,
    'delivery_fee': None,
    'total': None,
    'status': None,
    'order_type': None,
    'order_date': None,
    'delivery_address': None,
    'notes': None,
    'payment_method': None,
    'payment_status': None
}

REVIEW = {
    'id_': None,
    'restaurant_id': None,
    'order_id': None,
    'customer_id': None,
    'customer_name': None,
    'rating': None,
    'comment': None,
    'review_date': None,
    'verified': True,
    'helpful': 0
}
