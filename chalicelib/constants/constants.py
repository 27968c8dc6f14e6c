import os
from decimal import Decimal

ANONYMOUS_NAME = 'Anonymous'

TAX_RATE = Decimal(os.environ.get('TAX_RATE', '0.08'))
DELIVERY_FEE = Decimal(os.environ.get('DELIVERY_FEE', '3.99'))

ORDER_TYPE_DINE_IN = 'dine-in'
ORDER_TYPE_TAKEOUT = 'takeout'
ORDER_TYPE_DELIVERY = 'delivery'
ORDER_TYPES = (ORDER_TYPE_DINE_IN, ORDER_TYPE_TAKEOUT, ORDER_TYPE_DELIVERY)

ORDER_STATUS_PENDING = 'pending'
ORDER_STATUS_CANCELLED = 'cancelled'
ORDER_STATUSES = ('pending', 'confirmed', 'preparing', 'ready', 'delivered', 'completed', 'cancelled')

PAYMENT_STATUS_PENDING = 'pending'
PAYMENT_STATUS_PAID = 'paid'
PAYMENT_STATUSES = ('pending', 'paid', 'failed', 'refunded')
PAYMENT_METHOD_TYPES = ('card', 'cash', 'digital_wallet')

CUSTOMIZATION_SINGLE = 'single'
CUSTOMIZATION_MULTIPLE = 'multiple'

COMMENT_STATUS_PENDING = 'pending'
COMMENT_STATUS_APPROVED = 'approved'

BLOG_SORT_LATEST = 'latest'
BLOG_SORT_POPULAR = 'popular'
BLOG_SORT_FEATURED = 'featured'
RELATED_POSTS_LIMIT = 3

LOYALTY_TIERS = [
    {'name': 'Bronze', 'min_points': 0, 'max_points': 499,
     'benefits': ['5% discount on orders']},
    {'name': 'Silver', 'min_points': 500, 'max_points': 999,
     'benefits': ['10% discount', 'Free delivery']},
    {'name': 'Gold', 'min_points': 1000, 'max_points': 1999,
     'benefits': ['15% discount', 'Free delivery', 'Priority support']},
    {'name': 'Platinum', 'min_points': 2000, 'max_points': None,
     'benefits': ['20% discount', 'Free delivery', 'Priority support', 'Exclusive offers']},
]

LOYALTY_REWARDS = [
    {'id': 'free-appetizer', 'name': 'Free Appetizer', 'points': 100,
     'description': 'Get a free appetizer with your next order'},
    {'id': 'free-delivery', 'name': 'Free Delivery', 'points': 150,
     'description': 'Free delivery on your next order'},
    {'id': 'free-dessert', 'name': 'Free Dessert', 'points': 200,
     'description': 'Complimentary dessert with main course'},
    {'id': 'five-off', 'name': '$5 Off', 'points': 250,
     'description': '$5 discount on orders over $25'},
    {'id': 'ten-off', 'name': '$10 Off', 'points': 500,
     'description': '$10 discount on orders over $50'},
    {'id': 'vip-experience', 'name': 'VIP Experience', 'points': 1000,
     'description': 'Priority seating and special treatment'},
]
