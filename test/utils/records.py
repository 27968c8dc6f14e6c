from decimal import Decimal
from typing import Dict, List, Optional

from chalicelib.blog import BlogPost
from chalicelib.constants import keys_structure
from chalicelib.menu_items import MenuItem
from chalicelib.restaurants import Restaurant

id_user = 'e5b01491-e538-4be3-8d3c-a57db7fc43c1'
id_other_user = '8178f948-cdc2-4e8c-b013-07a956e7e72a'

PIZZA_CUSTOMIZATIONS = [
    {
        'name': 'Size',
        'type': 'single',
        'required': True,
        'options': [
            {'name': 'Small', 'price': Decimal('0')},
            {'name': 'Large', 'price': Decimal('3.50')}
        ]
    },
    {
        'name': 'Toppings',
        'type': 'multiple',
        'required': False,
        'options': [
            {'name': 'Olives', 'price': Decimal('1.00')},
            {'name': 'Mushrooms', 'price': Decimal('1.25')}
        ]
    }
]


def create_test_user(sdk, user_id: str = id_user, email: str = 'jane@test.com', name: Optional[str] = 'Jane Doe',
                     phone: str = '+15550100', roles: Optional[List[str]] = None) -> Dict:
    return sdk.insert(keys_structure.users_collection, {
        'id': user_id,
        'email': email,
        'name': name,
        'phone': phone,
        'roles': ['customer'] if roles is None else roles
    })


def create_test_restaurant(slug: str = 'pasta-place', name: str = 'Pasta Place', active: bool = True) -> Dict:
    return Restaurant(
        name=name,
        slug=slug,
        owner_id='owner-1',
        description='Fresh pasta every day',
        cuisine='Italian',
        active=active
    ).create()


def create_test_menu_item(restaurant_id: str, name: str = 'Margherita', price: str = '10.00',
                          category: str = 'Pizza', available: bool = True,
                          customizations: Optional[List[Dict]] = None) -> Dict:
    return MenuItem(
        restaurant_id=restaurant_id,
        name=name,
        price=Decimal(price),
        category=category,
        available=available,
        customizations=PIZZA_CUSTOMIZATIONS if customizations is None else customizations
    ).create()


def create_test_post(slug: str, title: str = 'Post title', category: str = 'Restaurant Tips',
                     published: bool = True, published_at: str = '2024-01-10T10:00:00', views: int = 0,
                     likes: int = 0, featured: bool = False, tags: Optional[List[str]] = None,
                     excerpt: str = 'Short excerpt', comments_enabled: bool = True) -> Dict:
    return BlogPost(
        slug=slug,
        title=title,
        category=category,
        published=published,
        published_at=published_at,
        views=views,
        likes=likes,
        featured=featured,
        tags=tags or [],
        excerpt=excerpt,
        content='Post content',
        author={'name': 'Editor'},
        read_time=5,
        comments_enabled=comments_enabled
    ).create()
