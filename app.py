from chalice import Chalice

from chalicelib import blog, carts, customers, loyalty, menu_items, orders, restaurants, reviews, users

app = Chalice(app_name='restaurant-storefront')

app.debug = True


@app.route('/health-check', methods=['GET'], cors=True)
def health_check():
    return {'health': 'check'}


# USERS
@app.route('/users', methods=['GET'], cors=True)
def get_user():
    return users.endpoint_get_user(app.current_request)


# RESTAURANTS
@app.route('/restaurants', methods=['GET'], cors=True)
def get_restaurants():
    return restaurants.endpoint_get_all(app.current_request)


@app.route('/restaurants/{slug}', methods=['GET'], cors=True)
def get_restaurant(slug):
    return restaurants.endpoint_get_by_slug(app.current_request, slug)


@app.route('/restaurants/{slug}/reviews', methods=['GET'], cors=True)
def get_restaurant_reviews(slug):
    return reviews.endpoint_get_restaurant_reviews(app.current_request, slug)


# MENU ITEMS
@app.route('/restaurants/{slug}/menu', methods=['GET'], cors=True)
def get_restaurant_menu(slug):
    return menu_items.endpoint_get_menu(app.current_request, slug)


@app.route('/restaurants/{slug}/menu/{menu_item_id}', methods=['GET'], cors=True)
def get_menu_item(slug, menu_item_id):
    return menu_items.endpoint_get_menu_item(app.current_request, slug, menu_item_id)


@app.route('/restaurants/{slug}/menu/{menu_item_id}/price', methods=['POST'], cors=True)
def get_menu_item_price(slug, menu_item_id):
    """
    total price of the item with the selected customizations, nothing is stored
    """
    return menu_items.endpoint_get_menu_item_price(app.current_request, slug, menu_item_id)


# CART
@app.route('/carts/{slug}', methods=['GET'], cors=True)
def get_cart(slug):
    return carts.endpoint_get_cart(app.current_request, slug)


@app.route('/carts/{slug}', methods=['POST'], cors=True)
def add_item_to_cart(slug):
    return carts.endpoint_add_item_to_cart(app.current_request, slug)


@app.route('/carts/{slug}/{index}', methods=['PUT'], cors=True)
def update_cart_item(slug, index):
    """
    quantity <= 0 removes the line
    """
    return carts.endpoint_update_cart_item(app.current_request, slug, index)


@app.route('/carts/{slug}/{index}', methods=['DELETE'], cors=True)
def remove_item_from_cart(slug, index):
    return carts.endpoint_remove_item_from_cart(app.current_request, slug, index)


@app.route('/carts/{slug}', methods=['DELETE'], cors=True)
def clear_cart(slug):
    return carts.endpoint_clear_cart(app.current_request, slug)


@app.route('/carts/{slug}/checkout', methods=['POST'], cors=True)
def checkout(slug):
    """
    places the order out of the cart, the cart is cleared after the order is stored
    """
    return orders.endpoint_checkout(app.current_request, slug)


# CUSTOMER ACCOUNT
@app.route('/customers/me', methods=['GET'], cors=True)
def get_customer_account():
    """
    customer profile is created on the first call
    """
    return customers.endpoint_get_account(app.current_request)


@app.route('/customers/me', methods=['PUT'], cors=True)
def update_customer_account():
    return customers.endpoint_update_account(app.current_request)


@app.route('/customers/me/favorites', methods=['GET'], cors=True)
def get_favorite_restaurants():
    return customers.endpoint_get_favorites(app.current_request)


@app.route('/customers/me/favorites', methods=['POST'], cors=True)
def add_favorite_restaurant():
    return customers.endpoint_add_favorite(app.current_request)


@app.route('/customers/me/favorites/{restaurant_id}', methods=['DELETE'], cors=True)
def remove_favorite_restaurant(restaurant_id):
    return customers.endpoint_remove_favorite(app.current_request, restaurant_id)


@app.route('/customers/me/loyalty', methods=['GET'], cors=True)
def get_loyalty():
    return loyalty.endpoint_get_loyalty(app.current_request)


@app.route('/customers/me/loyalty/redeem', methods=['POST'], cors=True)
def redeem_reward():
    return loyalty.endpoint_redeem_reward(app.current_request)


# ORDERS
@app.route('/orders', methods=['GET'], cors=True)
def get_orders():
    """
    customer's orders, newest first, ?status= filters by order status
    """
    return orders.endpoint_get_orders(app.current_request)


@app.route('/orders/{order_id}', methods=['GET'], cors=True)
def get_order(order_id):
    return orders.endpoint_get_order(app.current_request, order_id)


@app.route('/orders/{order_id}/reorder', methods=['POST'], cors=True)
def reorder(order_id):
    return orders.endpoint_reorder(app.current_request, order_id)


@app.route('/orders/{order_id}/cancel', methods=['POST'], cors=True)
def cancel_order(order_id):
    """
    only pending orders can be cancelled
    """
    return orders.endpoint_cancel_order(app.current_request, order_id)


# REVIEWS
@app.route('/reviews', methods=['GET'], cors=True)
def get_customer_reviews():
    return reviews.endpoint_get_customer_reviews(app.current_request)


@app.route('/reviews', methods=['POST'], cors=True)
def submit_review():
    return reviews.endpoint_submit_review(app.current_request)


@app.route('/reviews/{review_id}/helpful', methods=['POST'], cors=True)
def mark_review_helpful(review_id):
    return reviews.endpoint_mark_helpful(app.current_request, review_id)


# BLOG
@app.route('/blog/posts', methods=['GET'], cors=True)
def get_blog_posts():
    """
    query params: search, category (category slug), sort_by (latest | popular | featured)
    """
    return blog.endpoint_get_posts(app.current_request)


@app.route('/blog/categories', methods=['GET'], cors=True)
def get_blog_categories():
    return blog.endpoint_get_categories(app.current_request)


@app.route('/blog/posts/{slug}', methods=['GET'], cors=True)
def get_blog_post(slug):
    return blog.endpoint_get_post(app.current_request, slug)


@app.route('/blog/posts/{slug}/like', methods=['POST'], cors=True)
def like_blog_post(slug):
    return blog.endpoint_like_post(app.current_request, slug)


@app.route('/blog/posts/{slug}/like', methods=['DELETE'], cors=True)
def unlike_blog_post(slug):
    return blog.endpoint_unlike_post(app.current_request, slug)


@app.route('/blog/posts/{slug}/comments', methods=['GET'], cors=True)
def get_blog_comments(slug):
    return blog.endpoint_get_comments(app.current_request, slug)


@app.route('/blog/posts/{slug}/comments', methods=['POST'], cors=True)
def add_blog_comment(slug):
    """
    new comments wait for moderation
    """
    return blog.endpoint_add_comment(app.current_request, slug)
