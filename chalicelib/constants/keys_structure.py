users_collection = 'users'
customers_collection = 'customers'
restaurants_collection = 'restaurants'
menu_items_collection = 'menu_items'
orders_collection = 'orders'
reviews_collection = 'reviews'
blog_posts_collection = 'blog_posts'
blog_comments_collection = 'blog_comments'
carts_collection = 'carts'

# DynamoDB item keys
records_pk = '{collection}'
records_sk = '{record_id}'

carts_id = '{user_id}_{restaurant_slug}'
