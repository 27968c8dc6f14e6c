import pytest

from chalicelib.blog import BlogPost, filter_posts, get_categories, slugify
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http400, http404
from chalicelib.utils import exceptions
from test.utils.fixtures import chalice_gateway
from test.utils.records import create_test_post
from test.utils.request_utils import make_request, response_body


@pytest.fixture
def posts():
    create_test_post('ai-in-kitchens', title='AI in Kitchens', category='Technology',
                     published_at='2024-01-10T10:00:00', views=2450, tags=['AI', 'Automation'])
    create_test_post('grow-revenue', title='Grow Revenue with Data', category='Restaurant Tips',
                     published_at='2024-02-10T10:00:00', views=1890, featured=True, tags=['Analytics'])
    create_test_post('loyalty-that-works', title='Loyalty Programs That Work', category='Restaurant Tips',
                     published_at='2024-03-10T10:00:00', views=1650, excerpt='Keep your guests coming back')
    create_test_post('draft-post', title='Draft', category='Technology', published=False,
                     published_at='2024-04-10T10:00:00')
    return BlogPost.get_published()


def test_get_published_newest_first(posts):
    assert [post.slug for post in posts] == ['loyalty-that-works', 'grow-revenue', 'ai-in-kitchens']


def test_filter_posts_search_is_case_insensitive(posts):
    assert [post.slug for post in filter_posts(posts, search='automation')] == ['ai-in-kitchens']
    assert [post.slug for post in filter_posts(posts, search='GUESTS')] == ['loyalty-that-works']
    assert [post.slug for post in filter_posts(posts, search='revenue')] == ['grow-revenue']


def test_filter_posts_by_category(posts):
    assert [post.slug for post in filter_posts(posts, category='restaurant-tips')] == [
        'loyalty-that-works', 'grow-revenue'
    ]
    assert len(filter_posts(posts, category='all')) == 3


def test_filter_posts_sorting(posts):
    assert [post.slug for post in filter_posts(posts, sort_by='popular')] == [
        'ai-in-kitchens', 'grow-revenue', 'loyalty-that-works'
    ]
    assert [post.slug for post in filter_posts(posts, sort_by='featured')] == [
        'grow-revenue', 'loyalty-that-works', 'ai-in-kitchens'
    ]
    with pytest.raises(exceptions.ValidationException):
        filter_posts(posts, sort_by='random')


def test_get_categories(posts):
    assert slugify('Restaurant  Tips') == 'restaurant-tips'
    assert get_categories(posts) == [
        {'name': 'Restaurant Tips', 'slug': 'restaurant-tips', 'count': 2},
        {'name': 'Technology', 'slug': 'technology', 'count': 1}
    ]


def test_related_posts_same_category_max_three():
    for i in range(5):
        create_test_post(f'tips-{i}', category='Restaurant Tips', published_at=f'2024-01-0{i + 1}T10:00:00')
    create_test_post('tech', category='Technology')
    post = BlogPost.init_published_by_slug('tips-0')

    related = post.get_related()

    assert [p.slug for p in related] == ['tips-4', 'tips-3', 'tips-2']


def test_get_posts_endpoint(chalice_gateway, posts):
    response = make_request(chalice_gateway, endpoint="/blog/posts", query='category=technology')

    assert response['statusCode'] == http200
    body = response_body(response)
    assert [post['slug'] for post in body] == ['ai-in-kitchens']
    assert 'content' not in body[0]

    response = make_request(chalice_gateway, endpoint="/blog/posts", query='sort_by=oldest')
    assert response['statusCode'] == http400


def test_get_categories_endpoint(chalice_gateway, posts):
    response = make_request(chalice_gateway, endpoint="/blog/categories")

    assert response['statusCode'] == http200
    assert [category['slug'] for category in response_body(response)] == ['restaurant-tips', 'technology']


def test_get_post_increments_views(chalice_gateway, sdk, posts):
    response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue")
    response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue")

    assert response['statusCode'] == http200
    body = response_body(response)
    assert body['post']['views'] == 1892
    assert body['post']['content'] == 'Post content'
    assert [post['slug'] for post in body['related_posts']] == ['loyalty-that-works']


def test_get_unpublished_post(chalice_gateway, posts):
    response = make_request(chalice_gateway, endpoint="/blog/posts/draft-post")

    assert response['statusCode'] == http404
    assert response_body(response)['exception'] == 'PostNotFound'


def test_like_and_unlike(chalice_gateway, posts):
    response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue/like", method="POST")
    assert response_body(response)['likes'] == 1

    for _ in range(3):
        response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue/like", method="DELETE")
    assert response['statusCode'] == http200
    assert response_body(response)['likes'] == 0


def test_comments(chalice_gateway, sdk, posts):
    post = BlogPost.init_published_by_slug('grow-revenue')
    sdk.insert(keys_structure.blog_comments_collection, {
        'post_id': post.id_, 'author': 'Tom', 'content': 'Second', 'status': 'approved',
        'date_created': '2024-02-12T10:00:00'
    })
    sdk.insert(keys_structure.blog_comments_collection, {
        'post_id': post.id_, 'author': 'Ann', 'content': 'First', 'status': 'approved',
        'date_created': '2024-02-11T10:00:00'
    })

    response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue/comments", method="POST",
                            json_body={'author': 'Bob', 'email': 'bob@test.com', 'content': 'Nice read'})
    assert response['statusCode'] == http201
    comment = response_body(response)['comment']
    assert comment['status'] == 'pending'
    assert 'email' not in comment

    response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue/comments")
    assert [comment['content'] for comment in response_body(response)] == ['First', 'Second']


def test_add_comment_validation(chalice_gateway, posts):
    create_test_post('closed', comments_enabled=False)

    response = make_request(chalice_gateway, endpoint="/blog/posts/closed/comments", method="POST",
                            json_body={'author': 'Bob', 'content': 'Hello'})
    assert response['statusCode'] == http400
    assert response_body(response)['exception'] == 'CommentsDisabled'

    response = make_request(chalice_gateway, endpoint="/blog/posts/grow-revenue/comments", method="POST",
                            json_body={'author': 'Bob'})
    assert response['statusCode'] == http400
