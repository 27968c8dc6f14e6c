import re
from collections import Counter
from typing import Dict, List, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import BLOG_SORT_LATEST, BLOG_SORT_POPULAR, BLOG_SORT_FEATURED, \
    RELATED_POSTS_LIMIT, COMMENT_STATUS_PENDING, COMMENT_STATUS_APPROVED
from chalicelib.constants.status_codes import http200, http201
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import app as utils_app, auth as utils_auth, exceptions
from chalicelib.utils.data import parse_raw_body, to_int
from chalicelib.utils.logger import logger

BLOG_SORTS = (BLOG_SORT_LATEST, BLOG_SORT_POPULAR, BLOG_SORT_FEATURED)


def slugify(name: str) -> str:
    return re.sub(r'\s+', '-', (name or '').strip().lower())


class BlogPost(EntityBase):
    collection = keys_structure.blog_posts_collection

    required_immutable_fields_validation = {
        'slug': lambda x: isinstance(x, str) and len(x) > 0
    }

    required_mutable_fields_validation = {
        'title': lambda x: isinstance(x, str),
        'category': lambda x: isinstance(x, str),
        'published': lambda x: isinstance(x, bool),
        'views': lambda x: isinstance(x, int) and x >= 0,
        'likes': lambda x: isinstance(x, int) and x >= 0
    }

    optional_fields_validation = {
        'excerpt': lambda x: isinstance(x, str),
        'content': lambda x: isinstance(x, str),
        'author': lambda x: isinstance(x, dict),
        'tags': lambda x: isinstance(x, list),
        'published_at': lambda x: isinstance(x, str),
        'featured': lambda x: isinstance(x, bool),
        'read_time': lambda x: isinstance(x, int),
        'comments_enabled': lambda x: isinstance(x, bool),
        'image': lambda x: isinstance(x, str)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.title: str = kwargs.get('title')
        self.slug: str = kwargs.get('slug')
        self.excerpt: str = kwargs.get('excerpt') or ''
        self.content: str = kwargs.get('content') or ''
        self.author: Dict = kwargs.get('author') or {}
        self.category: str = kwargs.get('category') or ''
        self.tags: List[str] = list(kwargs.get('tags') or [])
        self.image: str = kwargs.get('image')
        self.published: bool = kwargs.get('published', False)
        self.published_at: str = kwargs.get('published_at')
        self.featured: bool = kwargs.get('featured', False)
        self.read_time: int = to_int(kwargs.get('read_time'))
        self.views: int = to_int(kwargs.get('views'))
        self.likes: int = to_int(kwargs.get('likes'))
        self.comments_enabled: bool = kwargs.get('comments_enabled', True)
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'blog_post'

    @classmethod
    def get_published(cls) -> List['BlogPost']:
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda p: p.get('published') is True)\
            .sort('published_at', 'desc')\
            .exec()
        return [cls.from_record(record) for record in records]

    @classmethod
    def init_published_by_slug(cls, slug):
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda p: p.get('slug') == slug and p.get('published') is True)\
            .exec()
        if not records:
            raise exceptions.PostNotFound(f'Post {slug} not found')
        return cls.from_record(records[0])

    def create(self) -> Dict:
        return self._create_db_record()

    def matches(self, search: str) -> bool:
        search = search.lower()
        return search in self.title.lower() or search in self.excerpt.lower() or \
            any(search in tag.lower() for tag in self.tags)

    def register_view(self) -> Dict:
        self.views += 1
        return self._update_db_record(['views'])

    def like(self) -> Dict:
        self.likes += 1
        return self._update_db_record(['likes'])

    def unlike(self) -> Dict:
        self.likes = max(self.likes - 1, 0)
        return self._update_db_record(['likes'])

    def get_related(self, limit: int = RELATED_POSTS_LIMIT) -> List['BlogPost']:
        records = get_sdk().query_builder(self.collection)\
            .where(lambda p: p.get('published') is True and p.get('category') == self.category)\
            .where(lambda p: p.get('id') != self.id_)\
            .sort('published_at', 'desc')\
            .limit(limit)\
            .exec()
        return [BlogPost.from_record(record) for record in records]

    def _to_dict(self):
        return {
            'id_': self.id_,
            'title': self.title,
            'slug': self.slug,
            'excerpt': self.excerpt,
            'content': self.content,
            'author': self.author,
            'category': self.category,
            'tags': self.tags,
            'image': self.image,
            'published': self.published,
            'published_at': self.published_at,
            'featured': self.featured,
            'read_time': self.read_time,
            'views': self.views,
            'likes': self.likes,
            'comments_enabled': self.comments_enabled,
            'date_created': self.date_created
        }

    def to_ui_short(self) -> Dict:
        item = self.to_ui()
        item.pop('content')
        return item


def filter_posts(posts: List[BlogPost], search: Optional[str] = None, category: Optional[str] = None,
                 sort_by: str = BLOG_SORT_LATEST) -> List[BlogPost]:
    """
    :param search: case-insensitive part of title, excerpt or a tag
    :param category: category slug
    :param sort_by: latest | popular | featured, posts keep the latest-first order inside equal groups
    """
    if sort_by not in BLOG_SORTS:
        raise exceptions.ValidationException(f'sort_by must be one of {", ".join(BLOG_SORTS)}')
    if search:
        posts = [post for post in posts if post.matches(search)]
    if category and category != 'all':
        posts = [post for post in posts if slugify(post.category) == category]

    posts = sorted(posts, key=lambda post: post.published_at or '', reverse=True)
    if sort_by == BLOG_SORT_POPULAR:
        posts = sorted(posts, key=lambda post: post.views, reverse=True)
    elif sort_by == BLOG_SORT_FEATURED:
        posts = sorted(posts, key=lambda post: post.featured, reverse=True)
    return posts


def get_categories(posts: List[BlogPost]) -> List[Dict]:
    counts = Counter(post.category for post in posts if post.category)
    return [{'name': name, 'slug': slugify(name), 'count': count} for name, count in sorted(counts.items())]


class BlogComment(EntityBase):
    collection = keys_structure.blog_comments_collection

    required_immutable_fields_validation = {
        'post_id': lambda x: isinstance(x, str),
        'author': lambda x: isinstance(x, str) and len(x) > 0,
        'content': lambda x: isinstance(x, str) and len(x.strip()) > 0
    }

    required_mutable_fields_validation = {
        'status': lambda x: x in (COMMENT_STATUS_PENDING, COMMENT_STATUS_APPROVED)
    }

    optional_fields_validation = {
        'email': lambda x: isinstance(x, str),
        'parent_id': lambda x: isinstance(x, str)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.post_id: str = kwargs.get('post_id')
        self.author: str = kwargs.get('author')
        self.email: str = kwargs.get('email')
        self.content: str = kwargs.get('content')
        self.status: str = kwargs.get('status', COMMENT_STATUS_PENDING)
        self.parent_id: str = kwargs.get('parent_id')
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'blog_comment'

    @classmethod
    def get_approved(cls, post_id) -> List['BlogComment']:
        records = get_sdk().query_builder(cls.collection)\
            .where(lambda c: c.get('post_id') == post_id and c.get('status') == COMMENT_STATUS_APPROVED)\
            .sort('date_created')\
            .exec()
        return [cls.from_record(record) for record in records]

    def create(self) -> Dict:
        record = self._create_db_record()
        self.date_created = record['date_created']
        return record

    def _to_dict(self):
        return {
            'id_': self.id_,
            'post_id': self.post_id,
            'author': self.author,
            'email': self.email,
            'content': self.content,
            'status': self.status,
            'parent_id': self.parent_id,
            'date_created': self.date_created
        }

    def to_ui(self) -> Dict:
        item = self._to_ui()
        item.pop('email')
        return item


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_posts(request) -> Response:
    qp = request.query_params or {}
    posts = filter_posts(BlogPost.get_published(), qp.get('search'), qp.get('category'),
                         qp.get('sort_by', BLOG_SORT_LATEST))
    logger.info(f"endpoint_get_posts ::: returning {len(posts)} posts, query_params={qp}")
    return Response(status_code=http200, body=[post.to_ui_short() for post in posts])


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_categories(request) -> Response:
    return Response(status_code=http200, body=get_categories(BlogPost.get_published()))


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_post(request, slug) -> Response:
    post = BlogPost.init_published_by_slug(slug)
    post.register_view()
    return Response(status_code=http200, body={
        'post': post.to_ui(),
        'related_posts': [related.to_ui_short() for related in post.get_related()]
    })


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_like_post(request, slug) -> Response:
    post = BlogPost.init_published_by_slug(slug)
    post.like()
    return Response(status_code=http200, body={'id': post.id_, 'likes': post.likes})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_unlike_post(request, slug) -> Response:
    post = BlogPost.init_published_by_slug(slug)
    post.unlike()
    return Response(status_code=http200, body={'id': post.id_, 'likes': post.likes})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_get_comments(request, slug) -> Response:
    post = BlogPost.init_published_by_slug(slug)
    return Response(status_code=http200, body=[comment.to_ui() for comment in BlogComment.get_approved(post.id_)])


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.public
def endpoint_add_comment(request, slug) -> Response:
    post = BlogPost.init_published_by_slug(slug)
    if not post.comments_enabled:
        raise exceptions.CommentsDisabled('Comments are disabled for this post')
    request_body = parse_raw_body(request)
    if not request_body.get('author') or not request_body.get('content'):
        raise exceptions.MandatoryFieldsAreNotFilled('author and content are required')
    comment = BlogComment(
        post_id=post.id_,
        author=request_body['author'],
        email=request_body.get('email'),
        content=request_body['content'],
        parent_id=request_body.get('parent_id'),
        status=COMMENT_STATUS_PENDING
    )
    comment.create()
    return Response(status_code=http201, body={
        'comment': comment.to_ui(),
        'message': 'Comment submitted, it will appear after moderation'
    })
