import functools
from typing import Dict

from chalice.app import Request

from chalicelib.constants import keys_structure
from chalicelib.sdk.client import get_sdk
from chalicelib.utils import exceptions as utils_exceptions
from chalicelib.utils.logger import log_request, logger, set_request_id


def get_auth_result(request: Request) -> Dict:
    """
    Authorization header carries the user id,
    the user must exist in users collection
    """
    user_id = (request.headers or {}).get('authorization')
    if not user_id:
        raise utils_exceptions.NotAuthorizedException('Authorization header is missing')
    try:
        user_record = get_sdk().get(keys_structure.users_collection, user_id)
    except utils_exceptions.RecordNotFound:
        raise utils_exceptions.NotAuthorizedException(f'Unknown user {user_id}')
    return {
        'user_id': user_record['id'],
        'email': user_record.get('email'),
        'name': user_record.get('name'),
        'phone': user_record.get('phone'),
        'roles': user_record.get('roles', [])
    }


def authenticate(func):
    """
    Wrapper for endpoint functions which require user's authentication,
    request is the first positional argument
    """

    @functools.wraps(func)
    def result_auth(request, *args, **kwargs):
        set_request_id(request)
        log_request(request)
        auth_result = get_auth_result(request)
        setattr(request, 'auth_result', auth_result)
        logger.info(f"authenticate ::: SUCCESS, user_id={auth_result['user_id']} func={func.__name__}")
        return func(request, *args, **kwargs)

    return result_auth


def authenticate_class(func):
    """
    Wrapper for class methods which require user's authentication,
    (cls, request, ...) signature
    """

    @functools.wraps(func)
    def result_auth(cls, request, *args, **kwargs):
        set_request_id(request)
        log_request(request)
        setattr(request, 'auth_result', get_auth_result(request))
        logger.info(f"authenticate_class ::: SUCCESS, func={func.__name__}")
        return func(cls, request, *args, **kwargs)

    return result_auth


def public(func):
    """
    Wrapper for endpoint functions available without authorization, only tags the log lines
    """

    @functools.wraps(func)
    def result(request, *args, **kwargs):
        set_request_id(request)
        log_request(request)
        return func(request, *args, **kwargs)

    return result
