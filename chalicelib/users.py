from typing import List

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.utils import auth as utils_auth, app as utils_app
from chalicelib.utils.logger import logger


class User(EntityBase):
    """
    Authenticated principal, a customer profile is created for it on first visit
    """
    collection = keys_structure.users_collection

    required_immutable_fields_validation = {
        'email': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'name': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'roles': lambda x: isinstance(x, list)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.email: str = kwargs.get('email')
        self.name: str = kwargs.get('name')
        self.phone: str = kwargs.get('phone')
        self.roles: List[str] = kwargs.get('roles', ['customer'])
        self.date_created: str = kwargs.get('date_created')
        self.record_type = 'user'

    @classmethod
    @utils_auth.authenticate_class
    def init_request_user(cls, request):
        logger.info("init_request_user ::: started")
        return cls.init_by_id(request.auth_result['user_id'])

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_user(self) -> Response:
        return Response(status_code=http200, body=self._to_ui())

    def _to_dict(self):
        return {
            'id_': self.id_,
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'roles': self.roles,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
def endpoint_get_user(request) -> Response:
    return User.init_request_user(request).endpoint_get_user()
