__all__ = ["NotAuthorizedException", "AccessDenied", "RecordNotFound", "NumberOfRetriesExceeded",
           "MandatoryFieldsAreNotFilled", "ValidationException", "CustomizationRequired",
           "ItemNotAvailable", "EmptyCart", "RestaurantNotFound", "OrderNotFound", "PostNotFound",
           "CommentsDisabled", "CustomerProfileMissing", "NotEnoughPoints", "OperationFailed",
           "UnknownDataBackend"]


class NotAuthorizedException(Exception):
    pass


# Generic Exceptions
class AccessDenied(Exception):
    pass


class MandatoryFieldsAreNotFilled(Exception):
    pass


class OperationFailed(Exception):
    """
    SDK call failed, local state was kept as it was.
    str(error) is the message to show to the customer
    """
    pass


# Storage exceptions
class RecordNotFound(Exception):
    LEVEL = 'warning'


class UnknownDataBackend(Exception):
    pass


# DB Performance Exception
class NumberOfRetriesExceeded(Exception):
    pass


# Validations exceptions
class ValidationException(Exception):
    LEVEL = 'warning'


class CustomizationRequired(ValidationException):
    pass


class ItemNotAvailable(ValidationException):
    pass


class EmptyCart(ValidationException):
    pass


class CommentsDisabled(ValidationException):
    pass


class NotEnoughPoints(ValidationException):
    pass


class CustomerProfileMissing(ValidationException):
    pass


# Not found
class RestaurantNotFound(RecordNotFound):
    pass


class OrderNotFound(RecordNotFound):
    pass


class PostNotFound(RecordNotFound):
    pass
