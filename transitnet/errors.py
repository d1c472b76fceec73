# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
# The exceptions will be caught in http_method_decorator and formatted, for example:
# {
#     "errors": [
#         {
#             "title": "Validation Error: Invalid sort field \"bogusField\"",
#             "detail": "Validation Error: Invalid sort field \"bogusField\"",
#             "code": "InvalidSortExpression"
#         }
#     ]
# }
#
from werkzeug.exceptions import NotFound
from sqlalchemy.exc import DontWrapMixin
from http import HTTPStatus
import transitnet
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class ApiError(Exception, DontWrapMixin):
    """
    Base class for the errors that are returned to the client,
    `api_code` is the machine readable "code" of the error object
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""
    api_code = None

    def __init__(self, message="", status_code=None, api_code=None):
        Exception.__init__(self, message)
        if status_code is not None:
            self.status_code = status_code
        if api_code is not None:
            self.api_code = api_code


class NotFoundError(ApiError, NotFound):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "NotFoundError "

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value, api_code=None):
        """
        :param message: Message to be returned in the (json) body
        :param status_code: HTTP Status code
        :param api_code: API code
        """
        ApiError.__init__(self, message, status_code, api_code)
        transitnet.log.error("Not found: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class ValidationError(ApiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Validation Error: "

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value, api_code=None):
        ApiError.__init__(self, message, status_code, api_code)
        transitnet.log.warning("ValidationError: %s", message)
        self.message += message


class InvalidSortExpression(ValidationError):
    """
    The `sort` query argument references a field that isn't part of the requested output.
    Unlike unknown `fields`, this is never ignored: dropping a sort key would silently change
    the order of the results
    """

    api_code = "InvalidSortExpression"

    def __init__(self, message="", sort_string=None):
        super().__init__(message)
        self.sort_string = sort_string
