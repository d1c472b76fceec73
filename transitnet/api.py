# flask_restful API subclass
from http import HTTPStatus
import logging
import werkzeug
from flask_restful import abort, Api
from flask import jsonify, request
from functools import wraps
from sqlalchemy import inspect as sqla_inspect
import transitnet
from .errors import ApiError
from .config import get_config
from .resource import TransitRestAPI
from flask.app import Flask
from typing import Callable, Type

HTTP_METHODS = ["get"]
RESOURCE_URL_FMT = "/{}"
INSTANCE_URL_FMT = "/{}/<{}:{}>"


class TransitAPI(Api):
    """
    Subclass of the flask_restful API class where we add the expose_object method
    this method creates the API endpoints for a ResourceBase subclass
    """

    def __init__(self, app: Flask, prefix: str = None, app_db=None, **kwargs) -> None:
        """
        :param app: Flask app
        :param prefix: url prefix, defaults to the URL_PREFIX config value
        :param app_db: flask_sqlalchemy db, defaults to the app "sqlalchemy" extension
        """
        if prefix is None:
            with app.app_context():
                prefix = get_config("URL_PREFIX")
        transitnet.TransitNet(app, app_db=app_db)
        super().__init__(app, prefix=prefix, **kwargs)
        # urls that don't match a route (e.g. a non-integer id) get the same error body
        app.register_error_handler(werkzeug.exceptions.NotFound, not_found_handler)
        self.exposed = []

    def expose_object(self, resource_object, url_prefix="", **properties):
        """This methods creates the API url endpoints for the resource objects
        :param resource_object: ResourceBase subclass that we would like to expose
        :param url_prefix: url prefix
        :param properties: additional flask-restful properties

        creates a class of the form

        @api_decorator
        class Class_API(TransitRestAPI):
            ResourceObject = resource_object

        add the class as an api resource to /collection and /collection/{id}
        """
        properties["ResourceObject"] = resource_object
        collection_name = resource_object._s_collection_name or resource_object.__tablename__

        # build the field map on startup rather than on the first request
        field_map = resource_object._s_field_map()

        api_class_name = f"{resource_object.__name__}_API"  # name for dynamically generated classes
        url = url_prefix + RESOURCE_URL_FMT.format(collection_name)
        api_class = api_decorator(type(api_class_name, (TransitRestAPI,), properties))
        transitnet.log.info(f"Exposing {collection_name} on {url}, fields: {', '.join(field_map)}")
        self.add_resource(api_class, url, endpoint=f"api.{resource_object.__name__}")

        url = url_prefix + INSTANCE_URL_FMT.format(collection_name, id_converter(resource_object), TransitRestAPI.object_id)
        api_class = api_decorator(type(api_class_name + "_i", (TransitRestAPI,), properties))
        transitnet.log.info(f"Exposing {resource_object.__name__} instances on {url}")
        self.add_resource(api_class, url, endpoint=f"api.{resource_object.__name__}Id")

        self.exposed.append(resource_object)

    def expose(self, *resource_objects, url_prefix="", **properties):
        """
        Expose multiple objects at once
        """
        for obj in resource_objects:
            self.expose_object(obj, url_prefix, **dict(properties))


def id_converter(resource_object: Type) -> str:
    """
    :param resource_object: exposed class
    :return: flask url converter for the primary key, "int" or "string"
    """
    primary_key = sqla_inspect(resource_object).primary_key[0]
    try:
        python_type = primary_key.type.python_type
    except NotImplementedError:  # pragma: no cover
        return "string"
    return "int" if python_type is int else "string"


def not_found_handler(exc: werkzeug.exceptions.NotFound):
    """
    Flask error handler for the 404s raised by the url routing
    :param exc: NotFound
    :return: json error response
    """
    transitnet.log.debug(f"No route for {request.method} {request.path}")
    status_code = HTTPStatus.NOT_FOUND.value
    errors = dict(title=HTTPStatus.NOT_FOUND.phrase, detail=exc.description, code=str(status_code))
    return jsonify(errors=[errors]), status_code


def api_decorator(cls):
    """Decorator for the API views: add generic exception handling

    :param cls: The class that will be decorated (i.e. TransitRestAPI)
    :return: decorated class
    """
    for method_name in HTTP_METHODS:
        method = getattr(cls, method_name, None)
        if not method:
            continue
        setattr(cls, method_name, http_method_decorator(method))
    return cls


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the supported HTTP methods
    - convert all exceptions to a JSON serializable error object
    - rollback the session on error

    This method will be called for all requests
    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method
        """
        api_exception = None
        status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
        message = ""
        try:
            return fun(*args, **kwargs)

        except werkzeug.exceptions.NotFound as exc:
            # this also catches transitnet.errors.NotFoundError
            status_code = HTTPStatus.NOT_FOUND.value
            api_exception = exc
            message = HTTPStatus.NOT_FOUND.description

        except ApiError as exc:
            # the errors log themselves when they're created
            api_exception = exc

        except werkzeug.exceptions.HTTPException as exc:
            status_code = exc.code
            message = exc.description
            transitnet.log.error(message)

        except Exception as exc:
            transitnet.log.exception(exc)
            api_exception = exc
            if transitnet.log.getEffectiveLevel() > logging.DEBUG:
                message = "Logging Disabled"
            else:
                message = str(exc)

        status_code = getattr(api_exception, "status_code", status_code)
        api_code = getattr(api_exception, "api_code", None) or status_code
        title = getattr(api_exception, "message", message) or message
        detail = getattr(api_exception, "detail", title)

        transitnet.log.debug(f"{request.method} {request.full_path} failed ({status_code})")
        transitnet.DB.session.rollback()
        errors = dict(title=title, detail=detail, code=str(api_code))
        abort(status_code, errors=[errors])

    return method_wrapper
