import logging
import os
import sys
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from .request import TransitRequest
from .json_encoder import TransitJSONProvider
import transitnet


class TransitNet:
    """This class configures the Flask application to serve the transit network resources
    :param app: a Flask application.
    :param prefix: URL prefix where the resources are exposed. Default is '/api'

    Configuration defaults are stored as class variables, they can be overridden
    with the app.config or with environment variables (cfr. `config.get_config`)
    """

    MAX_PAGE_SIZE = 50
    DEFAULT_PAGE_SIZE = 10
    PAGING_HEADER = "X-Pagination"
    URL_PREFIX = "/api"
    LOGLEVEL = logging.WARNING

    def __init__(self, app: Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(self, app: Flask, app_db: SQLAlchemy = None) -> None:
        """
        Application initialization: request & json handling, db session teardown
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions["sqlalchemy"]
        self.db = app_db

        app.request_class = TransitRequest
        app.json = TransitJSONProvider(app)
        app.url_map.strict_slashes = False
        # flask-restful appends url suggestions to 404 messages otherwise
        app.config.setdefault("ERROR_404_HELP", False)

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. http://flask.pocoo.org/docs/0.12/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stdout so we redirect eveything to sys.stderr
        """
        log = logging.getLogger(transitnet.__name__)
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", TransitNet.LOGLEVEL)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = TransitNet.init_logging(LOGLEVEL)
