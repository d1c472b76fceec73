#!/usr/bin/env python
#
# Application factory
#
# run:
# $ FLASK_APP="transitnet.app:create_app()" flask run
#
from flask import Flask
from .transitnet_init import DB
from .api import TransitAPI
from .models import EXPOSED_MODELS


def create_api(app: Flask, prefix: str = None) -> TransitAPI:
    """
    :param app: Flask app, DB must be initialized
    :param prefix: url prefix, defaults to the URL_PREFIX config value
    :return: the api, exposing all models
    """
    api = TransitAPI(app, prefix=prefix, app_db=DB)
    api.expose(*EXPOSED_MODELS)
    return api


def create_app(config: dict = None) -> Flask:
    """
    :param config: app.config overrides, e.g. {"SQLALCHEMY_DATABASE_URI": "sqlite:///transit.db"}
    :return: Flask app
    """
    app = Flask("transitnet")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", SQLALCHEMY_TRACK_MODIFICATIONS=False)
    app.config.update(config or {})
    DB.init_app(app)
    with app.app_context():
        DB.create_all()
        create_api(app)
    return app


if __name__ == "__main__":
    create_app().run()
