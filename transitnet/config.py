# Configuration settings should be set in app.config
# The TransitNet class variables hold the defaults, environment variables with the same
# name take precedence over these defaults (but not over app.config)
import os
import logging
from flask import current_app
import transitnet
from typing import Any


def get_config(option: str) -> Any:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """
    try:
        return current_app.config[option]
    except (KeyError, RuntimeError):
        # KeyError: not configured in the app, RuntimeError: no app context
        pass

    default = getattr(transitnet.TransitNet, option, None)
    env_value = os.environ.get(option, None)
    if env_value is None:
        return default
    if default is None or isinstance(default, str):
        return env_value
    try:
        return type(default)(env_value)
    except ValueError:
        transitnet.log.warning(f'Invalid value for {option} in the environment: "{env_value}"')
        return default


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return transitnet.log.getEffectiveLevel() < logging.INFO
