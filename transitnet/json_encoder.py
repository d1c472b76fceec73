# transitnet to json encoding
#
# Shaped records contain datetimes and durations, which the default flask
# provider doesn't encode the way api clients expect
import datetime
import json
from flask.json.provider import DefaultJSONProvider
import transitnet
from .pagination import PagingMetadata


def format_duration(delta: datetime.timedelta) -> str:
    """
    Format a timedelta as "[-][d.]hh:mm:ss[.ffffff]", the same notation `filtering.parse_duration` accepts
    :param delta: duration
    :return: formatted string
    """
    sign = "-" if delta < datetime.timedelta(0) else ""
    delta = abs(delta)
    hours, remainder = divmod(delta.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    result = f"{hours:02}:{minutes:02}:{seconds:02}"
    if delta.days:
        result = f"{delta.days}.{result}"
    if delta.microseconds:
        result += f".{delta.microseconds:06}"
    return sign + result


class _TransitJSONEncoder:
    """
    JSON encoding for record values and paging metadata
    """

    # pylint: disable=arguments-differ,method-hidden
    def default(self, obj, **kwargs):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if isinstance(obj, datetime.timedelta):
            return format_duration(obj)
        if isinstance(obj, datetime.date):
            # also datetime.datetime
            return obj.isoformat()
        if isinstance(obj, PagingMetadata):
            return obj.to_dict()

        transitnet.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
        return str(obj)


class TransitJSONProvider(_TransitJSONEncoder, DefaultJSONProvider):
    """
    Flask JSON encoding, the record field order is kept: the id comes first
    """

    sort_keys = False


class TransitJSONEncoder(_TransitJSONEncoder, json.JSONEncoder):
    """
    Common JSON encoding, used for the paging header
    """

    pass
