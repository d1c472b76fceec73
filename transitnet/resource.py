#  This file contains the flask-restful "Resource" objects:
#  - TransitRestAPI for exposed database instances and collections
#
#  The collection GET runs the listing pipeline, the page is returned as a json array
#  and the paging metadata is sent in the paging header (X-Pagination by default)
#
# pylint: disable=redefined-builtin,invalid-name,protected-access,no-member
#
import json
from flask import jsonify, request
from flask_restful import Resource as FRResource
from .config import get_config
from .json_encoder import TransitJSONEncoder
from .pipeline import ListingPipeline
from .shaping import select_fields, shape_selected


class Resource(FRResource):
    """
    Superclass for the exposed endpoints
    """

    # ResourceObject: the class that will be returned when a http method is invoked
    # Flask views will need to set this to the SQLAlchemy DB.Model class
    ResourceObject = None


class TransitRestAPI(Resource):
    """
    Flask webservice wrapper for the underlying resource class
    (a ResourceBase subclass : cls.ResourceObject)

    GET /<collection>      : filtered, shaped, sorted and paginated records
    GET /<collection>/<id> : a single shaped record
    """

    object_id = "id"

    def get(self, **kwargs):
        """
        HTTP GET: return instances
        If no id is given: return the requested page of the collection
        If an id is given, get an instance by id
        """
        if self.object_id in kwargs:
            return self.get_instance(kwargs[self.object_id])
        return self.get_collection()

    def get_instance(self, id):
        """
        :param id: instance primary key
        :return: response with the shaped record, the `fields` query argument applies
        """
        resource_class = self.ResourceObject
        field_map = resource_class._s_field_map()
        instance = resource_class._s_get_instance(id)
        selected = select_fields(field_map, request.fields, resource_class._s_default_fields, field_map.id_field)
        return jsonify(shape_selected(field_map.project(instance), selected))

    def get_collection(self):
        """
        :return: response with a page of shaped records and the paging header
        """
        pipeline = ListingPipeline(self.ResourceObject)
        records, metadata = pipeline.run(request.listing)
        response = jsonify(records)
        response.headers[get_config("PAGING_HEADER")] = json.dumps(metadata, cls=TransitJSONEncoder)
        return response
