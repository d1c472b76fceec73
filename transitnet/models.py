# The transit network models
#
# Every model is exposed as a collection, the class attributes configure the listing:
#   _s_collection_name : url path component
#   _s_default_fields  : fields returned when the request has no `fields=` argument
#   _s_filters         : the supported filter query arguments
#
# pylint: disable=too-few-public-methods,invalid-name
import datetime
from .transitnet_init import DB
from .base import ResourceBase
from .api_attr import api_attr
from .filtering import (
    AggregateRange,
    Equals,
    Flag,
    Range,
    Search,
    parse_datetime,
    parse_duration,
    parse_int,
    sum_of,
)

leg_cost = sum_of("route_address_details", "cost_to_next_city", start=0.0)
leg_duration = sum_of("route_address_details", "wait_time_span", "time_span_to_next_city", start=datetime.timedelta(0))


class Country(ResourceBase, DB.Model):
    __tablename__ = "countries"
    _s_collection_name = "countries"
    _s_default_fields = "id,code,name"
    _s_default_sort = "name"
    _s_filters = (Search("search", "name", "code"), Equals("code", "code"))

    id = DB.Column(DB.Integer, primary_key=True)
    code = DB.Column(DB.String(8), nullable=False)
    name = DB.Column(DB.String(64), nullable=False)
    states = DB.relationship("State", back_populates="country")


class State(ResourceBase, DB.Model):
    __tablename__ = "states"
    _s_collection_name = "states"
    _s_default_fields = "id,name,countryId"
    _s_default_sort = "name"
    _s_filters = (Search("search", "name"), Equals("name", "name"), Equals("countryId", "country_id", parse_int))

    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(64), nullable=False)
    country_id = DB.Column(DB.Integer, DB.ForeignKey("countries.id"), nullable=False)
    country = DB.relationship("Country", back_populates="states")
    cities = DB.relationship("City", back_populates="state")


class City(ResourceBase, DB.Model):
    __tablename__ = "cities"
    _s_collection_name = "cities"
    _s_default_fields = "id,name,stateId"
    _s_default_sort = "name"
    _s_filters = (Search("search", "name"), Equals("name", "name"), Equals("stateId", "state_id", parse_int))

    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(64), nullable=False)
    state_id = DB.Column(DB.Integer, DB.ForeignKey("states.id"), nullable=False)
    state = DB.relationship("State", back_populates="cities")
    addresses = DB.relationship("Address", back_populates="city")


class Address(ResourceBase, DB.Model):
    __tablename__ = "addresses"
    _s_collection_name = "addresses"
    _s_default_fields = "id,name,cityId"
    _s_filters = (Search("search", "name"), Equals("name", "name"), Equals("cityId", "city_id", parse_int))

    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(128), nullable=False)
    latitude = DB.Column(DB.Float)
    longitude = DB.Column(DB.Float)
    city_id = DB.Column(DB.Integer, DB.ForeignKey("cities.id"), nullable=False)
    city = DB.relationship("City", back_populates="addresses")


class Route(ResourceBase, DB.Model):
    __tablename__ = "routes"
    _s_collection_name = "routes"
    _s_default_fields = "id,number"
    _s_filters = (Search("search", "number"),)

    id = DB.Column(DB.Integer, primary_key=True)
    number = DB.Column(DB.String(32), nullable=False)
    route_addresses = DB.relationship("RouteAddress", back_populates="route", order_by="RouteAddress.order")


class RouteAddress(ResourceBase, DB.Model):
    """
    A stop of a route, `order` is the position of the stop on the route
    """

    __tablename__ = "route_addresses"
    _s_collection_name = "routeAddresses"
    _s_default_fields = "id,routeId,addressId,order,timeSpanToNextCity,waitTimeSpan,costToNextCity"
    _s_filters = (Equals("routeId", "route_id", parse_int), Equals("addressId", "address_id", parse_int))

    id = DB.Column(DB.Integer, primary_key=True)
    route_id = DB.Column(DB.Integer, DB.ForeignKey("routes.id"), nullable=False)
    address_id = DB.Column(DB.Integer, DB.ForeignKey("addresses.id"), nullable=False)
    order = DB.Column(DB.Integer, nullable=False)
    time_span_to_next_city = DB.Column(DB.Interval)
    wait_time_span = DB.Column(DB.Interval)
    cost_to_next_city = DB.Column(DB.Float)
    route = DB.relationship("Route", back_populates="route_addresses")
    address = DB.relationship("Address")


class Company(ResourceBase, DB.Model):
    __tablename__ = "companies"
    _s_collection_name = "companies"
    _s_default_fields = "id,name,ownerId"
    _s_default_sort = "name"
    _s_filters = (Search("search", "name"), Equals("name", "name"), Equals("ownerId", "owner_id"))

    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(64), nullable=False)
    owner_id = DB.Column(DB.String(64))
    vehicles = DB.relationship("Vehicle", back_populates="company")


class Vehicle(ResourceBase, DB.Model):
    __tablename__ = "vehicles"
    _s_collection_name = "vehicles"
    _s_default_fields = "id,number,type,brand,capacity,companyId"
    _s_filters = (
        Search("search", "number", "type", "brand"),
        Equals("companyId", "company_id", parse_int),
        Range("fromCapacity", "toCapacity", "capacity", parse_int),
        Flag("hasClimateControl", "has_climate_control"),
        Flag("hasWiFi", "has_wi_fi"),
        Flag("hasWc", "has_wc"),
        Flag("hasStewardess", "has_stewardess"),
        Flag("hasTv", "has_tv"),
        Flag("hasOutlet", "has_outlet"),
        Flag("hasBelts", "has_belts"),
    )

    id = DB.Column(DB.Integer, primary_key=True)
    number = DB.Column(DB.String(32), nullable=False)
    type = DB.Column(DB.String(32))
    brand = DB.Column(DB.String(64))
    capacity = DB.Column(DB.Integer)
    has_climate_control = DB.Column(DB.Boolean, default=False)
    has_wi_fi = DB.Column(DB.Boolean, default=False)
    has_wc = DB.Column(DB.Boolean, default=False)
    has_stewardess = DB.Column(DB.Boolean, default=False)
    has_tv = DB.Column(DB.Boolean, default=False)
    has_outlet = DB.Column(DB.Boolean, default=False)
    has_belts = DB.Column(DB.Boolean, default=False)
    company_id = DB.Column(DB.Integer, DB.ForeignKey("companies.id"))
    company = DB.relationship("Company", back_populates="vehicles")


class VehicleEnrollment(ResourceBase, DB.Model):
    """
    A vehicle driving a route, the legs of the trip are the route_address_details
    """

    __tablename__ = "vehicle_enrollments"
    _s_collection_name = "vehicleEnrollments"
    _s_default_fields = "id,vehicleId,routeId,departureDateTimeUtc,cancellationComment,cost"
    _s_filters = (
        Search("search", "cancellation_comment"),
        Equals("vehicleId", "vehicle_id", parse_int),
        Equals("routeId", "route_id", parse_int),
        Range("fromDepartureDateTime", "toDepartureDateTime", "departure_date_time_utc", parse_datetime),
        Flag("isCancelled", "cancellation_comment", present=True),
        AggregateRange(
            "fromTotalTripDuration",
            "toTotalTripDuration",
            leg_duration,
            parser=parse_duration,
            zero=datetime.timedelta(0),
        ),
        AggregateRange("fromCost", "toCost", leg_cost),
    )

    id = DB.Column(DB.Integer, primary_key=True)
    vehicle_id = DB.Column(DB.Integer, DB.ForeignKey("vehicles.id"), nullable=False)
    route_id = DB.Column(DB.Integer, DB.ForeignKey("routes.id"), nullable=False)
    departure_date_time_utc = DB.Column(DB.DateTime, nullable=False)
    cancellation_comment = DB.Column(DB.String(256))
    vehicle = DB.relationship("Vehicle")
    route = DB.relationship("Route")
    route_address_details = DB.relationship("RouteAddressDetails", back_populates="vehicle_enrollment")
    tickets = DB.relationship("Ticket", back_populates="vehicle_enrollment")

    @api_attr
    def cost(self):
        """sum of the leg costs"""
        return leg_cost(self)

    @api_attr
    def total_trip_duration(self):
        """sum of the waiting and driving time of the legs"""
        return leg_duration(self)


class RouteAddressDetails(ResourceBase, DB.Model):
    """
    The timing and pricing of one leg of an enrollment
    """

    __tablename__ = "route_address_details"
    _s_collection_name = "routeAddressDetails"
    _s_default_fields = "id,vehicleEnrollmentId,routeAddressId,timeSpanToNextCity,waitTimeSpan,costToNextCity"
    _s_filters = (
        Equals("vehicleEnrollmentId", "vehicle_enrollment_id", parse_int),
        Equals("routeAddressId", "route_address_id", parse_int),
    )

    id = DB.Column(DB.Integer, primary_key=True)
    vehicle_enrollment_id = DB.Column(DB.Integer, DB.ForeignKey("vehicle_enrollments.id"), nullable=False)
    route_address_id = DB.Column(DB.Integer, DB.ForeignKey("route_addresses.id"), nullable=False)
    time_span_to_next_city = DB.Column(DB.Interval)
    wait_time_span = DB.Column(DB.Interval)
    cost_to_next_city = DB.Column(DB.Float)
    vehicle_enrollment = DB.relationship("VehicleEnrollment", back_populates="route_address_details")
    route_address = DB.relationship("RouteAddress")


class TicketGroup(ResourceBase, DB.Model):
    __tablename__ = "ticket_groups"
    _s_collection_name = "ticketGroups"
    _s_default_fields = "id,userId"
    _s_filters = (Equals("userId", "user_id"),)

    id = DB.Column(DB.Integer, primary_key=True)
    user_id = DB.Column(DB.String(64), nullable=False)
    tickets = DB.relationship("Ticket", back_populates="ticket_group")


class Ticket(ResourceBase, DB.Model):
    __tablename__ = "tickets"
    _s_collection_name = "tickets"
    _s_default_fields = "id,userId,vehicleEnrollmentId,purchaseDateTimeUtc,isReturned,isMissed"
    _s_filters = (
        Equals("userId", "user_id"),
        Equals("vehicleEnrollmentId", "vehicle_enrollment_id", parse_int),
        Range("fromPurchaseDateTime", "toPurchaseDateTime", "purchase_date_time_utc", parse_datetime),
        Flag("isReturned", "is_returned"),
        Flag("isMissed", "is_missed"),
    )

    id = DB.Column(DB.Integer, primary_key=True)
    user_id = DB.Column(DB.String(64), nullable=False)
    vehicle_enrollment_id = DB.Column(DB.Integer, DB.ForeignKey("vehicle_enrollments.id"), nullable=False)
    purchase_date_time_utc = DB.Column(DB.DateTime, nullable=False)
    is_returned = DB.Column(DB.Boolean, default=False)
    is_missed = DB.Column(DB.Boolean, default=False)
    ticket_group_id = DB.Column(DB.Integer, DB.ForeignKey("ticket_groups.id"))
    vehicle_enrollment = DB.relationship("VehicleEnrollment", back_populates="tickets")
    ticket_group = DB.relationship("TicketGroup", back_populates="tickets")


EXPOSED_MODELS = (
    Country,
    State,
    City,
    Address,
    Route,
    RouteAddress,
    Company,
    Vehicle,
    VehicleEnrollment,
    RouteAddressDetails,
    Ticket,
    TicketGroup,
)
