import datetime
from typing import Iterator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from transitnet import DB
from transitnet.app import create_app
from transitnet.models import (
    Address,
    City,
    Company,
    Country,
    Route,
    RouteAddress,
    RouteAddressDetails,
    State,
    Ticket,
    TicketGroup,
    Vehicle,
    VehicleEnrollment,
)

JAN_1 = datetime.datetime(2026, 1, 1, 8, 0)
JAN_2 = datetime.datetime(2026, 1, 2, 8, 0)


def minutes(value: int) -> datetime.timedelta:
    return datetime.timedelta(minutes=value)


def seed(session) -> None:
    """
    Enrollments (id: departure, leg costs, trip duration):
        1: JAN_1, 20 + 25 = 45, 3:45
        2: JAN_2, 30 + 30 = 60, 6:00
        3: JAN_2, no legs = 0, cancelled
        4: JAN_1, 10 + None = 10, 0:30
    """
    session.add_all(
        [
            Country(id=1, code="UA", name="Ukraine"),
            Country(id=2, code="PL", name="Poland"),
            Country(id=3, code="DE", name="Germany"),
            State(id=1, name="Lviv Oblast", country_id=1),
            State(id=2, name="Masovia", country_id=2),
            City(id=1, name="Lviv", state_id=1),
            City(id=2, name="Warsaw", state_id=2),
            Address(id=1, name="Central Station", latitude=49.84, longitude=24.0, city_id=1),
            Address(id=2, name="Warszawa Zachodnia", latitude=52.22, longitude=20.96, city_id=2),
            Route(id=1, number="L-W 100"),
            RouteAddress(id=1, route_id=1, address_id=1, order=1, time_span_to_next_city=minutes(120), wait_time_span=minutes(10), cost_to_next_city=20.0),
            RouteAddress(id=2, route_id=1, address_id=2, order=2, time_span_to_next_city=minutes(90), wait_time_span=minutes(5), cost_to_next_city=25.0),
            Company(id=1, name="Lux Express", owner_id="owner-1"),
        ]
    )
    for i in range(1, 26):
        session.add(
            Vehicle(
                id=i,
                number=f"V{i:02}",
                type="bus" if i % 5 else "minibus",
                brand="Neoplan" if i % 2 else "Setra",
                capacity=10 + i,
                has_wi_fi=bool(i % 2),
                company_id=1,
            )
        )
    session.add_all(
        [
            VehicleEnrollment(id=1, vehicle_id=1, route_id=1, departure_date_time_utc=JAN_1),
            VehicleEnrollment(id=2, vehicle_id=2, route_id=1, departure_date_time_utc=JAN_2),
            VehicleEnrollment(id=3, vehicle_id=3, route_id=1, departure_date_time_utc=JAN_2, cancellation_comment="Driver sick"),
            VehicleEnrollment(id=4, vehicle_id=4, route_id=1, departure_date_time_utc=JAN_1),
            RouteAddressDetails(id=1, vehicle_enrollment_id=1, route_address_id=1, wait_time_span=minutes(10), time_span_to_next_city=minutes(120), cost_to_next_city=20.0),
            RouteAddressDetails(id=2, vehicle_enrollment_id=1, route_address_id=2, wait_time_span=minutes(5), time_span_to_next_city=minutes(90), cost_to_next_city=25.0),
            RouteAddressDetails(id=3, vehicle_enrollment_id=2, route_address_id=1, wait_time_span=minutes(0), time_span_to_next_city=minutes(300), cost_to_next_city=30.0),
            RouteAddressDetails(id=4, vehicle_enrollment_id=2, route_address_id=2, time_span_to_next_city=minutes(60), cost_to_next_city=30.0),
            RouteAddressDetails(id=5, vehicle_enrollment_id=4, route_address_id=1, time_span_to_next_city=minutes(30), cost_to_next_city=10.0),
            RouteAddressDetails(id=6, vehicle_enrollment_id=4, route_address_id=2),
            TicketGroup(id=1, user_id="user-1"),
            Ticket(id=1, user_id="user-1", vehicle_enrollment_id=1, purchase_date_time_utc=datetime.datetime(2025, 12, 20, 10, 0), ticket_group_id=1),
            Ticket(id=2, user_id="user-1", vehicle_enrollment_id=2, purchase_date_time_utc=datetime.datetime(2025, 12, 28, 10, 0), is_returned=True, ticket_group_id=1),
            Ticket(id=3, user_id="user-2", vehicle_enrollment_id=2, purchase_date_time_utc=datetime.datetime(2025, 12, 30, 10, 0), is_missed=True),
        ]
    )
    session.commit()


@pytest.fixture
def app() -> Iterator[Flask]:
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    with app.app_context():
        seed(DB.session)
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()
