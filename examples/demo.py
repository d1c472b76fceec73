#!/usr/bin/env python
#
# This demo application exposes the transit network collections on a sqlite db
#
# run:
# $ python examples/demo.py [port]
#
# then browse to e.g.
# http://127.0.0.1:5000/api/vehicleEnrollments?sort=-departureDateTimeUtc,cost&fromCost=10
#
import datetime
import sys
from transitnet import DB, log
from transitnet.app import create_app
from transitnet.models import Company, Route, RouteAddressDetails, Vehicle, VehicleEnrollment


def populate_db():
    """Add a company, a route and a couple of enrollments"""
    DB.session.add_all([Company(id=1, name="Demo Lines", owner_id="demo"), Route(id=1, number="D-1")])
    for i in range(1, 31):
        DB.session.add(Vehicle(id=i, number=f"DV{i:03}", type="bus", brand="Demo", capacity=20 + i, company_id=1))
        departure = datetime.datetime(2026, 1, 1, 6, 0) + datetime.timedelta(hours=i)
        DB.session.add(VehicleEnrollment(id=i, vehicle_id=i, route_id=1, departure_date_time_utc=departure))
        DB.session.add(
            RouteAddressDetails(
                vehicle_enrollment_id=i,
                route_address_id=1,
                time_span_to_next_city=datetime.timedelta(minutes=15 * i),
                cost_to_next_city=2.5 * i,
            )
        )
    DB.session.commit()


if __name__ == "__main__":
    HOST = "127.0.0.1"
    PORT = int(sys.argv[1]) if len(sys.argv) > 1 else 5000
    app = create_app({"SQLALCHEMY_DATABASE_URI": "sqlite:///demo.sqlite", "DEBUG": True})
    with app.app_context():
        DB.drop_all()
        DB.create_all()
        populate_db()
    log.info(f"Starting API: http://{HOST}:{PORT}/api/vehicleEnrollments")
    app.run(host=HOST, port=PORT)
