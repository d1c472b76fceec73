import json
from http import HTTPStatus

import pytest
from flask import Flask
from flask.testing import FlaskClient

from transitnet.pipeline import ListingPipeline


def paging(response) -> dict:
    return json.loads(response.headers["X-Pagination"])


def ids(response) -> list:
    return [record["id"] for record in response.get_json()]


def test_list_default_fields(client: FlaskClient) -> None:
    response = client.get("/api/vehicleEnrollments")
    assert response.status_code == HTTPStatus.OK
    records = response.get_json()
    assert len(records) == 4
    assert list(records[0]) == ["id", "vehicleId", "routeId", "departureDateTimeUtc", "cancellationComment", "cost"]
    assert records[0]["departureDateTimeUtc"] == "2026-01-01T08:00:00"
    assert records[0]["cost"] == 45.0


def test_paging_header(client: FlaskClient) -> None:
    response = client.get("/api/vehicles?pageSize=10&pageNumber=3")
    assert ids(response) == [21, 22, 23, 24, 25]
    assert paging(response) == {
        "totalCount": 25,
        "pageSize": 10,
        "currentPage": 3,
        "totalPages": 3,
        "hasPrevious": True,
        "hasNext": False,
    }


def test_default_paging(client: FlaskClient) -> None:
    response = client.get("/api/vehicles?pageNumber=abc&pageSize=")
    assert ids(response) == list(range(1, 11))
    assert paging(response)["pageSize"] == 10
    assert paging(response)["currentPage"] == 1


def test_max_page_size(app: Flask, client: FlaskClient) -> None:
    assert paging(client.get("/api/vehicles?pageSize=1000"))["pageSize"] == 50
    app.config["MAX_PAGE_SIZE"] = 5
    response = client.get("/api/vehicles?pageSize=20")
    assert len(response.get_json()) == 5
    assert paging(response)["totalPages"] == 5


def test_case_insensitive_arguments(client: FlaskClient) -> None:
    response = client.get("/api/countries?FIELDS=Name&SORT=-NAME&PageSize=2&PAGENUMBER=1")
    assert response.get_json() == [{"id": 1, "name": "Ukraine"}, {"id": 2, "name": "Poland"}]
    assert paging(response)["totalCount"] == 3


def test_fields_unknown_are_ignored(client: FlaskClient) -> None:
    response = client.get("/api/countries?fields=code,bogus")
    assert response.get_json()[0] == {"id": 3, "code": "DE"}


def test_sort_multiple_keys(client: FlaskClient) -> None:
    response = client.get("/api/vehicleEnrollments?sort=-departureDateTimeUtc,cost")
    assert ids(response) == [3, 2, 4, 1]


def test_default_sort(client: FlaskClient) -> None:
    assert [c["name"] for c in client.get("/api/countries").get_json()] == ["Germany", "Poland", "Ukraine"]


def test_invalid_sort(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("the collection should not be queried")

    monkeypatch.setattr(ListingPipeline, "filter", fail)
    response = client.get("/api/vehicleEnrollments?sort=bogusField")
    assert response.status_code == HTTPStatus.BAD_REQUEST
    error = response.get_json()["errors"][0]
    assert error["code"] == "InvalidSortExpression"
    assert "bogusField" in error["detail"]


def test_sort_on_unselected_field(client: FlaskClient) -> None:
    response = client.get("/api/countries?fields=name&sort=code")
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["errors"][0]["code"] == "InvalidSortExpression"


def test_cost_filter(client: FlaskClient) -> None:
    response = client.get("/api/vehicleEnrollments?fromCost=10&toCost=50")
    assert ids(response) == [1, 4]
    assert paging(response)["totalCount"] == 2


def test_trip_duration_filter(client: FlaskClient) -> None:
    response = client.get("/api/vehicleEnrollments?fromTotalTripDuration=03:00&fields=totalTripDuration")
    assert response.get_json() == [{"id": 1, "totalTripDuration": "03:45:00"}, {"id": 2, "totalTripDuration": "06:00:00"}]
    assert ids(client.get("/api/vehicleEnrollments?toTotalTripDuration=01:00")) == [3, 4]


def test_simple_and_aggregate_filters_combined(client: FlaskClient) -> None:
    response = client.get("/api/vehicleEnrollments?toCost=50&isCancelled=false&fromDepartureDateTime=2026-01-01T00:00:00Z")
    assert ids(response) == [1, 4]
    assert ids(client.get("/api/vehicleEnrollments?isCancelled=true")) == [3]


def test_search(client: FlaskClient) -> None:
    assert ids(client.get("/api/countries?search=POL")) == [2]
    assert ids(client.get("/api/countries?search=de")) == [3]
    assert ids(client.get("/api/countries?search=%25")) == []


def test_vehicle_filters(client: FlaskClient) -> None:
    response = client.get("/api/vehicles?fromCapacity=30&hasWiFi=true&pageSize=50")
    assert ids(response) == [21, 23, 25]
    response = client.get("/api/vehicles?search=minibus&fields=type&pageSize=50")
    assert ids(response) == [5, 10, 15, 20, 25]


def test_invalid_filter_value_is_ignored(client: FlaskClient) -> None:
    response = client.get("/api/states?countryId=abc")
    assert response.status_code == HTTPStatus.OK
    assert len(response.get_json()) == 2


def test_ticket_filters(client: FlaskClient) -> None:
    assert ids(client.get("/api/tickets?userId=user-1")) == [1, 2]
    assert ids(client.get("/api/tickets?isReturned=true")) == [2]
    assert ids(client.get("/api/tickets?toPurchaseDateTime=2025-12-28T10:00:00")) == [1, 2]


def test_durations_are_serialized(client: FlaskClient) -> None:
    record = client.get("/api/routeAddresses/1").get_json()
    assert record["timeSpanToNextCity"] == "02:00:00"
    assert record["waitTimeSpan"] == "00:10:00"


def test_get_instance(client: FlaskClient) -> None:
    response = client.get("/api/cities/2")
    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"id": 2, "name": "Warsaw", "stateId": 2}
    assert client.get("/api/cities/2?fields=name").get_json() == {"id": 2, "name": "Warsaw"}


def test_get_instance_not_found(client: FlaskClient) -> None:
    response = client.get("/api/cities/404")
    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["errors"][0]["code"] == "404"


def test_empty_collection(client: FlaskClient) -> None:
    response = client.get("/api/vehicleEnrollments?vehicleId=25")
    assert response.get_json() == []
    assert paging(response)["totalCount"] == 0


def test_non_finite_filter_value_is_ignored(client: FlaskClient) -> None:
    assert ids(client.get("/api/vehicleEnrollments?toCost=nan")) == [1, 2, 3, 4]
    assert ids(client.get("/api/vehicles?fromCapacity=inf&pageSize=50")) == list(range(1, 26))


def test_unrouted_id_not_found(client: FlaskClient) -> None:
    response = client.get("/api/cities/abc")
    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.is_json
    error = response.get_json()["errors"][0]
    assert error["code"] == "404"
    assert error["title"] == "Not Found"


def test_page_size_floor(app: Flask, client: FlaskClient) -> None:
    app.config["MAX_PAGE_SIZE"] = 0
    response = client.get("/api/vehicles")
    assert ids(response) == [1]
    assert paging(response)["pageSize"] == 1
    assert paging(response)["totalPages"] == 25


def test_unexpected_error(client: FlaskClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args, **kwargs):
        raise RuntimeError("db is gone")

    monkeypatch.setattr(ListingPipeline, "filter", fail)
    response = client.get("/api/vehicleEnrollments")
    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_json()["errors"][0]["code"] == "500"
