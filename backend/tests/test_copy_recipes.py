from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from conftest import create_ingredient, create_location, create_mapping, create_menu_item
from services import recipes


def _lines(client, headers, location):
    response = client.get("/api/mix-mappings", params={"locationId": location["id"]}, headers=headers)
    assert response.status_code == 200
    return sorted((m["menuItemId"], m["ingredientId"], m["quantity"]) for m in response.json())


def _copy(client, headers, source, destination):
    return client.post(
        "/api/mix-mappings/copy",
        json={"fromLocationId": source["id"], "toLocationId": destination["id"]},
        headers=headers,
    )


@pytest.fixture
def two_locations(client, org_a):
    """L1 has [X: 3] and L2 has [Y: 1] for the same menu item"""
    headers = org_a["headers"]
    l1 = create_location(client, headers, "L1")
    l2 = create_location(client, headers, "L2")
    item = create_menu_item(client, headers, "Bread")
    x = create_ingredient(client, headers, "X")
    y = create_ingredient(client, headers, "Y")
    create_mapping(client, headers, item, l1, x, 3)
    create_mapping(client, headers, item, l2, y, 1)
    return {"l1": l1, "l2": l2, "item": item, "x": x, "y": y}


def test_copy_replaces_destination(client, org_a, two_locations):
    headers = org_a["headers"]
    l1, l2 = two_locations["l1"], two_locations["l2"]
    before = _lines(client, headers, l1)

    response = _copy(client, headers, l1, l2)
    assert response.status_code == 200
    assert response.json() == {"message": "Menu copied successfully", "copiedCount": 1}

    assert _lines(client, headers, l2) == [(two_locations["item"]["id"], two_locations["x"]["id"], 3)]
    assert _lines(client, headers, l1) == before


def test_copy_twice_is_idempotent(client, org_a, two_locations):
    headers = org_a["headers"]
    l1, l2 = two_locations["l1"], two_locations["l2"]

    assert _copy(client, headers, l1, l2).status_code == 200
    once = _lines(client, headers, l2)
    assert _copy(client, headers, l1, l2).json()["copiedCount"] == 1
    assert _lines(client, headers, l2) == once


def test_copy_from_empty_location_clears_destination(client, org_a, two_locations):
    headers = org_a["headers"]
    empty = create_location(client, headers, "Empty")

    response = _copy(client, headers, empty, two_locations["l2"])
    assert response.json()["copiedCount"] == 0
    assert _lines(client, headers, two_locations["l2"]) == []


def test_copy_to_foreign_location_is_forbidden(client, org_a, org_b, two_locations):
    foreign = create_location(client, org_b["headers"], "Theirs")

    assert _copy(client, org_a["headers"], two_locations["l1"], foreign).status_code == 403
    assert _copy(client, org_b["headers"], two_locations["l1"], foreign).status_code == 403
    assert _lines(client, org_b["headers"], foreign) == []


def test_copy_with_unknown_location_is_forbidden(client, org_a, two_locations):
    headers = org_a["headers"]
    l1, l2 = two_locations["l1"], two_locations["l2"]
    before = _lines(client, headers, l2)

    response = _copy(client, headers, l1, {"id": str(uuid4())})
    assert response.status_code == 403
    assert response.json() == {"error": "Destination location not found or access denied"}

    response = _copy(client, headers, {"id": str(uuid4())}, l2)
    assert response.status_code == 403
    assert response.json() == {"error": "Source location not found or access denied"}
    assert _lines(client, headers, l2) == before


def test_copy_onto_itself_is_rejected(client, org_a, two_locations):
    l1 = two_locations["l1"]
    response = _copy(client, org_a["headers"], l1, l1)
    assert response.status_code == 400
    assert _lines(client, org_a["headers"], l1) == [(two_locations["item"]["id"], two_locations["x"]["id"], 3)]


def test_manager_can_copy(client, manager_a, two_locations):
    response = _copy(client, manager_a["headers"], two_locations["l1"], two_locations["l2"])
    assert response.status_code == 200


def test_failed_insert_leaves_destination_unchanged(client, org_a, two_locations, monkeypatch):
    headers = org_a["headers"]
    l1, l2 = two_locations["l1"], two_locations["l2"]
    before = _lines(client, headers, l2)

    def failing_copies(source, to_location_id):
        raise OperationalError("INSERT INTO mix_mappings", {}, Exception("disk I/O error"))

    monkeypatch.setattr(recipes, "_copies_for", failing_copies)

    response = _copy(client, headers, l1, l2)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to copy recipes"}
    assert _lines(client, headers, l2) == before
