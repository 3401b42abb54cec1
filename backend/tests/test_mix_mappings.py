from uuid import uuid4

import pytest

from conftest import create_ingredient, create_location, create_mapping, create_menu_item


@pytest.fixture
def kitchen(client, org_a):
    """One location, menu item and ingredient owned by Org A"""
    headers = org_a["headers"]
    return {
        "location": create_location(client, headers, "Main"),
        "menu_item": create_menu_item(client, headers, "Bread"),
        "ingredient": create_ingredient(client, headers, "Flour", 2.5, "kg"),
    }


def _payload(kitchen, **overrides):
    payload = {
        "menuItemId": kitchen["menu_item"]["id"],
        "locationId": kitchen["location"]["id"],
        "ingredientId": kitchen["ingredient"]["id"],
        "quantity": 0.5,
    }
    payload.update(overrides)
    return payload


def _list(client, headers, **params):
    response = client.get("/api/mix-mappings", params=params, headers=headers)
    assert response.status_code == 200
    return response.json()


def test_create_embeds_ingredient(client, org_a, kitchen):
    response = client.post("/api/mix-mappings", json=_payload(kitchen), headers=org_a["headers"])
    assert response.status_code == 201
    mapping = response.json()
    assert mapping["quantity"] == 0.5
    assert mapping["locationId"] == kitchen["location"]["id"]
    assert mapping["ingredient"]["name"] == "Flour"
    assert mapping["ingredient"]["price"] == 2.5


def test_manager_can_edit_recipes(client, manager_a, kitchen):
    response = client.post("/api/mix-mappings", json=_payload(kitchen), headers=manager_a["headers"])
    assert response.status_code == 201


@pytest.mark.parametrize("field", ["locationId", "menuItemId", "ingredientId"])
def test_create_with_foreign_reference_is_forbidden(client, org_a, org_b, kitchen, field):
    b_headers = org_b["headers"]
    foreign = {
        "locationId": create_location(client, b_headers, "B")["id"],
        "menuItemId": create_menu_item(client, b_headers, "B")["id"],
        "ingredientId": create_ingredient(client, b_headers, "B")["id"],
    }

    response = client.post("/api/mix-mappings", json=_payload(kitchen, **{field: foreign[field]}), headers=org_a["headers"])
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied"}

    assert _list(client, org_a["headers"]) == []
    assert _list(client, b_headers) == []


@pytest.mark.parametrize(
    "field, message",
    [
        ("locationId", "Location not found"),
        ("menuItemId", "Menu item not found"),
        ("ingredientId", "Ingredient not found"),
    ],
)
def test_create_with_unknown_reference_is_not_found(client, org_a, kitchen, field, message):
    response = client.post("/api/mix-mappings", json=_payload(kitchen, **{field: str(uuid4())}), headers=org_a["headers"])
    assert response.status_code == 404
    assert response.json() == {"error": message}


def test_duplicate_recipe_line_is_rejected(client, org_a, kitchen):
    headers = org_a["headers"]
    assert client.post("/api/mix-mappings", json=_payload(kitchen), headers=headers).status_code == 201

    response = client.post("/api/mix-mappings", json=_payload(kitchen, quantity=2), headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Ingredient already in this recipe"}
    assert len(_list(client, headers)) == 1


@pytest.mark.parametrize("quantity", ["abc", 0, -1, "NaN", "Infinity", None])
def test_create_rejects_bad_quantity(client, org_a, kitchen, quantity):
    response = client.post("/api/mix-mappings", json=_payload(kitchen, quantity=quantity), headers=org_a["headers"])
    assert response.status_code == 400
    assert "error" in response.json()
    assert _list(client, org_a["headers"]) == []


def test_list_filters_and_scoping(client, org_a, org_b, kitchen):
    headers = org_a["headers"]
    other_item = create_menu_item(client, headers, "Cake")
    create_mapping(client, headers, kitchen["menu_item"], kitchen["location"], kitchen["ingredient"], 0.5)
    create_mapping(client, headers, other_item, kitchen["location"], kitchen["ingredient"], 0.2)

    b_headers = org_b["headers"]
    create_mapping(
        client,
        b_headers,
        create_menu_item(client, b_headers),
        create_location(client, b_headers),
        create_ingredient(client, b_headers),
    )

    assert len(_list(client, headers)) == 2
    bread = _list(client, headers, menuItemId=kitchen["menu_item"]["id"], locationId=kitchen["location"]["id"])
    assert [m["menuItemId"] for m in bread] == [kitchen["menu_item"]["id"]]
    assert len(_list(client, b_headers)) == 1
    assert _list(client, b_headers, locationId=kitchen["location"]["id"]) == []


def test_update_quantity(client, org_a, kitchen):
    mapping = create_mapping(client, org_a["headers"], kitchen["menu_item"], kitchen["location"], kitchen["ingredient"])

    response = client.patch(f"/api/mix-mappings/{mapping['id']}", json={"quantity": 3.25}, headers=org_a["headers"])
    assert response.status_code == 200
    assert response.json()["quantity"] == 3.25
    assert response.json()["ingredient"]["id"] == kitchen["ingredient"]["id"]


def test_update_rejects_zero_quantity(client, org_a, kitchen):
    mapping = create_mapping(client, org_a["headers"], kitchen["menu_item"], kitchen["location"], kitchen["ingredient"])
    response = client.patch(f"/api/mix-mappings/{mapping['id']}", json={"quantity": 0}, headers=org_a["headers"])
    assert response.status_code == 400


def test_update_and_delete_are_scoped(client, org_a, org_b, kitchen):
    mapping = create_mapping(client, org_a["headers"], kitchen["menu_item"], kitchen["location"], kitchen["ingredient"])
    url = f"/api/mix-mappings/{mapping['id']}"

    assert client.patch(url, json={"quantity": 9}, headers=org_b["headers"]).status_code == 403
    assert client.delete(url, headers=org_b["headers"]).status_code == 403
    assert _list(client, org_a["headers"])[0]["quantity"] == 1

    assert client.patch(f"/api/mix-mappings/{uuid4()}", json={"quantity": 9}, headers=org_a["headers"]).status_code == 404
    assert client.delete(f"/api/mix-mappings/{uuid4()}", headers=org_a["headers"]).status_code == 404


def test_delete_recipe_line(client, org_a, kitchen):
    mapping = create_mapping(client, org_a["headers"], kitchen["menu_item"], kitchen["location"], kitchen["ingredient"])

    response = client.delete(f"/api/mix-mappings/{mapping['id']}", headers=org_a["headers"])
    assert response.status_code == 200
    assert response.json() == {"message": "Mix mapping deleted successfully"}
    assert _list(client, org_a["headers"]) == []


def test_requires_authentication(client):
    assert client.get("/api/mix-mappings").status_code == 401


@pytest.mark.parametrize("quantity", [0.0004, 1.2345, 1e9, 12345678.5])
def test_create_rejects_quantity_the_column_cannot_hold(client, org_a, kitchen, quantity):
    response = client.post("/api/mix-mappings", json=_payload(kitchen, quantity=quantity), headers=org_a["headers"])
    assert response.status_code == 400
    assert _list(client, org_a["headers"]) == []


def test_smallest_quantity_is_kept_exactly(client, org_a, kitchen):
    response = client.post("/api/mix-mappings", json=_payload(kitchen, quantity=0.001), headers=org_a["headers"])
    assert response.status_code == 201
    assert _list(client, org_a["headers"])[0]["quantity"] == 0.001


def test_update_rejects_quantity_the_column_cannot_hold(client, org_a, kitchen):
    mapping = create_mapping(client, org_a["headers"], kitchen["menu_item"], kitchen["location"], kitchen["ingredient"])
    response = client.patch(f"/api/mix-mappings/{mapping['id']}", json={"quantity": 0.0004}, headers=org_a["headers"])
    assert response.status_code == 400
    assert _list(client, org_a["headers"])[0]["quantity"] == 1
