def _create_store(client, headers, name="Corner Shop", address="1 Main St"):
    response = client.post("/store/create", json={"name": name, "address": address}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["payload"]


def test_store_crud(client, admin_headers):
    store = _create_store(client, admin_headers)

    listed = client.get("/store")
    assert [entry["id"] for entry in listed.json()["payload"]] == [store["id"]]
    assert client.get("/store/getAll").json()["payload"] == listed.json()["payload"]

    updated = client.put(f"/store/{store['id']}", json={"address": "2 High St"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["payload"]["name"] == "Corner Shop"
    assert updated.json()["payload"]["address"] == "2 High St"

    fetched = client.get(f"/store/{store['id']}")
    assert fetched.json()["payload"]["address"] == "2 High St"

    deleted = client.delete(f"/store/{store['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/store/{store['id']}").status_code == 404
    assert client.get("/store").json()["payload"] == []


def test_store_mutations_require_admin(client, register_user):
    alice = register_user("alice@example.com")

    no_token = client.post("/store/create", json={"name": "Shop", "address": "Somewhere"})
    as_user = client.post("/store/create", json={"name": "Shop", "address": "Somewhere"}, headers=alice["headers"])

    assert no_token.status_code == 401
    assert as_user.status_code == 403


def test_store_with_items_cannot_be_deleted(client, admin_headers):
    store = _create_store(client, admin_headers)
    client.post(
        "/item/create",
        data={"name": "Widget", "price": "30", "store_id": store["id"], "stock": "5"},
        headers=admin_headers,
    )

    response = client.delete(f"/store/{store['id']}", headers=admin_headers)

    assert response.status_code == 409
    assert client.get(f"/store/{store['id']}").status_code == 200


def test_deleting_a_store_detaches_its_managers(client, admin_headers, register_user):
    store = _create_store(client, admin_headers)
    manager = register_user("manager@example.com")
    user_id = manager["user"]["id"]
    client.put(f"/user/{user_id}", json={"store_id": store["id"]}, headers=admin_headers)

    client.delete(f"/store/{store['id']}", headers=admin_headers)

    response = client.get(f"/user/{user_id}", headers=admin_headers)
    assert response.json()["payload"]["store_id"] is None
