import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def store(client, admin_headers):
    response = client.post("/store/create", json={"name": "Corner Shop", "address": "1 Main St"}, headers=admin_headers)
    return response.json()["payload"]


def _create_item(client, headers, store_id, name="Widget", price=30, stock=5, files=None):
    return client.post(
        "/item/create",
        data={"name": name, "price": str(price), "store_id": store_id, "stock": str(stock)},
        files=files,
        headers=headers,
    )


def test_create_item_with_image(client, admin_headers, store, settings):
    response = _create_item(
        client, admin_headers, store["id"], files={"image": ("widget.png", PNG_BYTES, "image/png")}
    )

    assert response.status_code == 201
    item = response.json()["payload"]
    assert item["price"] == 30
    assert item["stock"] == 5
    assert item["image_url"].startswith("/uploads/")
    stored = settings.storage.image_dir / item["image_url"].rsplit("/", 1)[-1]
    assert stored.read_bytes() == PNG_BYTES

    served = client.get(item["image_url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_create_item_rejects_non_image_upload(client, admin_headers, store, settings):
    response = _create_item(
        client, admin_headers, store["id"], files={"image": ("notes.txt", b"hello", "text/plain")}
    )

    assert response.status_code == 422
    assert response.json()["message"] == "Only image files are allowed"
    assert list(settings.storage.image_dir.iterdir()) == []


def test_failed_insert_removes_uploaded_image(client, admin_headers, store, settings):
    assert _create_item(client, admin_headers, store["id"]).status_code == 201

    response = _create_item(
        client, admin_headers, store["id"], files={"image": ("widget.png", PNG_BYTES, "image/png")}
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Item with this name already exists in this store"
    assert list(settings.storage.image_dir.iterdir()) == []


def test_create_item_validates_numbers(client, admin_headers, store):
    for price in ("abc", "-1", "2.5"):
        response = _create_item(client, admin_headers, store["id"], price=price)
        assert response.status_code == 400, price
        assert response.json()["payload"]["errors"][0]["field"] == "price"


def test_create_item_for_unknown_store(client, admin_headers):
    response = _create_item(client, admin_headers, "00000000-0000-0000-0000-000000000000")

    assert response.status_code == 400
    assert response.json()["message"] == "Store not found with provided ID"


def test_only_store_managers_can_create_items(client, admin_headers, register_user, store):
    outsider = register_user("outsider@example.com")
    manager = register_user("manager@example.com")
    client.put(f"/user/{manager['user']['id']}", json={"store_id": store["id"]}, headers=admin_headers)

    assert _create_item(client, outsider["headers"], store["id"]).status_code == 403
    assert _create_item(client, manager["headers"], store["id"]).status_code == 201


def test_list_items_paginates_filters_and_sorts(client, admin_headers, store):
    for name, price in (("Apple", 10), ("Banana", 20), ("Cherry", 30), ("Date", 40), ("Elderberry", 50)):
        _create_item(client, admin_headers, store["id"], name=name, price=price)

    page = client.get("/item?page=2&limit=2&sort_by=price&sort_order=asc").json()["payload"]
    assert [item["name"] for item in page["items"]] == ["Cherry", "Date"]
    assert page["pagination"] == {
        "total_items": 5,
        "total_pages": 3,
        "current_page": 2,
        "items_per_page": 2,
    }

    filtered = client.get("/item?min_price=20&max_price=40&sort_by=name&sort_order=desc").json()["payload"]
    assert [item["name"] for item in filtered["items"]] == ["Date", "Cherry", "Banana"]

    by_name = client.get("/item?name=berry").json()["payload"]
    assert [item["name"] for item in by_name["items"]] == ["Elderberry"]


def test_list_items_rejects_unknown_sort_field(client):
    response = client.get("/item?sort_by=password")

    assert response.status_code == 400


def test_items_by_store_and_by_id(client, admin_headers, store):
    item = _create_item(client, admin_headers, store["id"]).json()["payload"]

    by_store = client.get(f"/item/byStoreId/{store['id']}").json()["payload"]
    by_id = client.get(f"/item/byId/{item['id']}")

    assert [entry["id"] for entry in by_store["items"]] == [item["id"]]
    assert by_id.json()["payload"]["name"] == "Widget"
    assert client.get("/item/byId/not-a-uuid").json()["message"] == "Invalid item ID format"


def test_update_item_replaces_image(client, admin_headers, store, settings):
    item = _create_item(
        client, admin_headers, store["id"], files={"image": ("old.png", PNG_BYTES, "image/png")}
    ).json()["payload"]
    old_file = settings.storage.image_dir / item["image_url"].rsplit("/", 1)[-1]

    response = client.put(
        f"/item/{item['id']}",
        data={"price": "45"},
        files={"image": ("new.png", PNG_BYTES + b"new", "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()["payload"]
    assert updated["price"] == 45
    assert updated["stock"] == 5
    assert updated["image_url"] != item["image_url"]
    assert not old_file.exists()


def test_delete_item_removes_image(client, admin_headers, store, settings):
    item = _create_item(
        client, admin_headers, store["id"], files={"image": ("widget.png", PNG_BYTES, "image/png")}
    ).json()["payload"]

    response = client.delete(f"/item/{item['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert list(settings.storage.image_dir.iterdir()) == []
    assert client.get(f"/item/byId/{item['id']}").status_code == 404


def test_name_filter_treats_wildcards_literally(client, admin_headers, store):
    for name in ("Apple", "Banana", "100% Juice"):
        _create_item(client, admin_headers, store["id"], name=name)

    percent = client.get("/item", params={"name": "%"}).json()["payload"]
    underscore = client.get("/item", params={"name": "_"}).json()["payload"]

    assert [item["name"] for item in percent["items"]] == ["100% Juice"]
    assert underscore["items"] == []
    assert underscore["pagination"]["total_items"] == 0
