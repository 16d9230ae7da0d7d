def test_register_returns_envelope_without_credentials(client):
    response = client.post(
        "/user/register",
        json={"name": "Alice", "email": "Alice@Example.com", "password": "Passw0rd!"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["payload"]["email"] == "alice@example.com"
    assert body["payload"]["balance"] == 0
    assert body["payload"]["role"] == "user"
    assert "password" not in body["payload"]
    assert "password_hash" not in body["payload"]


def test_register_rejects_duplicate_email(client, register_user):
    register_user("alice@example.com")

    response = client.post(
        "/user/register",
        json={"name": "Alice Again", "email": "ALICE@example.com", "password": "Passw0rd!"},
    )

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "Email already used", "payload": None}


def test_register_rejects_weak_password(client):
    response = client.post(
        "/user/register",
        json={"name": "Bob", "email": "bob@example.com", "password": "password"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_register_escapes_markup_in_name(client):
    response = client.post(
        "/user/register",
        json={"name": "<b>Eve</b>", "email": "eve@example.com", "password": "Passw0rd!"},
    )

    assert response.status_code == 201
    assert response.json()["payload"]["name"] == "&lt;b&gt;Eve&lt;/b&gt;"


def test_login_with_wrong_password(client, register_user):
    register_user("carol@example.com")

    response = client.post("/user/login", json={"email": "carol@example.com", "password": "Wrong123!"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_protected_route_requires_token(client):
    response = client.get("/user/all")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_user_listing_is_admin_only(client, register_user, admin_headers):
    alice = register_user("alice@example.com")

    assert client.get("/user/all", headers=alice["headers"]).status_code == 403

    response = client.get("/user/all", headers=admin_headers)
    assert response.status_code == 200
    emails = {user["email"] for user in response.json()["payload"]}
    assert {"alice@example.com", "admin@example.com"} <= emails


def test_lookup_by_id_and_email(client, register_user):
    alice = register_user("alice@example.com")
    user_id = alice["user"]["id"]

    by_id = client.get(f"/user/{user_id}", headers=alice["headers"])
    by_email = client.get("/user/email/alice@example.com", headers=alice["headers"])
    missing = client.get("/user/email/nobody@example.com", headers=alice["headers"])

    assert by_id.json()["payload"]["id"] == user_id
    assert by_email.json()["payload"]["id"] == user_id
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"


def test_top_up_increments_balance(client, register_user):
    alice = register_user("alice@example.com")
    user_id = alice["user"]["id"]

    client.post(f"/user/topUp?id={user_id}&amount=70", headers=alice["headers"])
    response = client.post(f"/user/topUp?id={user_id}&amount=30", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["payload"]["balance"] == 100


def test_top_up_rejects_non_positive_and_non_numeric_amounts(client, register_user):
    alice = register_user("alice@example.com")
    user_id = alice["user"]["id"]

    for amount in ("0", "-5", "abc", "1.5"):
        response = client.post(f"/user/topUp?id={user_id}&amount={amount}", headers=alice["headers"])
        assert response.status_code == 400, amount
        assert response.json()["payload"]["errors"][0]["field"] == "amount"


def test_users_cannot_top_up_someone_else(client, register_user):
    alice = register_user("alice@example.com")
    bob = register_user("bob@example.com")

    response = client.post(f"/user/topUp?id={alice['user']['id']}&amount=10", headers=bob["headers"])

    assert response.status_code == 403


def test_update_profile_and_privileges(client, register_user, admin_headers):
    alice = register_user("alice@example.com")
    user_id = alice["user"]["id"]

    renamed = client.put(f"/user/{user_id}", json={"name": "Alice Liddell"}, headers=alice["headers"])
    assert renamed.status_code == 200
    assert renamed.json()["payload"]["name"] == "Alice Liddell"

    escalate = client.put(f"/user/{user_id}", json={"role": "admin"}, headers=alice["headers"])
    assert escalate.status_code == 403

    promoted = client.put(f"/user/{user_id}", json={"role": "admin"}, headers=admin_headers)
    assert promoted.json()["payload"]["role"] == "admin"


def test_update_rejects_unknown_managed_store(client, register_user, admin_headers):
    alice = register_user("alice@example.com")

    response = client.put(
        f"/user/{alice['user']['id']}",
        json={"store_id": "00000000-0000-0000-0000-000000000000"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Store not found with provided ID"


def test_delete_user(client, register_user):
    alice = register_user("alice@example.com")
    user_id = alice["user"]["id"]

    response = client.delete(f"/user/{user_id}", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["payload"]["id"] == user_id
    assert client.post("/user/login", json={"email": "alice@example.com", "password": "Passw0rd!"}).status_code == 401
