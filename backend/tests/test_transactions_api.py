URL = "/api/v1/transactions"


def _category(client, headers, name="Groceries"):
    return client.post("/api/v1/spending-categories", json={"name": name}, headers=headers).json()


def test_transaction_crud(client, auth_headers):
    cat = _category(client, auth_headers)
    resp = client.post(URL, json={"item_purchased": "Milk", "cost": "4.50", "category_id": cat["id"]}, headers=auth_headers)
    assert resp.status_code == 201
    txn = resp.json()
    assert txn["cost"] == 4.5
    assert txn["category"] == {"id": cat["id"], "name": "Groceries"}
    assert txn["time"]

    resp = client.patch(f"{URL}/{txn['id']}", json={"cost": 5.25, "plaid_category": "FOOD_AND_DRINK"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["cost"] == 5.25
    assert resp.json()["plaid_category"] == "FOOD_AND_DRINK"
    assert resp.json()["item_purchased"] == "Milk"

    resp = client.patch(f"{URL}/{txn['id']}", json={"category_id": None}, headers=auth_headers)
    assert resp.json()["category_id"] is None

    assert client.delete(f"{URL}/{txn['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"{URL}/{txn['id']}", headers=auth_headers).status_code == 404


def test_cost_validation(client, auth_headers):
    assert client.post(URL, json={"item_purchased": "Milk", "cost": -1}, headers=auth_headers).status_code == 422
    assert client.post(URL, json={"item_purchased": "Milk", "cost": 1.234}, headers=auth_headers).status_code == 422
    assert client.post(URL, json={"item_purchased": "", "cost": 1}, headers=auth_headers).status_code == 422


def test_category_must_belong_to_user(client, make_user, auth_headers, auth_headers_for):
    other_headers = auth_headers_for(make_user("bob@example.com"))
    foreign = _category(client, other_headers, "Bob's")

    resp = client.post(URL, json={"item_purchased": "Milk", "cost": 1, "category_id": foreign["id"]}, headers=auth_headers)
    assert resp.status_code == 400

    txn = client.post(URL, json={"item_purchased": "Milk", "cost": 1}, headers=auth_headers).json()
    resp = client.patch(f"{URL}/{txn['id']}", json={"category_id": foreign["id"]}, headers=auth_headers)
    assert resp.status_code == 400


def test_transactions_are_private(client, make_user, auth_headers, auth_headers_for):
    txn = client.post(URL, json={"item_purchased": "Milk", "cost": 1}, headers=auth_headers).json()
    other_headers = auth_headers_for(make_user("eve@example.com"))

    assert client.get(f"{URL}/{txn['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"{URL}/{txn['id']}", headers=other_headers).status_code == 404
    assert client.get(URL, headers=other_headers).json()["total"] == 0


def test_list_pagination_and_filters(client, auth_headers):
    cat = _category(client, auth_headers)
    for day in range(1, 6):
        client.post(URL, json={
            "item_purchased": f"Item {day}",
            "cost": day,
            "time": f"2024-03-0{day}T12:00:00",
            "category_id": cat["id"] if day % 2 else None,
        }, headers=auth_headers)

    page = client.get(URL, params={"per_page": 2}, headers=auth_headers).json()
    assert page["total"] == 5
    assert [t["item_purchased"] for t in page["items"]] == ["Item 5", "Item 4"]

    page2 = client.get(URL, params={"per_page": 2, "page": 3}, headers=auth_headers).json()
    assert [t["item_purchased"] for t in page2["items"]] == ["Item 1"]

    ranged = client.get(URL, params={"start_date": "2024-03-02", "end_date": "2024-03-04"}, headers=auth_headers).json()
    assert ranged["total"] == 3

    by_cat = client.get(URL, params={"category_id": cat["id"]}, headers=auth_headers).json()
    assert sorted(t["item_purchased"] for t in by_cat["items"]) == ["Item 1", "Item 3", "Item 5"]
