# tests/test_admin.py
from app import security


def _guest_bid(client, painting_id, amount, name, mobile):
    return client.post("/paintings/bid", json={
        "paintingId": painting_id, "bidAmount": amount, "name": name, "mobile": mobile,
    })


def test_admin_login(client):
    res = client.post("/admin/login", json={"username": "admin", "password": "wrong"})
    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "Invalid admin credentials"}

    res = client.post("/admin/login", json={"username": "admin", "password": "admin-pass"})
    assert res.status_code == 200
    assert res.json()["data"]["token"]


def test_admin_endpoints_need_admin_token(client):
    assert client.get("/admin/users").status_code == 401

    user_token = security.create_user_token(1, "9812345678")
    res = client.get("/admin/users", headers={"Authorization": f"Bearer {user_token}"})
    assert res.status_code == 403


def test_painting_crud(client, admin_headers):
    res = client.post("/admin/paintings", headers=admin_headers, json={
        "artistName": "Raja Ravi Varma", "paintingName": "Shakuntala", "basePrice": 5000,
    })
    assert res.status_code == 201
    created = res.json()["data"]["painting"]
    assert created["status"] == "active"
    assert created["currentPrice"] == 5000
    pid = created["id"]

    res = client.put(f"/admin/paintings/{pid}", headers=admin_headers, json={"basePrice": 6000})
    assert res.status_code == 200
    assert res.json()["data"]["painting"]["basePrice"] == 6000
    assert res.json()["data"]["painting"]["paintingName"] == "Shakuntala"

    res = client.delete(f"/admin/paintings/{pid}", headers=admin_headers)
    assert res.status_code == 200
    assert client.get("/paintings").json()["data"]["paintings"] == []

    listed = client.get("/admin/paintings", headers=admin_headers).json()["data"]["paintings"]
    assert [(p["id"], p["status"]) for p in listed] == [(pid, "inactive")]


def test_painting_validation(client, admin_headers):
    res = client.post("/admin/paintings", headers=admin_headers, json={
        "artistName": "", "paintingName": "X", "basePrice": 100,
    })
    assert res.status_code == 400
    res = client.post("/admin/paintings", headers=admin_headers, json={
        "artistName": "A", "paintingName": "X", "basePrice": -1,
    })
    assert res.status_code == 400
    assert client.put("/admin/paintings/9999", headers=admin_headers, json={"basePrice": 10}).status_code == 404
    assert client.delete("/admin/paintings/9999", headers=admin_headers).status_code == 404


def test_auction_settings(client, admin_headers):
    res = client.get("/admin/auction-settings", headers=admin_headers)
    assert res.json()["data"]["settings"] is None

    res = client.put("/admin/auction-settings", headers=admin_headers, json={
        "startDate": "2026-03-01T00:00:00Z", "endDate": "2026-03-31T00:00:00Z",
    })
    assert res.status_code == 200
    settings = res.json()["data"]["settings"]
    assert settings["isActive"] is True

    res = client.put("/admin/auction-settings", headers=admin_headers, json={
        "startDate": "2026-04-01T00:00:00Z", "endDate": "2026-03-01T00:00:00Z",
    })
    assert res.status_code == 400
    assert res.json()["message"] == "End date must be after start date"

    current = client.get("/admin/auction-settings", headers=admin_headers).json()["data"]["settings"]
    assert current["id"] == settings["id"]


def test_bids_users_and_stats(client, admin_headers, auction, painting):
    _guest_bid(client, painting.id, 1500, "Asha Rao", "9812345678")
    _guest_bid(client, painting.id, 1800, "Ravi Kumar", "9876543210")

    bids = client.get("/admin/bids", headers=admin_headers).json()["data"]["bids"]
    assert [(b["user"]["firstName"], b["rank"]) for b in bids] == [("Ravi", 1), ("Asha", 2)]
    assert bids[0]["painting"] == {"id": painting.id, "name": "Horses", "artist": "M. F. Husain"}
    assert bids[0]["user"]["mobile"] == "9876543210"

    users = client.get("/admin/users", headers=admin_headers).json()["data"]["users"]
    assert sorted((u["mobile"], u["totalBids"]) for u in users) == [("9812345678", 1), ("9876543210", 1)]

    stats = client.get("/admin/dashboard-stats", headers=admin_headers).json()["data"]
    assert stats == {
        "totalPaintings": 1,
        "activePaintings": 1,
        "totalUsers": 2,
        "totalBids": 2,
        "highestBid": 1800,
    }


def test_update_skips_nulls_for_required_fields(client, admin_headers, painting):
    res = client.put(f"/admin/paintings/{painting.id}", headers=admin_headers, json={
        "artistName": None, "paintingName": None, "basePrice": None, "status": None, "imageUrl": None,
    })
    assert res.status_code == 200
    updated = res.json()["data"]["painting"]
    assert updated["artistName"] == "M. F. Husain"
    assert updated["paintingName"] == "Horses"
    assert updated["basePrice"] == 1000
    assert updated["status"] == "active"
    assert updated["imageUrl"] is None


def test_base_price_bounds(client, admin_headers, painting):
    for price in (1e12, 10.001):
        res = client.post("/admin/paintings", headers=admin_headers, json={
            "artistName": "A", "paintingName": "X", "basePrice": price,
        })
        assert res.status_code == 400
    res = client.put(f"/admin/paintings/{painting.id}", headers=admin_headers, json={"basePrice": 1e12})
    assert res.status_code == 400
