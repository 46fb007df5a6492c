"""Marketplace API tests."""


def listing_payload(**overrides):
    payload = {
        "title": "Calculus textbook",
        "description": "Early Transcendentals, 8th edition",
        "price": 45.5,
        "images": ["https://example.com/book.jpg"],
        "condition": "good",
        "category": "textbooks",
        "location": "Oviatt Library",
    }
    payload.update(overrides)
    return payload


def create_listing(client, headers, **overrides):
    response = client.post("/api/v1/marketplace", headers=headers, json=listing_payload(**overrides))
    assert response.status_code == 201
    return response.json()


def test_create_listing(client, auth_headers):
    data = create_listing(client, auth_headers)
    assert data["price"] == 45.5
    assert data["images"] == ["https://example.com/book.jpg"]
    assert data["status"] == "active"
    assert data["views"] == 0
    assert data["favoritesCount"] == 0
    assert data["seller"]["id"] == auth_headers.user_id
    assert "email" not in data["seller"]


def test_create_listing_validation(client, auth_headers):
    response = client.post(
        "/api/v1/marketplace",
        headers=auth_headers,
        json=listing_payload(price=10.123, condition="broken"),
    )
    assert response.status_code == 400
    paths = {detail["path"] for detail in response.json()["details"]}
    assert {"body.price", "body.condition"} <= paths


def test_filters_and_sorting(client, auth_headers, other_headers):
    create_listing(client, auth_headers, title="Cheap lamp", price=5, category="furniture")
    create_listing(client, auth_headers, title="Desk chair", price=60, category="furniture")
    create_listing(client, other_headers, title="Laptop stand", price=25, category="electronics")

    response = client.get("/api/v1/marketplace", params={"category": "furniture", "sortBy": "price-high"})
    assert [item["title"] for item in response.json()] == ["Desk chair", "Cheap lamp"]

    response = client.get("/api/v1/marketplace", params={"minPrice": 10, "maxPrice": 30})
    assert [item["title"] for item in response.json()] == ["Laptop stand"]

    response = client.get("/api/v1/marketplace", params={"search": "LAMP"})
    assert [item["title"] for item in response.json()] == ["Cheap lamp"]

    response = client.get("/api/v1/marketplace", params={"sellerId": other_headers.user_id})
    assert len(response.json()) == 1

    response = client.get("/api/v1/marketplace", params={"sortBy": "price-low", "limit": 2, "offset": 1})
    assert [item["title"] for item in response.json()] == ["Laptop stand", "Desk chair"]


def test_update_listing_seller_only(client, auth_headers, other_headers):
    listing = create_listing(client, auth_headers)

    response = client.put(
        f"/api/v1/marketplace/{listing['id']}", headers=other_headers, json={"price": 1}
    )
    assert response.status_code == 403

    response = client.put(
        f"/api/v1/marketplace/{listing['id']}",
        headers=auth_headers,
        json={"price": 40, "status": "sold"},
    )
    assert response.status_code == 200
    assert response.json()["price"] == 40
    assert response.json()["status"] == "sold"
    assert response.json()["title"] == "Calculus textbook"


def test_delete_is_soft(client, auth_headers, other_headers):
    listing = create_listing(client, auth_headers)
    url = f"/api/v1/marketplace/{listing['id']}"

    assert client.delete(url, headers=other_headers).status_code == 403
    assert client.delete(url, headers=auth_headers).status_code == 200

    assert client.get(url).status_code == 404
    assert client.get("/api/v1/marketplace").json() == []
    deleted = client.get("/api/v1/marketplace", params={"status": "deleted"}).json()
    assert [item["id"] for item in deleted] == [listing["id"]]


def test_record_view(client, auth_headers):
    listing = create_listing(client, auth_headers)
    client.post(f"/api/v1/marketplace/{listing['id']}/view")
    response = client.post(f"/api/v1/marketplace/{listing['id']}/view")
    assert response.json()["views"] == 2

    assert client.post("/api/v1/marketplace/99999/view").status_code == 404


def test_toggle_favorite(client, auth_headers, other_headers):
    listing = create_listing(client, auth_headers)
    url = f"/api/v1/marketplace/{listing['id']}/favorite"

    response = client.post(url, headers=other_headers)
    assert response.json() == {"listingId": listing["id"], "favorited": True}
    assert client.get(f"/api/v1/marketplace/{listing['id']}").json()["favoritesCount"] == 1

    favorites = client.get("/api/v1/marketplace/favorites", headers=other_headers).json()
    assert [item["id"] for item in favorites] == [listing["id"]]

    response = client.post(url, headers=other_headers)
    assert response.json()["favorited"] is False
    assert client.get("/api/v1/marketplace/favorites", headers=other_headers).json() == []


def test_favorite_requires_auth_and_existing_listing(client, auth_headers):
    assert client.get("/api/v1/marketplace/favorites").status_code == 401
    assert client.post("/api/v1/marketplace/99999/favorite", headers=auth_headers).status_code == 404
