def test_validate_available(client):
    resp = client.post("/api/subdomain/validate", json={"subdomain": "noodlebar"})
    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "message": None}


def test_validate_taken(client, registered):
    resp = client.post("/api/subdomain/validate", json={"subdomain": "aliceshop"})
    assert resp.json() == {"valid": False, "message": "This subdomain is already taken"}


def test_validate_reserved(client):
    resp = client.post("/api/subdomain/validate", json={"subdomain": "www"})
    assert resp.json()["valid"] is False


def test_validate_requires_value(client):
    resp = client.post("/api/subdomain/validate", json={})
    assert resp.status_code == 400
    assert resp.json() == {"valid": False, "message": "Subdomain is required"}


def test_index(client):
    assert client.get("/").json() == {"data": "welcome"}
