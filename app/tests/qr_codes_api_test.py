def test_create_wifi_qr_code(client):
    response = client.post("/api/qr-codes", json={
        "payload": {"type": "wifi", "ssid": "Net1", "password": "pw", "security": "WPA", "hidden": False},
    })
    assert response.status_code == 201
    data = response.json()
    assert data["qr_type"] == "wifi"
    assert data["qr_content"] == "WIFI:T:WPA;S:Net1;P:pw;H:false;;"
    assert data["original_url"] == ""
    assert data["title"] == "WiFi Network QR Code"
    assert len(data["short_code"]) == 6


def test_non_url_payload_resolves_to_content(client):
    created = client.post("/api/qr-codes", json={
        "payload": {"type": "phone", "number": "+15551234567"}, "title": "Call us",
    }).json()
    response = client.get(f"/{created['short_code']}", follow_redirects=False)
    assert response.status_code == 200
    assert response.text == "tel:+15551234567"
    assert client.get(f"/api/links/{created['id']}").json()["click_count"] == 1


def test_url_payload_redirects(client):
    created = client.post("/api/qr-codes", json={
        "payload": {"type": "url", "url": "https://example.com/menu"},
    }).json()
    assert created["original_url"] == "https://example.com/menu"
    response = client.get(f"/{created['short_code']}", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://example.com/menu"


def test_list_qr_codes_excludes_plain_links(client):
    client.post("/api/links", json={"original_url": "https://example.com/plain"})
    client.post("/api/qr-codes", json={"payload": {"type": "text", "text": "hello"}})
    client.post("/api/qr-codes", json={"payload": {"type": "location", "lat": 1.5, "lon": 2.25}})

    response = client.get("/api/qr-codes")
    assert response.status_code == 200
    contents = sorted(item["qr_content"] for item in response.json())
    assert contents == ["geo:1.5,2.25", "hello"]


def test_qr_code_export_encodes_payload(client):
    created = client.post("/api/qr-codes", json={
        "payload": {"type": "email", "address": "a@b.com", "subject": "Hi there"},
    }).json()
    response = client.get(f"/api/links/{created['id']}/qr/export?format=svg")
    assert response.status_code == 200
    assert 'filename="qrcode-mailto-a-b-com-subje.svg"' in response.headers["content-disposition"]


def test_invalid_payload_rejected(client):
    response = client.post("/api/qr-codes", json={"payload": {"type": "email", "address": "nope"}})
    assert response.status_code == 400
    response = client.post("/api/qr-codes", json={"payload": {"type": "fax", "number": "1"}})
    assert response.status_code == 400


def test_oversized_payload_rejected_on_create(client):
    response = client.post("/api/qr-codes", json={"payload": {"type": "text", "text": "a" * 3000}})
    assert response.status_code == 400
    assert "exceeds QR capacity" in response.json()["detail"]
    assert client.get("/api/qr-codes").json() == []


def test_payload_too_large_for_style_rejected_on_render(client):
    # Fits at the default level M but not at H
    created = client.post("/api/qr-codes", json={"payload": {"type": "text", "text": "a" * 2000}}).json()
    assert client.get(f"/api/links/{created['id']}/qr").status_code == 200

    client.put(f"/api/links/{created['id']}/qr-style", json={"error_correction_level": "H"})
    response = client.get(f"/api/links/{created['id']}/qr")
    assert response.status_code == 400
    assert "exceeds QR capacity" in response.json()["detail"]


def test_payload_record_url_cannot_be_edited(client):
    created = client.post("/api/qr-codes", json={
        "payload": {"type": "wifi", "ssid": "Net1", "password": "pw"},
    }).json()
    response = client.put(f"/api/links/{created['id']}", json={"original_url": "https://other.example.com"})
    assert response.status_code == 400

    link = client.get(f"/api/links/{created['id']}").json()
    assert link["original_url"] == ""
    response = client.get(f"/{created['short_code']}", follow_redirects=False)
    assert response.status_code == 200
    assert response.text == "WIFI:T:WPA;S:Net1;P:pw;H:false;;"


def test_url_payload_record_url_can_be_edited(client):
    created = client.post("/api/qr-codes", json={"payload": {"type": "url", "url": "https://example.com/a"}}).json()
    response = client.put(f"/api/links/{created['id']}", json={"original_url": "https://example.com/b"})
    assert response.status_code == 200
    assert response.json()["qr_content"] == "https://example.com/b"


def test_encode_endpoint(client):
    response = client.post("/api/qr/encode", json={"payload": {"type": "email", "address": "a@b.com"}})
    assert response.status_code == 200
    assert response.json() == {"type": "email", "content": "mailto:a@b.com"}

    response = client.post("/api/qr/encode", json={"payload": {"type": "sms", "number": "+15551234567"}})
    assert response.json()["content"] == "sms:+15551234567"

    response = client.post("/api/qr/encode", json={"payload": {
        "type": "event", "title": "Launch",
        "start": "2025-03-01T10:30:00+02:00", "end": "2025-03-01T12:00:00+02:00",
    }})
    assert "DTSTART:20250301T083000Z" in response.json()["content"].split("\n")
