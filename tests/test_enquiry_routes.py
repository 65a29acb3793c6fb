import pytest


def submit(client, **fields):
    body = {
        "tripId": 3,
        "tripTitle": "Kyoto in Autumn",
        "selectedMonth": "November",
        "name": "Ana",
        "email": "Ana@Example.com",
    }
    body.update(fields)
    return client.post("/api/enquiries", json=body)


def test_public_submission(client):
    resp = submit(client, numberOfTravelers=2)
    assert resp.status_code == 201
    enquiry = resp.json()["enquiry"]
    assert set(enquiry) == {"id", "tripTitle", "selectedMonth", "numberOfTravelers"}
    assert enquiry["numberOfTravelers"] == 2


def test_visitor_cannot_choose_status(client, admin_headers):
    enquiry_id = submit(client, status="booked").json()["enquiry"]["id"]
    stored = client.get(f"/api/enquiries/{enquiry_id}", headers=admin_headers).json()
    assert stored["enquiry"]["status"] == "pending"
    assert stored["enquiry"]["email"] == "ana@example.com"


@pytest.mark.parametrize(
    "fields,error",
    [
        ({"name": ""}, "Name and email are required"),
        ({"email": None}, "Name and email are required"),
        ({"email": "not-an-email"}, "Invalid email format"),
    ],
)
def test_submission_validation(client, fields, error):
    resp = submit(client, **fields)
    assert resp.status_code == 400
    assert resp.json()["error"] == error


def test_listing_is_admin_only(client):
    assert client.get("/api/enquiries").status_code == 401


def test_listing_filters(client, admin_headers):
    submit(client, tripId=3)
    submit(client, tripId=4, name="Ben")
    submit(client, tripId=4, name="Cy")

    everything = client.get("/api/enquiries", headers=admin_headers).json()
    assert everything["count"] == 3

    trip_four = client.get("/api/enquiries", params={"tripId": 4}, headers=admin_headers).json()
    assert [e["name"] for e in trip_four["enquiries"]] == ["Cy", "Ben"]

    page = client.get(
        "/api/enquiries", params={"limit": 1, "offset": 1}, headers=admin_headers
    ).json()
    assert [e["name"] for e in page["enquiries"]] == ["Ben"]


def test_status_update(client, admin_headers):
    enquiry_id = submit(client).json()["enquiry"]["id"]

    resp = client.patch(
        f"/api/enquiries/{enquiry_id}/status", json={"status": "contacted"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["enquiry"]["status"] == "contacted"

    filtered = client.get(
        "/api/enquiries", params={"status": "contacted"}, headers=admin_headers
    ).json()
    assert filtered["count"] == 1


@pytest.mark.parametrize("body", [{}, {"status": "archived"}])
def test_status_update_rejects_unknown_status(client, admin_headers, body):
    enquiry_id = submit(client).json()["enquiry"]["id"]
    resp = client.patch(f"/api/enquiries/{enquiry_id}/status", json=body, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Valid status is required"


def test_status_update_unknown_enquiry(client, admin_headers):
    resp = client.patch("/api/enquiries/999/status", json={"status": "booked"}, headers=admin_headers)
    assert resp.status_code == 404


def test_deletion_is_main_admin_only(client, admin_headers, main_admin_headers):
    enquiry_id = submit(client).json()["enquiry"]["id"]

    assert client.delete(f"/api/enquiries/{enquiry_id}", headers=admin_headers).status_code == 403
    assert client.delete(f"/api/enquiries/{enquiry_id}", headers=main_admin_headers).status_code == 200
    assert client.get(f"/api/enquiries/{enquiry_id}", headers=admin_headers).status_code == 404
