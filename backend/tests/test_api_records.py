import io
from datetime import date

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from returndesk.main import app

client = TestClient(app)

DELL = {
    "return_date": "2024-03-01",
    "brand": "Dell",
    "laptop_model": "Latitude 5520",
    "serial_number": "SN123",
    "has_charger": True,
}


def test_requires_a_session():
    assert client.get("/api/laptop-returns").status_code == 401
    assert client.post("/api/return-items", json={"brand_name": "Canon"}).status_code == 401
    res = client.get("/api/return-items", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_laptop_create_then_edit_charger(auth_headers):
    res = client.post("/api/laptop-returns", json=DELL, headers=auth_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["user_id"] == "user-1"

    listing = client.get("/api/laptop-returns", headers=auth_headers).json()
    assert listing["total"] == 1
    assert listing["display"][0]["Charger"] == "Yes"

    res = client.put(f"/api/laptop-returns/{created['id']}",
                     json={**DELL, "has_charger": False}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["has_charger"] is False

    listing = client.get("/api/laptop-returns", headers=auth_headers).json()
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == created["id"]
    assert listing["items"][0]["has_charger"] is False


def test_create_defaults_return_date_to_today(auth_headers):
    res = client.post("/api/return-items", json={"brand_name": "Canon"}, headers=auth_headers)
    assert res.status_code == 201
    assert res.json()["return_date"] == date.today().isoformat()


def test_validation_error_names_the_field(auth_headers):
    res = client.post("/api/return-items", json={"brand_name": "   "}, headers=auth_headers)
    assert res.status_code == 422
    assert res.json() == {"detail": "Brand name is required", "field": "brand_name"}

    res = client.post("/api/laptop-returns", json={**DELL, "serial_number": "S" * 101},
                      headers=auth_headers)
    assert res.status_code == 422
    assert res.json()["field"] == "serial_number"


def test_search_filters_and_empty_message(auth_headers):
    client.post("/api/return-items", headers=auth_headers,
                json={"return_date": "2024-01-10", "brand_name": "A", "store_code": "S1"})
    client.post("/api/return-items", headers=auth_headers,
                json={"return_date": "2024-01-20", "brand_name": "B", "store_code": "S2"})

    body = client.get("/api/return-items", headers=auth_headers, params={
        "brand": "A", "date_from": "2024-01-01", "date_to": "2024-01-15",
    }).json()
    assert [i["brand_name"] for i in body["items"]] == ["A"]

    body = client.get("/api/return-items", headers=auth_headers, params={
        "brand": "A", "date_from": "2024-02-01", "date_to": "2024-02-28",
    }).json()
    assert body["items"] == []
    assert body["empty_message"] == "No return items found matching your search"

    body = client.get("/api/return-items", headers=auth_headers,
                      params={"q": "s2", "brand": "", "date_from": ""}).json()
    assert [i["brand_name"] for i in body["items"]] == ["B"]

    res = client.get("/api/return-items", headers=auth_headers, params={"date_from": "yesterday"})
    assert res.status_code == 422


def test_facets_and_form_defaults(auth_headers):
    client.post("/api/laptop-returns", json=DELL, headers=auth_headers)
    facets = client.get("/api/laptop-returns/facets", headers=auth_headers).json()
    assert facets == {"brands": ["Dell"], "store_codes": []}

    defaults = client.get("/api/laptop-returns/form-defaults", headers=auth_headers).json()
    assert defaults["has_charger"] is True
    assert defaults["return_date"] == date.today().isoformat()


def test_get_and_delete(auth_headers):
    created = client.post("/api/laptop-returns", json=DELL, headers=auth_headers).json()
    url = f"/api/laptop-returns/{created['id']}"

    assert client.get(url, headers=auth_headers).json()["serial_number"] == "SN123"
    assert client.delete(url, headers=auth_headers).json() == {"ok": True}
    assert client.get(url, headers=auth_headers).status_code == 404

    res = client.delete(url, headers=auth_headers)
    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to delete laptop return"


def test_update_missing_record_is_404(auth_headers):
    res = client.put("/api/return-items/missing", json={"brand_name": "Canon"}, headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "Return item not found"


def test_receipt(auth_headers):
    created = client.post("/api/return-items", headers=auth_headers, json={
        "return_date": "2024-01-05", "brand_name": "Canon", "scanner": "SC-1",
    }).json()
    url = f"/api/return-items/{created['id']}/receipt"

    res = client.get(url, headers=auth_headers)
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "SC-1" in res.text
    assert "window.print" not in res.text

    res = client.get(url, headers=auth_headers, params={"mode": "print"})
    assert "window.print" in res.text


def test_export_download(auth_headers):
    client.post("/api/laptop-returns", json=DELL, headers=auth_headers)
    res = client.get("/api/laptop-returns/export", headers=auth_headers, params={"brand": "Dell"})
    assert res.status_code == 200
    assert "laptop_returns_" in res.headers["content-disposition"]

    ws = load_workbook(io.BytesIO(res.content)).active
    assert ws["B2"].value == "Dell"
    assert ws.max_row == 2


def test_stats_endpoints(auth_headers):
    client.post("/api/laptop-returns", json=DELL, headers=auth_headers)
    overview = client.get("/api/stats/laptop-returns/overview", headers=auth_headers).json()
    assert overview["total"] == 1

    by_brand = client.get("/api/stats/laptop_returns/by-field", headers=auth_headers).json()
    assert by_brand == [{"value": "Dell", "count": 1}]

    assert client.get("/api/stats/laptop-returns/by-field", headers=auth_headers,
                      params={"field": "user_id"}).status_code == 400
    assert client.get("/api/stats/widgets/overview", headers=auth_headers).status_code == 404
