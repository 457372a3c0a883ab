"""Tests for the browser UI pages (API calls served by a mock transport)."""
import io

import httpx
import pytest

from product_manager.services import api_client
from product_manager.services.api_client import ApiError, ProductApiClient


class FakeApi:
    """Minimal in-memory stand-in for the product API."""

    def __init__(self, products=None):
        self.products = {p["id"]: p for p in (products or [])}
        self.requests = []
        self.fail = {}  # method (or "*") -> (status, body)

    def __call__(self, request):
        self.requests.append(request)
        failure = self.fail.get(request.method) or self.fail.get("*")
        if failure:
            status, body = failure
            return httpx.Response(status, json=body)

        parts = request.url.path.strip("/").split("/")  # api, Products, [id]
        product_id = parts[2] if len(parts) > 2 else None

        if request.method == "GET" and product_id is None:
            if not self.products:
                return httpx.Response(400, json={"success": False, "message": "no products found"})
            return httpx.Response(200, json={"success": True, "products": list(self.products.values())})

        if product_id is not None and product_id not in self.products:
            return httpx.Response(404, json={"success": False, "message": "Product not found"})

        if request.method == "GET":
            return httpx.Response(200, json={"success": True, "product": self.products[product_id]})
        if request.method == "DELETE":
            product = self.products.pop(product_id)
            return httpx.Response(
                200,
                json={"success": True, "message": "Product deleted successfully", "product": product},
            )
        if request.method in ("POST", "PUT"):
            product = {"id": product_id or "new-id"}
            return httpx.Response(201, json={"success": True, "product": product})
        return httpx.Response(405, json={"success": False, "message": "Method Not Allowed"})


def _product(i, status="active", date="2025-01-01"):
    return {
        "id": f"p{i}",
        "title": f"Product {i}",
        "description": f"Description {i}",
        "status": status,
        "date": date,
        "image": f"https://cdn.example.test/products/{i}.png",
        "createdAt": f"2025-01-01T00:00:0{i}",
        "updatedAt": f"2025-01-01T00:00:0{i}",
    }


@pytest.fixture
def fake_api(monkeypatch):
    api = FakeApi()
    monkeypatch.setattr(
        api_client,
        "get_api_client",
        lambda: ProductApiClient("http://api.example.test", transport=httpx.MockTransport(api)),
    )
    return api


def test_dashboard_stats(client, fake_api):
    fake_api.products = {
        p["id"]: p
        for p in [_product(1), _product(2, "inactive"), _product(3)]
    }
    resp = client.get("/")
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Total Products" in html
    assert "Product 3" in html and "Product 2" in html
    assert "Product 1" not in html  # only the two most recent


def test_list_filters_and_paginates_locally(client, fake_api):
    statuses = ["active", "inactive", "active", "inactive", "active", "inactive", "active"]
    fake_api.products = {p["id"]: p for p in (_product(i, s) for i, s in enumerate(statuses))}

    resp = client.get("/products?status=active&page=2")
    html = resp.get_data(as_text=True)

    assert resp.status_code == 200
    assert "Page 2 of 2" in html
    assert "Showing 1 of 4 products (out of 7 total)" in html
    assert "Product 6" in html
    assert "Product 0" not in html
    # one fetch, no server-side filtering parameters
    assert len(fake_api.requests) == 1
    assert fake_api.requests[0].url.query == b""


def test_list_pagination_links_keep_filters(client, fake_api):
    fake_api.products = {p["id"]: p for p in (_product(i) for i in range(5))}
    html = client.get("/products?status=active").get_data(as_text=True)
    assert "page=2" in html
    assert "status=active" in html


def test_list_empty_catalog_shows_error_notice(client, fake_api):
    resp = client.get("/products")
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "no products found" in html
    assert "Page 1 of 1" not in html


def test_list_transport_failure_shows_generic_message(client, monkeypatch):
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    monkeypatch.setattr(
        api_client,
        "get_api_client",
        lambda: ProductApiClient("http://api.example.test", transport=httpx.MockTransport(broken)),
    )
    html = client.get("/products").get_data(as_text=True)
    assert "Server error" in html


def test_edit_page_fetches_product_by_id(client, fake_api):
    fake_api.products = {"p1": _product(1)}
    resp = client.get("/products/p1/edit")
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert 'value="Product 1"' in html
    assert fake_api.requests[0].url.path == "/api/Products/p1"


def test_edit_page_unknown_product_redirects(client, fake_api):
    fake_api.products = {"p1": _product(1)}
    resp = client.get("/products/missing/edit")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/products")

    html = client.get("/products").get_data(as_text=True)
    assert "Product not found" in html


def test_edit_submit_sends_multipart_put(client, fake_api, png_bytes):
    fake_api.products = {"p1": _product(1)}
    resp = client.post(
        "/products/p1/edit",
        data={
            "title": "Renamed",
            "description": "Description 1",
            "status": "inactive",
            "date": "2025-01-01",
            "image": (io.BytesIO(png_bytes), "new.png", "image/png"),
        },
        content_type="multipart/form-data",
    )
    assert resp.status_code == 302

    put = fake_api.requests[-1]
    assert put.method == "PUT"
    assert put.url.path == "/api/Products/p1"
    body = put.read()
    assert b"Renamed" in body
    assert b'filename="new.png"' in body


def test_edit_submit_error_keeps_form_values(client, fake_api):
    fake_api.products = {"p1": _product(1)}
    fake_api.fail["PUT"] = (400, {"success": False, "message": "Title is required"})

    resp = client.post(
        "/products/p1/edit",
        data={"title": "", "description": "Changed", "status": "active", "date": "2025-01-01"},
        content_type="multipart/form-data",
    )
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Title is required" in html
    assert "Changed" in html


def test_create_without_image_surfaces_server_message(client, fake_api):
    fake_api.fail["*"] = (400, {"success": False, "message": "Image is required"})
    resp = client.post(
        "/products/new",
        data={"title": "A", "description": "B", "status": "active", "date": "2025-01-01"},
        content_type="multipart/form-data",
    )
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Image is required" in html


def test_create_success_redirects_to_list(client, fake_api, png_bytes):
    resp = client.post(
        "/products/new",
        data={
            "title": "A",
            "description": "B",
            "status": "active",
            "date": "2025-01-01",
            "image": (io.BytesIO(png_bytes), "a.png", "image/png"),
        },
        content_type="multipart/form-data",
    )
    assert resp.status_code == 302
    assert fake_api.requests[-1].method == "POST"


def test_delete_requires_confirmation(client, fake_api):
    fake_api.products = {"p1": _product(1)}

    resp = client.get("/products/p1/delete")
    assert resp.status_code == 200
    assert "Confirm Delete" in resp.get_data(as_text=True)
    assert "p1" in fake_api.products

    resp = client.post("/products/p1/delete")
    assert resp.status_code == 302
    assert "p1" not in fake_api.products
    assert fake_api.requests[-1].method == "DELETE"


def test_api_client_failed_envelope_without_message():
    transport = httpx.MockTransport(lambda r: httpx.Response(500, json={"success": False}))
    client = ProductApiClient("http://api.example.test", transport=transport)
    with pytest.raises(ApiError) as excinfo:
        client.list_products()
    assert excinfo.value.message == "Something went wrong"
    assert excinfo.value.status_code == 500


def test_api_client_non_json_body():
    transport = httpx.MockTransport(lambda r: httpx.Response(502, text="<html>Bad Gateway</html>"))
    client = ProductApiClient("http://api.example.test", transport=transport)
    with pytest.raises(ApiError, match="Server error"):
        client.list_products()


def test_ui_through_real_api_in_process(client, app, make_product, monkeypatch):
    """With no PRODUCT_API_URL the UI calls this app over WSGI."""
    monkeypatch.setitem(app.config, "PRODUCT_API_URL", "")
    make_product(title="In-process product")

    html = client.get("/products").get_data(as_text=True)
    assert "In-process product" in html
    assert "Page 1 of 1" in html
