import pytest

from market.domain.enums import BookStatus, Role
from tests.helpers import auth_headers


@pytest.fixture
def seller_headers(seller):
    return auth_headers(seller)


def _new_book(category_id, **overrides):
    payload = {
        "title": "Fresh Book",
        "author": "Writer",
        "price": 199.0,
        "categoryId": category_id,
        "fileType": "ebook",
        "fileFormat": "epub",
    }
    payload.update(overrides)
    return payload


class TestSellerAccess:
    def test_requires_auth(self, client):
        resp = client.get("/api/seller/dashboard")

        assert resp.status_code == 401

    def test_plain_users_are_forbidden(self, client, make_user):
        resp = client.get("/api/seller/dashboard", headers=auth_headers(make_user(Role.USER)))

        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_admin_is_allowed(self, client, make_user):
        resp = client.get("/api/seller/dashboard", headers=auth_headers(make_user(Role.ADMIN)))

        assert resp.status_code == 200


class TestSellerBooks:
    def test_create_publish_and_list(self, client, seller_headers, category):
        created = client.post("/api/seller/books", json=_new_book(category.id), headers=seller_headers)

        assert created.status_code == 201
        book_id = created.json()["bookId"]

        # drafts are not in the public catalog
        assert client.get(f"/api/books/{book_id}").status_code == 404

        published = client.patch(
            f"/api/seller/books/{book_id}/status", json={"status": "published"}, headers=seller_headers
        )
        assert published.json()["message"] == "Book published successfully"
        assert client.get(f"/api/books/{book_id}").status_code == 200

        listing = client.get("/api/seller/books", headers=seller_headers).json()
        assert [b["id"] for b in listing["books"]] == [book_id]
        assert listing["books"][0]["status"] == "published"

    def test_create_validation(self, client, seller_headers, category):
        resp = client.post("/api/seller/books", json=_new_book(category.id, price=-5), headers=seller_headers)

        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_status(self, client, seller_headers, make_book):
        book = make_book()

        resp = client.patch(
            f"/api/seller/books/{book.id}/status", json={"status": "archived"}, headers=seller_headers
        )

        assert resp.status_code == 400

    def test_update(self, client, seller_headers, make_book):
        book = make_book(price="100.00")

        resp = client.put(f"/api/seller/books/{book.id}", json={"price": 80.0}, headers=seller_headers)

        assert resp.status_code == 200
        assert client.get(f"/api/books/{book.id}").json()["book"]["price"] == 80.0

    def test_cannot_touch_other_sellers_books(self, client, make_user, make_book):
        book = make_book()
        rival = auth_headers(make_user(Role.SELLER))

        resp = client.put(f"/api/seller/books/{book.id}", json={"title": "Mine now"}, headers=rival)

        assert resp.status_code == 404
        assert resp.json()["error"] == "Book not found or access denied"

    def test_delete_sold_book_conflicts(self, client, seller_headers, make_user, make_book):
        book = make_book(title="Bestseller", price="100.00")
        buyer_headers = auth_headers(make_user())
        client.post("/api/cart", json={"bookId": book.id}, headers=buyer_headers)
        client.post("/api/orders/checkout", json={"paymentMethod": "credit_card"}, headers=buyer_headers)

        resp = client.delete(f"/api/seller/books/{book.id}", headers=seller_headers)

        assert resp.status_code == 409
        assert resp.json()["code"] == "BOOK_HAS_SALES"
        assert client.get(f"/api/books/{book.id}").status_code == 200

        dashboard = client.get("/api/seller/dashboard", headers=seller_headers).json()
        assert dashboard["stats"]["totalSales"] == 1
        assert dashboard["stats"]["totalRevenue"] == 100.0
        assert dashboard["recentOrders"][0]["bookTitle"] == "Bestseller"

    def test_delete_unsold_book(self, client, seller_headers, make_book):
        book = make_book(status=BookStatus.DRAFT)

        resp = client.delete(f"/api/seller/books/{book.id}", headers=seller_headers)

        assert resp.status_code == 200
        assert client.get("/api/seller/books", headers=seller_headers).json()["books"] == []
