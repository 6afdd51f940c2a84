from datetime import datetime, timezone

from market.data.models import BookModel, CategoryModel, LibraryEntryModel
from market.domain.enums import BookStatus
from tests.helpers import auth_headers


class TestBookList:
    def test_only_published_books_are_listed(self, client, make_book):
        make_book(title="Visible")
        make_book(title="Hidden", status=BookStatus.DRAFT)

        resp = client.get("/api/books")

        assert resp.status_code == 200
        body = resp.json()
        assert [b["title"] for b in body["books"]] == ["Visible"]
        assert body["pagination"]["total"] == 1
        assert body["books"][0]["category"]["nameEn"] == "business"
        assert body["books"][0]["seller"]["firstName"] == "Test"

    def test_search_and_price_filters(self, client, make_book):
        make_book(title="Python Basics", price="150.00")
        make_book(title="Python Advanced", price="450.00")
        make_book(title="Cooking", price="150.00")

        resp = client.get("/api/books", params={"q": "python", "maxPrice": 200})

        assert [b["title"] for b in resp.json()["books"]] == ["Python Basics"]

    def test_sort_by_price(self, client, make_book):
        make_book(title="Mid", price="200.00")
        make_book(title="Cheap", price="50.00")
        make_book(title="Dear", price="900.00")

        resp = client.get("/api/books", params={"sortBy": "price", "sortOrder": "asc"})

        assert [b["title"] for b in resp.json()["books"]] == ["Cheap", "Mid", "Dear"]
        assert resp.json()["books"][0]["price"] == 50.0

    def test_category_filter(self, db, client, make_book):
        novel = make_book(title="Novel")
        make_book(title="Ledger")
        db.rollback()
        fiction = CategoryModel(name="นิยาย", name_en="fiction")
        db.add(fiction)
        db.flush()
        db.get(BookModel, novel.id).category_id = fiction.id
        db.commit()

        resp = client.get("/api/books", params={"category": "fiction"})

        assert [b["title"] for b in resp.json()["books"]] == ["Novel"]
        assert resp.json()["books"][0]["category"]["nameEn"] == "fiction"

    def test_invalid_sort_field(self, client):
        resp = client.get("/api/books", params={"sortBy": "password_hash"})

        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_inverted_price_range(self, client):
        resp = client.get("/api/books", params={"minPrice": 500, "maxPrice": 100})

        assert resp.status_code == 400

    def test_limit_is_clamped(self, client, make_book):
        make_book()

        resp = client.get("/api/books", params={"limit": 500})

        assert resp.status_code == 200
        assert resp.json()["pagination"]["limit"] == 50

    def test_featured(self, client, make_book):
        make_book(title="Star", is_featured=True)
        make_book(title="Plain")
        make_book(title="Star draft", is_featured=True, status=BookStatus.DRAFT)

        resp = client.get("/api/books/featured")

        assert resp.status_code == 200
        assert [b["title"] for b in resp.json()["books"]] == ["Star"]


class TestBookDetail:
    def test_detail(self, client, make_book):
        book = make_book(title="Detail", file_size=2048)

        resp = client.get(f"/api/books/{book.id}")

        assert resp.status_code == 200
        assert resp.json()["book"]["fileSize"] == 2048
        assert resp.json()["book"]["isOwned"] is False

    def test_draft_is_not_found(self, client, make_book):
        book = make_book(status=BookStatus.DRAFT)

        resp = client.get(f"/api/books/{book.id}")

        assert resp.status_code == 404
        assert resp.json()["error"] == "Book not found"

    def test_is_owned_for_owner(self, db, client, make_user, make_book):
        owner = make_user()
        book = make_book()
        db.rollback()
        db.add(LibraryEntryModel(user_id=owner.id, book_id=book.id, purchased_at=datetime.now(timezone.utc)))
        db.commit()

        owned = client.get(f"/api/books/{book.id}", headers=auth_headers(owner))
        other = client.get(f"/api/books/{book.id}", headers=auth_headers(make_user()))

        assert owned.json()["book"]["isOwned"] is True
        assert other.json()["book"]["isOwned"] is False


class TestCategories:
    def test_counts_published_books_only(self, client, category, make_book):
        make_book(title="One")
        make_book(title="Two")
        make_book(title="Draft", status=BookStatus.DRAFT)

        resp = client.get("/api/categories")

        assert resp.status_code == 200
        [cat] = resp.json()["categories"]
        assert cat["nameEn"] == "business"
        assert cat["bookCount"] == 2

        detail = client.get(f"/api/categories/{category.id}")
        assert detail.json()["category"]["bookCount"] == 2

    def test_unknown_category(self, client):
        assert client.get("/api/categories/999").status_code == 404
