from datetime import datetime, timedelta, timezone

import pytest

from market.data.models import LibraryEntryModel
from tests.helpers import auth_headers


@pytest.fixture
def owner(make_user):
    return make_user()


def _own(db, user, book, when):
    db.rollback()
    db.add(LibraryEntryModel(user_id=user.id, book_id=book.id, purchased_at=when))
    db.commit()


class TestLibraryApi:
    def test_requires_auth(self, client):
        assert client.get("/api/library").status_code == 401

    def test_list_and_paginate(self, db, client, owner, make_book):
        now = datetime.now(timezone.utc)
        _own(db, owner, make_book(title="Older"), now - timedelta(days=1))
        _own(db, owner, make_book(title="Newer"), now)

        first = client.get("/api/library", params={"limit": 1}, headers=auth_headers(owner)).json()

        assert [e["book"]["title"] for e in first["books"]] == ["Newer"]
        assert first["pagination"] == {
            "page": 1, "limit": 1, "total": 2, "totalPages": 2, "hasNext": True, "hasPrev": False,
        }

        second = client.get("/api/library", params={"page": 2, "limit": 1}, headers=auth_headers(owner)).json()
        assert [e["book"]["title"] for e in second["books"]] == ["Older"]

    def test_download(self, db, client, owner, make_user, make_book):
        book = make_book(title="Manual")
        _own(db, owner, book, datetime.now(timezone.utc))

        resp = client.get(f"/api/library/download/{book.id}", headers=auth_headers(owner))

        assert resp.status_code == 200
        assert resp.json()["downloadUrl"] == "https://files.test/Manual.pdf"
        assert resp.json()["title"] == "Manual"
        assert resp.json()["expiresAt"]

        stranger = client.get(f"/api/library/download/{book.id}", headers=auth_headers(make_user()))
        assert stranger.status_code == 404
        assert stranger.json()["error"] == "Book not found in your library"

    def test_progress(self, db, client, owner, make_book):
        book = make_book()
        _own(db, owner, book, datetime.now(timezone.utc))

        resp = client.get(f"/api/library/progress/{book.id}", headers=auth_headers(owner))

        assert resp.status_code == 200
        assert resp.json()["bookId"] == book.id
        assert resp.json()["progress"] == 0
