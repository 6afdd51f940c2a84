from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from market.data.models.book import BookModel
from market.data.models.category import CategoryModel
from market.domain.enums import BookStatus


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def _with_counts(self):
        return (
            select(CategoryModel, func.count(BookModel.id).label("book_count"))
            .outerjoin(
                BookModel,
                and_(
                    BookModel.category_id == CategoryModel.id,
                    BookModel.status == BookStatus.PUBLISHED.value,
                ),
            )
            .group_by(CategoryModel.id)
        )

    def list_with_counts(self) -> list[tuple[CategoryModel, int]]:
        rows = self.db.execute(self._with_counts().order_by(CategoryModel.name)).all()
        return [(row[0], row[1]) for row in rows]

    def get_with_count(self, category_id: int) -> tuple[CategoryModel, int] | None:
        row = self.db.execute(
            self._with_counts().where(CategoryModel.id == category_id)
        ).first()
        return (row[0], row[1]) if row else None

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)
