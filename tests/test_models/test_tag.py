"""Tests for Tag model."""

from category_service.models.tag import Tag


class TestTagModel:
    def test_table_name(self):
        assert Tag.__tablename__ == "tags"

    def test_has_required_columns(self):
        columns = {c.name for c in Tag.__table__.columns}
        assert {"id", "name", "slug", "usage_count", "is_active", "created_at", "updated_at"} <= columns
        assert "parent_id" not in columns

    def test_slug_is_unique(self):
        assert Tag.__table__.c.slug.unique is True

    def test_usage_count_indexed(self):
        assert Tag.__table__.c.usage_count.index is True
