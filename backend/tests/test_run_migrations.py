"""Tests for the migration runner's discovery and bookkeeping."""

from run_migrations import MIGRATIONS_DIR, Migration, discover_migrations, split_pending


class TestDiscoverMigrations:
    def test_bundled_migrations_in_order(self):
        names = [m.name for m in discover_migrations(MIGRATIONS_DIR)]
        assert names == ["001_create_debates.sql", "002_add_status_indexes.sql"]

    def test_status_indexes_are_created(self):
        sql = (MIGRATIONS_DIR / "002_add_status_indexes.sql").read_text()
        assert "idx_debates_status ON debates (status)" in sql
        assert "idx_debates_created_at_status ON debates (created_at DESC, status)" in sql

    def test_missing_directory(self, tmp_path):
        assert discover_migrations(tmp_path / "absent") == []


class TestSplitPending:
    def test_pending_and_changed(self, tmp_path):
        first = tmp_path / "001_a.sql"
        second = tmp_path / "002_b.sql"
        first.write_text("SELECT 1;")
        second.write_text("SELECT 2;")
        migrations = discover_migrations(tmp_path)

        pending, changed = split_pending(migrations, {"001_a.sql": "stale"})

        assert [m.name for m in pending] == ["002_b.sql"]
        assert [m.name for m in changed] == ["001_a.sql"]

    def test_checksum_tracks_content(self, tmp_path):
        path = tmp_path / "001_a.sql"
        path.write_text("SELECT 1;")
        before = Migration.from_path(path).checksum
        path.write_text("SELECT 2;")
        assert Migration.from_path(path).checksum != before
