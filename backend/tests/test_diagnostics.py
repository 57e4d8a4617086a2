"""
Protofolio — Diagnostics CLI Tests
====================================

What:  Tests for the protofolio-diagnose probe against throwaway SQLite files.
"""

import pytest

from protofolio.config import Settings
from protofolio.diagnostics import GENERAL_HINTS, hints_for, main, mask_url, run_probe


def sqlite_url(tmp_path, name="diag.db"):
    return f"sqlite+aiosqlite:///{tmp_path / name}"


class TestRunProbe:

    @pytest.mark.asyncio
    async def test_probe_passes_on_fresh_schema(self, tmp_path, capsys):
        settings = Settings(
            _env_file=None, database_url=sqlite_url(tmp_path), auto_create_schema=True
        )

        assert await run_probe(settings) is True

        out = capsys.readouterr().out
        assert "✅ Connected" in out
        assert "✅ Delete test passed" in out

    @pytest.mark.asyncio
    async def test_probe_fails_without_tables(self, tmp_path, capsys):
        settings = Settings(_env_file=None, database_url=sqlite_url(tmp_path))

        assert await run_probe(settings) is False

        out = capsys.readouterr().out
        assert "❌" in out
        assert "alembic upgrade head" in out


class TestHelpers:

    def test_mask_url_hides_password(self):
        masked = mask_url("postgresql+asyncpg://app:s3cret@db:5432/protofolio")
        assert "s3cret" not in masked
        assert "app:***@db:5432/protofolio" in masked

    def test_hints_fall_back_to_general(self):
        assert hints_for("something odd happened") == GENERAL_HINTS
        assert hints_for("(sqlite3.OperationalError) no such table: records") != GENERAL_HINTS


class TestMain:

    def test_exit_code_zero_on_success(self, tmp_path):
        assert main(["--database-url", sqlite_url(tmp_path), "--create-schema"]) == 0

    def test_exit_code_one_on_failure(self, tmp_path):
        assert main(["--database-url", sqlite_url(tmp_path)]) == 1
