"""
Protofolio Backend — Middleware Tests
=======================================

What:  Request-ID handling and the catalog access log.
"""

import logging

import pytest

from protofolio.middleware.request_id import accepted_request_id

ACCESS_LOGGER = "protofolio.access"


class TestRequestId:

    def test_safe_caller_id_is_kept(self):
        assert accepted_request_id("checkout-42.retry_1") == "checkout-42.retry_1"

    @pytest.mark.parametrize("value", [None, "", "bad id", "x" * 65, "line\nbreak"])
    def test_unsafe_or_missing_id_is_replaced(self, value):
        rid = accepted_request_id(value)
        assert rid != value
        assert len(rid) == 12

    @pytest.mark.asyncio
    async def test_response_echoes_caller_id(self, test_client):
        response = await test_client.get("/records", headers={"X-Request-ID": "trace-7"})
        assert response.headers["X-Request-ID"] == "trace-7"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get(
            "/records/not-a-record", headers={"X-Request-ID": "trace-404"}
        )
        assert response.json()["request_id"] == "trace-404"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_list_line_reports_count_and_filters(self, test_client, record_payload, caplog):
        await test_client.post("/records", json=record_payload())
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)

        await test_client.get("/records", params={"search": "secret words", "category": "mobile-app"})

        [line] = [
            r.getMessage() for r in caplog.records
            if r.name == ACCESS_LOGGER and r.getMessage().startswith("GET")
        ]
        assert line.startswith("GET /records → 200 count=0 search=yes category=mobile-app ")
        assert "secret words" not in line

    @pytest.mark.asyncio
    async def test_record_line_uses_route_template_and_id(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)
        record_id = "00000000-0000-0000-0000-000000000000"

        await test_client.delete(f"/records/{record_id}")

        [record] = [r for r in caplog.records if r.name == ACCESS_LOGGER]
        assert record.levelno == logging.WARNING
        assert f"DELETE /records/{{record_id}} → 404 record={record_id} " in record.getMessage()

    @pytest.mark.asyncio
    async def test_health_probe_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)
        await test_client.get("/health")
        assert [r for r in caplog.records if r.name == ACCESS_LOGGER] == []
