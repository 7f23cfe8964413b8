import pytest


@pytest.mark.asyncio
async def test_root_health(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["service"] == "PROCCMS Backend"


@pytest.mark.asyncio
async def test_metrics_reports_database(client):
    res = await client.get("/api/metrics")
    assert res.status_code == 200
    body = res.json()
    assert body["database"] == "Connected"
    for key in ("cpu", "ram", "disk", "uptime", "db_latency"):
        assert key in body
