"""Tests for the correlation API routes."""

from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient

from eemflow.core.models import ActivityEvent, utc_now
from eemflow.services.flows import FlowService


@pytest.fixture
async def seeded(flow_service: FlowService) -> list[ActivityEvent]:
    start = utc_now() - timedelta(minutes=30)
    events = [
        ActivityEvent(
            id=f"e{i}",
            timestamp=start + timedelta(seconds=20 * i),
            activity_type="code_edit",
            content="refactor parser module",
            source="vscode",
            session_id="s1",
            metadata={"file": "parser.py"},
        )
        for i in range(3)
    ]
    for event in events:
        await flow_service._stores.events.save_event(event)
    return events


class TestDetectRoute:
    async def test_detect(self, client: AsyncClient, seeded: list[ActivityEvent]) -> None:
        response = await client.post(
            "/api/v1/correlations/detect",
            json={"session_id": "s1", "strategies": ["causal", "contextual"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == "s1"
        assert data["counts_by_type"] == {"causal": 2, "contextual": 1}
        assert data["total"] == 3
        assert all(item["session_id"] == "s1" for item in data["items"])

    async def test_invalid_threshold(self, client: AsyncClient, seeded: list[ActivityEvent]) -> None:
        response = await client.post("/api/v1/correlations/detect", json={"session_id": "s1", "min_strength": 1.5})
        assert response.status_code == 422
        assert "between 0.0 and 1.0" in response.json()["detail"]

    async def test_unknown_strategy(self, client: AsyncClient, seeded: list[ActivityEvent]) -> None:
        response = await client.post("/api/v1/correlations/detect", json={"session_id": "s1", "strategies": "magic"})
        assert response.status_code == 422

    async def test_missing_session(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/correlations/detect", json={})
        assert response.status_code == 422


class TestManualRoute:
    async def test_create(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/correlations/manual",
            json={"event_ids": ["e1", "e2"], "relation_type": "blocked-by", "strength": 0.8, "tags": ["review"]},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["relation_type"] == "blocked-by"
        assert data["related_event_ids"] == ["e1", "e2"]
        assert data["tags"] == ["review"]

    async def test_needs_two_ids(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/correlations/manual",
            json={"event_ids": ["e1"], "relation_type": "causal"},
        )
        assert response.status_code == 422

    async def test_strength_out_of_range(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/correlations/manual",
            json={"event_ids": ["e1", "e2"], "relation_type": "causal", "strength": 2.0},
        )
        assert response.status_code == 422


class TestListRoute:
    async def test_filter_by_type(self, client: AsyncClient) -> None:
        for relation_type in ("causal", "semantic"):
            await client.post(
                "/api/v1/correlations/manual",
                json={"event_ids": ["e1", "e2"], "relation_type": relation_type},
            )

        response = await client.get("/api/v1/correlations", params={"event_ids": "e1,e9"})
        assert response.json()["total"] == 2

        response = await client.get("/api/v1/correlations", params={"event_ids": "e2", "relation_type": "SEMANTIC"})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["relation_type"] == "semantic"

    async def test_requires_event_ids(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/correlations")
        assert response.status_code == 422
