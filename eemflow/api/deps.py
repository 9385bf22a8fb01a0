"""Shared FastAPI dependencies.

Provides the flow service stored on app state by the lifespan handler.
"""

from __future__ import annotations

from fastapi import Request

from eemflow.services.flows import FlowService


def get_flow_service(request: Request) -> FlowService:
    return request.app.state.flow_service
