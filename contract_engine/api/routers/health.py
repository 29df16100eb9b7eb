"""
Health check API endpoints.

Routes: GET /health, GET /health/s3

Dependencies: contract_engine.boundary
System role: Health check HTTP API
"""

import asyncio

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from contract_engine.api.deps import get_service_cache
from contract_engine.api.deps.dependencies import ServiceCache


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/s3", response_model=HealthResponse)
async def health_check_s3(cache: ServiceCache = Depends(get_service_cache)) -> HealthResponse:
    """Storage bucket health check."""
    result = await asyncio.to_thread(cache.storage.test_connection)
    if result["success"]:
        return HealthResponse(status="healthy", message=f"Bucket {result['bucket']} reachable")
    return HealthResponse(status="unhealthy", message=result.get("error") or "Bucket unreachable")
