"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    audit_router,
    clauses_router,
    contracts_router,
    dynamic_blocks_router,
    health_router,
    providers_router,
    templates_router,
    users_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(providers_router)
api_router.include_router(templates_router)
api_router.include_router(clauses_router)
api_router.include_router(contracts_router)
api_router.include_router(dynamic_blocks_router)
api_router.include_router(audit_router)
api_router.include_router(users_router)

__all__ = ["api_router"]
