"""API routers."""

from .audit import router as audit_router
from .clauses import router as clauses_router
from .contracts import router as contracts_router
from .dynamic_blocks import router as dynamic_blocks_router
from .health import router as health_router
from .providers import router as providers_router
from .templates import router as templates_router
from .users import router as users_router

__all__ = [
    "audit_router",
    "clauses_router",
    "contracts_router",
    "dynamic_blocks_router",
    "health_router",
    "providers_router",
    "templates_router",
    "users_router",
]
