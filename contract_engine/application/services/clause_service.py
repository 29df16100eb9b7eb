"""
Clause service orchestrator.

Clause library CRUD and rule-based clause selection for a provider.

Dependencies: contract_engine.core.clause_rules, contract_engine.boundary.db.CRUD
System role: Clause use case orchestration
"""

import asyncio
import logging
from typing import Any

from contract_engine.boundary.db.CRUD.clause_crud import ClauseCRUD
from contract_engine.boundary.db.CRUD.provider_crud import ProviderCRUD
from contract_engine.core.clause_rules import select_applicable_clauses
from contract_engine.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class ClauseService:
    """Clause service orchestrator."""

    def __init__(self, clauses: ClauseCRUD, providers: ProviderCRUD) -> None:
        self.clauses = clauses
        self.providers = providers

    async def create_clause(self, owner: str, **fields: Any) -> dict[str, Any]:
        """
        Create a clause.

        Args:
            owner: Creating username
            **fields: title, text, category, tags, applicableProviderTypes, conditions

        Returns:
            dict: Created clause
        """
        clause = await asyncio.to_thread(self.clauses.create, owner=owner, **fields)
        logger.info("Clause created", extra={"clause_id": clause["id"], "title": clause.get("title")})
        return clause

    async def list_clauses(self, category: str | None = None) -> list[dict[str, Any]]:
        if category:
            items = await asyncio.to_thread(self.clauses.get_by_category, category)
        else:
            items = await asyncio.to_thread(self.clauses.get_all)
        return sorted(items, key=lambda c: (c.get("title") or "").lower())

    async def get_clause(self, clause_id: str) -> dict[str, Any]:
        """
        Get clause by ID.

        Raises:
            NotFoundError: If clause not found
        """
        clause = await asyncio.to_thread(self.clauses.get_by_id, clause_id)
        if not clause:
            raise NotFoundError("Clause", clause_id)
        return clause

    async def update_clause(self, clause_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        updates = {k: v for k, v in fields.items() if v is not None}
        clause = await asyncio.to_thread(self.clauses.update_by_id, clause_id, **updates)
        if not clause:
            raise NotFoundError("Clause", clause_id)
        logger.info("Clause updated", extra={"clause_id": clause_id, "fields": list(updates)})
        return clause

    async def delete_clause(self, clause_id: str) -> None:
        if not await asyncio.to_thread(self.clauses.delete_by_id, clause_id):
            raise NotFoundError("Clause", clause_id)
        logger.info("Clause deleted", extra={"clause_id": clause_id})

    async def get_clauses_by_ids(self, clause_ids: list[str]) -> list[dict[str, Any]]:
        """Load clauses in the given order, skipping ids that no longer exist."""
        clauses = []
        for clause_id in clause_ids:
            clause = await asyncio.to_thread(self.clauses.get_by_id, clause_id)
            if clause:
                clauses.append(clause)
            else:
                logger.warning("Referenced clause missing", extra={"clause_id": clause_id})
        return clauses

    async def applicable_clauses(
        self,
        provider_id: str,
        clause_ids: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Clauses whose rules match a provider.

        Args:
            provider_id: Provider ID
            clause_ids: Restrict selection to these clauses (default: whole library)

        Raises:
            NotFoundError: If provider not found
        """
        provider = await asyncio.to_thread(self.providers.get_by_id, provider_id)
        if not provider:
            raise NotFoundError("Provider", provider_id)

        if clause_ids is not None:
            candidates = await self.get_clauses_by_ids(clause_ids)
        else:
            candidates = await asyncio.to_thread(self.clauses.get_all)
        selected = select_applicable_clauses(provider, candidates)
        logger.info(
            "Clauses selected",
            extra={"provider_id": provider_id, "candidates": len(candidates), "selected": len(selected)},
        )
        return list(selected)
