"""
Dynamic block service.

CRUD for dynamic blocks. Conditions and always-include rules are kept as
JSON strings in DynamoDB and decoded for callers.

Dependencies: contract_engine.boundary.db.CRUD
System role: Dynamic block use cases
"""

import asyncio
import json
import logging
from typing import Any

from contract_engine.boundary.db.CRUD.dynamic_block_crud import DynamicBlockCRUD
from contract_engine.core.exceptions import NotFoundError, OwnershipError, ValidationError
from contract_engine.models.user import CurrentUser

logger = logging.getLogger(__name__)

_JSON_FIELDS = ("conditions", "alwaysInclude")


def _decode(value: Any) -> list:
    if value in (None, ""):
        return []
    if isinstance(value, list):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.warning("Invalid dynamic block JSON", extra={"value": str(value)[:100]})
        return []
    return decoded if isinstance(decoded, list) else []


def to_block_dict(item: dict[str, Any]) -> dict[str, Any]:
    block = dict(item)
    for key in _JSON_FIELDS:
        block[key] = _decode(item.get(key))
    return block


def _encode(fields: dict[str, Any]) -> dict[str, Any]:
    encoded = dict(fields)
    for key in _JSON_FIELDS:
        if key in encoded and encoded[key] is not None:
            encoded[key] = json.dumps(encoded[key])
    return encoded


class DynamicBlockService:
    """Dynamic block use cases."""

    def __init__(self, blocks: DynamicBlockCRUD) -> None:
        self.blocks = blocks

    async def create_block(self, user: CurrentUser, **fields: Any) -> dict[str, Any]:
        item = await asyncio.to_thread(self.blocks.create, owner=user.username, **_encode(fields))
        logger.info("Dynamic block created", extra={"block_id": item["id"], "placeholder": item.get("placeholder")})
        return to_block_dict(item)

    async def list_blocks(self, placeholder: str | None = None) -> list[dict[str, Any]]:
        if placeholder:
            items = await asyncio.to_thread(self.blocks.get_by_placeholder, placeholder)
        else:
            items = await asyncio.to_thread(self.blocks.get_all)
        return [to_block_dict(item) for item in items]

    async def get_block(self, block_id: str) -> dict[str, Any]:
        item = await asyncio.to_thread(self.blocks.get_by_id, block_id)
        if not item:
            raise NotFoundError("DynamicBlock", block_id)
        return to_block_dict(item)

    async def update_block(self, block_id: str | None, user: CurrentUser, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update a dynamic block owned by the caller.

        Raises:
            ValidationError: If no id is given
            NotFoundError: If the block does not exist
            OwnershipError: If the caller is not the owner
        """
        if not block_id:
            raise ValidationError("Dynamic block id is required for update", field="id")
        existing = await asyncio.to_thread(self.blocks.get_by_id, block_id)
        if not existing:
            raise NotFoundError("DynamicBlock", block_id)
        if existing.get("owner") not in user.owner_ids:
            logger.warning(
                "Dynamic block ownership mismatch",
                extra={"block_id": block_id, "owner": existing.get("owner"), "username": user.username},
            )
            raise OwnershipError(
                "You do not have permission to update this dynamic block",
                {"block_id": block_id},
            )

        updates = _encode({k: v for k, v in fields.items() if v is not None})
        item = await asyncio.to_thread(self.blocks.update_by_id, block_id, **updates)
        if not item:
            raise NotFoundError("DynamicBlock", block_id)
        logger.info("Dynamic block updated", extra={"block_id": block_id, "fields": list(updates)})
        return to_block_dict(item)

    async def delete_block(self, block_id: str) -> None:
        if not await asyncio.to_thread(self.blocks.delete_by_id, block_id):
            raise NotFoundError("DynamicBlock", block_id)
        logger.info("Dynamic block deleted", extra={"block_id": block_id})
