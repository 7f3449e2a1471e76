from __future__ import annotations

import logging
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from verifyhub.application.services.stats_service import StatsService
from verifyhub.core.clock import ensure_utc
from verifyhub.core.config import get_settings
from verifyhub.core.database import get_session
from verifyhub.core.errors import ValidationError
from verifyhub.core.security import timestamped_id
from verifyhub.infrastructure.db.models.bot import BotCommand
from verifyhub.infrastructure.repositories.bot_command_repository import (
    BotCommandRepository,
)

logger = logging.getLogger(__name__)


class BotCommandType(str, Enum):
    SETUP_VERIFY = "setup_verify"
    PULL = "pull"
    STATS = "stats"


class BotSimulatorService:
    def __init__(self):
        self.settings = get_settings()

    async def setup_verify(
        self,
        *,
        server_id: str,
        admin_user_id: str,
        origin: str,
    ) -> dict[str, Any]:
        server_id, admin_user_id = self._validate_inputs(server_id, admin_user_id)
        command_id = timestamped_id("cmd")
        query = urlencode({"guildid": server_id, "cmd": command_id})
        verification_url = f"{origin.rstrip('/')}/?{query}"
        command = await self._record(
            command_id=command_id,
            command_type=BotCommandType.SETUP_VERIFY,
            server_id=server_id,
            admin_user_id=admin_user_id,
            verification_url=verification_url,
        )
        return {"command": command, "verification_url": verification_url}

    async def pull(self, *, server_id: str, admin_user_id: str) -> dict[str, Any]:
        server_id, admin_user_id = self._validate_inputs(server_id, admin_user_id)
        command = await self._record(
            command_id=timestamped_id("cmd"),
            command_type=BotCommandType.PULL,
            server_id=server_id,
            admin_user_id=admin_user_id,
        )
        # Delivery belongs to the external bot process reading bot_commands.
        return {
            "command": command,
            "message": (
                f"Pull command executed! Verified users will be added to server {server_id}"
            ),
        }

    async def stats(self, *, server_id: str, admin_user_id: str) -> dict[str, Any]:
        server_id, admin_user_id = self._validate_inputs(server_id, admin_user_id)
        command = await self._record(
            command_id=timestamped_id("cmd"),
            command_type=BotCommandType.STATS,
            server_id=server_id,
            admin_user_id=admin_user_id,
        )
        stats = await StatsService().get_verification_stats()
        return {"command": command, "stats": stats}

    async def list_recent(self, *, limit: int | None = None) -> list[dict[str, Any]]:
        async with get_session() as session:
            rows = await BotCommandRepository(session).list(
                limit=limit or self.settings.BOT_RECENT_COMMANDS_LIMIT
            )
        return [self._to_dict(row) for row in rows]

    async def _record(
        self,
        *,
        command_id: str,
        command_type: BotCommandType,
        server_id: str,
        admin_user_id: str,
        verification_url: str | None = None,
    ) -> dict[str, Any]:
        async with get_session() as session:
            row = await BotCommandRepository(session).create(
                id=command_id,
                command_type=command_type.value,
                server_id=server_id,
                admin_user_id=admin_user_id,
                verification_url=verification_url,
            )
        logger.info(
            "Bot command %s type=%s server=%s admin=%s",
            row.id,
            row.command_type,
            row.server_id,
            row.admin_user_id,
        )
        return self._to_dict(row)

    @staticmethod
    def _validate_inputs(server_id: str | None, admin_user_id: str | None) -> tuple[str, str]:
        missing = [
            name
            for name, value in (("serverId", server_id), ("adminUserId", admin_user_id))
            if not (value or "").strip()
        ]
        if missing:
            raise ValidationError(
                "Server ID and admin user ID are required",
                error_code="BOT_COMMAND_INPUT_REQUIRED",
                details=f"missing: {', '.join(missing)}",
            )
        return server_id.strip(), admin_user_id.strip()

    @staticmethod
    def _to_dict(row: BotCommand) -> dict[str, Any]:
        return {
            "id": row.id,
            "command_type": row.command_type,
            "server_id": row.server_id,
            "admin_user_id": row.admin_user_id,
            "verification_url": row.verification_url,
            "created_at": ensure_utc(row.created_at),
        }
