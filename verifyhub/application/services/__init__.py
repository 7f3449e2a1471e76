"""Application services."""

from verifyhub.application.services.admin_service import AdminService
from verifyhub.application.services.bot_simulator_service import (
    BotCommandType,
    BotSimulatorService,
)
from verifyhub.application.services.exchange_service import ExchangeService
from verifyhub.application.services.stats_service import StatsService
from verifyhub.application.services.verification_flow_service import (
    VerificationFlowService,
)

__all__ = [
    "AdminService",
    "BotCommandType",
    "BotSimulatorService",
    "ExchangeService",
    "StatsService",
    "VerificationFlowService",
]
