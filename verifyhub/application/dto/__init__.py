from verifyhub.application.dto.admin import AdminPrincipal, IssuedAdminSession
from verifyhub.application.dto.verification import VerificationOutcome, VerificationState

__all__ = [
    "AdminPrincipal",
    "IssuedAdminSession",
    "VerificationOutcome",
    "VerificationState",
]
