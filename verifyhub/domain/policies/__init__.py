"""Domain policy modules."""

from verifyhub.domain.policies.access_key_policy import AccessKeyPolicy, AdminRole
from verifyhub.domain.policies.avatar_policy import AvatarPolicy

__all__ = ["AccessKeyPolicy", "AdminRole", "AvatarPolicy"]
