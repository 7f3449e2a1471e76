from verifyhub.api.deps.admin import (
    get_current_admin,
    get_optional_admin,
    require_owner,
)
from verifyhub.api.deps.origin import get_public_origin

__all__ = ["get_current_admin", "get_optional_admin", "get_public_origin", "require_owner"]
