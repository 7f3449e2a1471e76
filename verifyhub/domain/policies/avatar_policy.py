from __future__ import annotations

DEFAULT_AVATAR_COUNT = 5


class AvatarPolicy:
    @staticmethod
    def default_avatar_index(discriminator: str | None) -> int:
        try:
            return int(discriminator or "0") % DEFAULT_AVATAR_COUNT
        except ValueError:
            return 0

    @classmethod
    def build_avatar_url(
        cls,
        *,
        cdn_base_url: str,
        user_id: str,
        avatar_hash: str | None,
        discriminator: str | None,
    ) -> str:
        base = cdn_base_url.rstrip("/")
        if avatar_hash:
            return f"{base}/avatars/{user_id}/{avatar_hash}.png"
        return f"{base}/embed/avatars/{cls.default_avatar_index(discriminator)}.png"
