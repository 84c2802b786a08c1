"""Who is making a request: an authenticated user or nobody."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Authenticated:
    user: object

    @property
    def user_id(self) -> str:
        return str(self.user.id)

    @property
    def is_admin(self) -> bool:
        return self.user.is_admin


@dataclass(frozen=True)
class Anonymous:
    user = None
    user_id = None
    is_admin = False


Principal = Authenticated | Anonymous
