from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Operator


class OperatorRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Operator]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Operator]:
        raise NotImplementedError

    def create(self, *, full_name: str, email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def update_role(self, user_id: int, role: Role) -> bool:
        raise NotImplementedError

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Operator]:
        raise NotImplementedError
