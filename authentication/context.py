from dataclasses import dataclass
from typing import Optional


ROLE_ADMIN = 'admin'
ROLE_STAFF = 'staff'


@dataclass(frozen=True)
class Operator:
    """
    Who is performing an order operation.

    Built by the API layer after permission checks and passed explicitly
    into the order manager, which only records it.
    """
    user_id: Optional[int]
    username: str = ''
    role: str = ROLE_STAFF

    @classmethod
    def from_user(cls, user):
        if user is None or not user.is_authenticated:
            return None
        if user.is_superuser or user.groups.filter(name=ROLE_ADMIN).exists():
            role = ROLE_ADMIN
        else:
            role = ROLE_STAFF
        return cls(user_id=user.pk, username=user.get_username(), role=role)

    @classmethod
    def from_request(cls, request):
        return cls.from_user(getattr(request, 'user', None))

    def __str__(self):
        return f"{self.username or self.user_id} ({self.role})"
