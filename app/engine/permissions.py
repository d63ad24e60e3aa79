"""Capabilities derived once per request from the actor's role"""

import enum
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

from app.engine.types import enum_value


class Capability(str, enum.Enum):
    VIEW_ALL = "view_all"
    MUTATE_ANY = "mutate_any"
    MUTATE_OWN = "mutate_own"
    MANAGE_BLOCKS = "manage_blocks"
    EXPORT_BILLING = "export_billing"


ROLE_CAPABILITIES = {
    "resident": frozenset({Capability.MUTATE_OWN}),
    "admin": frozenset({Capability.VIEW_ALL, Capability.MUTATE_ANY, Capability.EXPORT_BILLING}),
    "it_admin": frozenset({
        Capability.VIEW_ALL,
        Capability.MUTATE_ANY,
        Capability.MANAGE_BLOCKS,
        Capability.EXPORT_BILLING,
    }),
    "manager": frozenset({Capability.VIEW_ALL, Capability.EXPORT_BILLING}),
    "concierge": frozenset({Capability.VIEW_ALL}),
}


@dataclass(frozen=True)
class Permissions:
    actor_id: Any = None
    role: str = "resident"
    unit_number: Optional[int] = None
    capabilities: FrozenSet[Capability] = field(default_factory=frozenset)

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def is_privileged(self) -> bool:
        return self.has(Capability.MUTATE_ANY)

    @property
    def is_read_only(self) -> bool:
        return not (self.has(Capability.MUTATE_ANY) or self.has(Capability.MUTATE_OWN))

    def owns(self, unit_number: int) -> bool:
        return (
            self.has(Capability.MUTATE_OWN)
            and self.unit_number is not None
            and self.unit_number == unit_number
        )

    def can_view(self, unit_number: int) -> bool:
        return self.has(Capability.VIEW_ALL) or self.unit_number == unit_number


def permissions_for(role, actor_id=None, unit_number: Optional[int] = None) -> Permissions:
    """Map a role to its capability set; unknown roles get none"""
    role = enum_value(role)
    return Permissions(
        actor_id=actor_id,
        role=role,
        unit_number=unit_number,
        capabilities=ROLE_CAPABILITIES.get(role, frozenset()),
    )
