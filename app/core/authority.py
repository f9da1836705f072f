"""
Permission authority: decides whether a church role may perform a capability.

Every decision is a pure function of the static table in
app.config.permissions_config and, for campus-scoped grants, of the campus
the action targets relative to the actor's campus assignment.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from app.config.permissions_config import (
    CAPABILITY_DESCRIPTIONS,
    ROLE_ASSIGNMENT_CAPABILITIES,
    ROLE_DESCRIPTIONS,
    ROLE_DISPLAY_NAMES,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    Capability,
    ChurchRole,
    Grant,
)
from app.core.exceptions import InvalidInvocation, InvalidRole

RoleLike = Union[ChurchRole, str]
CapabilityLike = Union[Capability, str]


class Decision(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOWED


@dataclass(frozen=True)
class ScopeContext:
    """Campus of the actor, campus the action targets, and any extra campuses the actor oversees."""

    actor_campus: Optional[str]
    target_campus: Optional[str]
    assigned_campuses: FrozenSet[str] = frozenset()

    def covers_target(self) -> bool:
        # A target outside any campus is never within a campus-local scope
        if self.target_campus is None:
            return False
        return self.target_campus == self.actor_campus or self.target_campus in self.assigned_campuses


def parse_role(role: RoleLike) -> ChurchRole:
    if isinstance(role, ChurchRole):
        return role
    try:
        return ChurchRole(role)
    except (ValueError, TypeError):
        raise InvalidRole(role) from None


def parse_capability(capability: CapabilityLike) -> Capability:
    if isinstance(capability, Capability):
        return capability
    try:
        return Capability(capability)
    except (ValueError, TypeError):
        raise InvalidInvocation(f"Unknown capability: {capability!r}") from None


def grant_for(role: RoleLike, capability: CapabilityLike) -> Grant:
    return ROLE_PERMISSIONS[parse_role(role)][parse_capability(capability)]


def authorize(
    role: RoleLike,
    capability: CapabilityLike,
    scope: Optional[ScopeContext] = None,
) -> Decision:
    """
    Allowed/Denied for role + capability.

    Raises InvalidRole for an unknown role, and InvalidInvocation for an
    unknown capability or when the role's grant is campus-scoped and no scope
    context was supplied.
    """
    role = parse_role(role)
    capability = parse_capability(capability)
    grant = ROLE_PERMISSIONS[role][capability]

    if grant is Grant.DENIED:
        return Decision.DENIED
    if grant is Grant.CHURCH:
        return Decision.ALLOWED
    if scope is None:
        raise InvalidInvocation(
            f"Capability '{capability.value}' is campus-scoped for role '{role.value}'; scope context required"
        )
    return Decision.ALLOWED if scope.covers_target() else Decision.DENIED


def role_rank(role: RoleLike) -> int:
    return ROLE_HIERARCHY[parse_role(role)]


def is_role_higher(role1: RoleLike, role2: RoleLike) -> bool:
    return role_rank(role1) > role_rank(role2)


def authorize_promotion(
    actor_role: RoleLike,
    new_role: RoleLike,
    scope: Optional[ScopeContext] = None,
) -> Decision:
    """Whether actor_role may give a member new_role.

    The rank check runs before the table lookup, so no table entry can ever
    let an actor create a peer or a superior.
    """
    actor_role = parse_role(actor_role)
    new_role = parse_role(new_role)
    if not is_role_higher(actor_role, new_role):
        return Decision.DENIED
    return authorize(actor_role, ROLE_ASSIGNMENT_CAPABILITIES[new_role], scope)


def authorize_demotion(
    actor_role: RoleLike,
    current_role: RoleLike,
    new_role: RoleLike,
    scope: Optional[ScopeContext] = None,
) -> Decision:
    actor_role = parse_role(actor_role)
    current_role = parse_role(current_role)
    new_role = parse_role(new_role)
    if not is_role_higher(current_role, new_role):
        raise InvalidInvocation(f"'{current_role.value}' -> '{new_role.value}' is not a demotion")
    if not is_role_higher(actor_role, current_role):
        return Decision.DENIED
    return authorize(actor_role, Capability.DEMOTE_MEMBERS, scope)


def authorize_role_change(
    actor_role: RoleLike,
    current_role: RoleLike,
    new_role: RoleLike,
    scope: Optional[ScopeContext] = None,
) -> Decision:
    """Dispatch a role change to the promotion or demotion rule.

    The target must currently rank below the actor in both directions.
    """
    actor_role = parse_role(actor_role)
    current_role = parse_role(current_role)
    new_role = parse_role(new_role)
    if current_role is new_role:
        raise InvalidInvocation(f"Member already holds role '{new_role.value}'")
    if not is_role_higher(actor_role, current_role):
        return Decision.DENIED
    if is_role_higher(new_role, current_role):
        return authorize_promotion(actor_role, new_role, scope)
    return authorize_demotion(actor_role, current_role, new_role, scope)


def promotable_roles(actor_role: RoleLike) -> List[ChurchRole]:
    """Roles the actor can promote someone to, highest first."""
    actor_role = parse_role(actor_role)
    roles = []
    for role in sorted(ChurchRole, key=role_rank, reverse=True):
        if role is ChurchRole.MEMBER or not is_role_higher(actor_role, role):
            continue
        if grant_for(actor_role, ROLE_ASSIGNMENT_CAPABILITIES[role]) is not Grant.DENIED:
            roles.append(role)
    return roles


def granted_capabilities(role: RoleLike) -> Dict[str, str]:
    """Non-denied capabilities of a role with their grant, e.g. {"createInvites": "campus"}."""
    return {
        capability.value: grant.value
        for capability, grant in ROLE_PERMISSIONS[parse_role(role)].items()
        if grant is not Grant.DENIED
    }


def _plural(role: ChurchRole) -> str:
    return f"{role.value}s"


def _join(words: Iterable[str]) -> str:
    words = list(words)
    if len(words) <= 1:
        return "".join(words)
    return f"{', '.join(words[:-1])} and {words[-1]}"


def denial_message(capability: CapabilityLike) -> str:
    """Role-aware denial text, e.g. "Only owners and overseers can manage schedules"."""
    capability = parse_capability(capability)
    holders = [
        role for role in sorted(ChurchRole, key=role_rank, reverse=True)
        if ROLE_PERMISSIONS[role][capability] is not Grant.DENIED
    ]
    description = CAPABILITY_DESCRIPTIONS[capability]
    if not holders:
        return f"No role can {description}"
    return f"Only {_join(_plural(role) for role in holders)} can {description}"


def scope_denial_message(capability: CapabilityLike) -> str:
    description = CAPABILITY_DESCRIPTIONS[parse_capability(capability)]
    return f"You can only {description} within your assigned campus"


def role_display_name(role: RoleLike) -> str:
    return ROLE_DISPLAY_NAMES[parse_role(role)]


def role_description(role: RoleLike) -> str:
    return ROLE_DESCRIPTIONS[parse_role(role)]
