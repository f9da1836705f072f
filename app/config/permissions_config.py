"""
Roles and Capabilities Configuration
This config defines the permission matrix for every church role.
Each role maps every capability to one of three grants:

    church  - allowed church-wide
    campus  - allowed only for targets inside a campus the actor is assigned to
    denied  - not allowed

The table must be total: every role carries an explicit grant for every
capability. `check_table_is_total` runs at import time so a missing entry
fails on startup instead of silently defaulting.
"""

from enum import Enum
from typing import Dict, List


class ChurchRole(str, Enum):
    OWNER = "owner"
    OVERSEER = "overseer"
    MODERATOR = "moderator"
    MEMBER = "member"


class Capability(str, Enum):
    # Church management
    DELETE_CHURCH = "deleteChurch"
    UPDATE_CHURCH = "updateChurch"
    VIEW_CHURCH_SETTINGS = "viewChurchSettings"

    # Campus management
    CREATE_CAMPUS = "createCampus"
    DELETE_CAMPUS = "deleteCampus"
    UPDATE_CAMPUS = "updateCampus"
    VIEW_ALL_CAMPUSES = "viewAllCampuses"

    # Member management
    PROMOTE_TO_OWNER = "promoteToOwner"
    PROMOTE_TO_OVERSEER = "promoteToOverseer"
    PROMOTE_TO_MODERATOR = "promoteToModerator"
    DEMOTE_MEMBERS = "demoteMembers"
    REMOVE_MEMBERS = "removeMembers"
    ASSIGN_CAMPUS = "assignCampus"
    VIEW_DEPARTURES = "viewDepartures"

    # Invites and join requests
    CREATE_INVITES = "createInvites"
    VIEW_ALL_INVITES = "viewAllInvites"
    DELETE_INVITES = "deleteInvites"
    APPROVE_JOIN_REQUESTS = "approveJoinRequests"

    # Ministries and scheduling
    MANAGE_MINISTRIES = "manageMinistries"
    MANAGE_SCHEDULES = "manageSchedules"
    MANAGE_SAFETY_TEAM = "manageSafetyTeam"
    MANAGE_SAFETY_INCIDENTS = "manageSafetyIncidents"

    # Content management
    MANAGE_ALL_CONTENT = "manageAllContent"
    VIEW_ALL_CONTENT = "viewAllContent"


class Grant(str, Enum):
    CHURCH = "church"
    CAMPUS = "campus"
    DENIED = "denied"


ROLE_HIERARCHY: Dict[ChurchRole, int] = {
    ChurchRole.OWNER: 4,
    ChurchRole.OVERSEER: 3,
    ChurchRole.MODERATOR: 2,
    ChurchRole.MEMBER: 1,
}

# Capability that authorizes giving a member the given role.
ROLE_ASSIGNMENT_CAPABILITIES: Dict[ChurchRole, Capability] = {
    ChurchRole.OWNER: Capability.PROMOTE_TO_OWNER,
    ChurchRole.OVERSEER: Capability.PROMOTE_TO_OVERSEER,
    ChurchRole.MODERATOR: Capability.PROMOTE_TO_MODERATOR,
    ChurchRole.MEMBER: Capability.DEMOTE_MEMBERS,
}

_C = Grant.CHURCH
_S = Grant.CAMPUS
_X = Grant.DENIED

ROLE_PERMISSIONS: Dict[ChurchRole, Dict[Capability, Grant]] = {
    ChurchRole.OWNER: {
        Capability.DELETE_CHURCH: _C,
        Capability.UPDATE_CHURCH: _C,
        Capability.VIEW_CHURCH_SETTINGS: _C,
        Capability.CREATE_CAMPUS: _C,
        Capability.DELETE_CAMPUS: _C,
        Capability.UPDATE_CAMPUS: _C,
        Capability.VIEW_ALL_CAMPUSES: _C,
        Capability.PROMOTE_TO_OWNER: _C,
        Capability.PROMOTE_TO_OVERSEER: _C,
        Capability.PROMOTE_TO_MODERATOR: _C,
        Capability.DEMOTE_MEMBERS: _C,
        Capability.REMOVE_MEMBERS: _C,
        Capability.ASSIGN_CAMPUS: _C,
        Capability.VIEW_DEPARTURES: _C,
        Capability.CREATE_INVITES: _C,
        Capability.VIEW_ALL_INVITES: _C,
        Capability.DELETE_INVITES: _C,
        Capability.APPROVE_JOIN_REQUESTS: _C,
        Capability.MANAGE_MINISTRIES: _C,
        Capability.MANAGE_SCHEDULES: _C,
        Capability.MANAGE_SAFETY_TEAM: _C,
        Capability.MANAGE_SAFETY_INCIDENTS: _C,
        Capability.MANAGE_ALL_CONTENT: _C,
        Capability.VIEW_ALL_CONTENT: _C,
    },
    ChurchRole.OVERSEER: {
        Capability.DELETE_CHURCH: _X,
        Capability.UPDATE_CHURCH: _X,
        Capability.VIEW_CHURCH_SETTINGS: _C,
        Capability.CREATE_CAMPUS: _X,
        Capability.DELETE_CAMPUS: _X,
        Capability.UPDATE_CAMPUS: _S,
        Capability.VIEW_ALL_CAMPUSES: _X,
        Capability.PROMOTE_TO_OWNER: _X,
        Capability.PROMOTE_TO_OVERSEER: _X,
        Capability.PROMOTE_TO_MODERATOR: _S,
        Capability.DEMOTE_MEMBERS: _S,
        Capability.REMOVE_MEMBERS: _S,
        Capability.ASSIGN_CAMPUS: _S,
        Capability.VIEW_DEPARTURES: _C,
        Capability.CREATE_INVITES: _S,
        Capability.VIEW_ALL_INVITES: _X,
        Capability.DELETE_INVITES: _S,
        Capability.APPROVE_JOIN_REQUESTS: _S,
        Capability.MANAGE_MINISTRIES: _C,
        Capability.MANAGE_SCHEDULES: _C,
        Capability.MANAGE_SAFETY_TEAM: _C,
        Capability.MANAGE_SAFETY_INCIDENTS: _C,
        Capability.MANAGE_ALL_CONTENT: _X,
        Capability.VIEW_ALL_CONTENT: _X,
    },
    ChurchRole.MODERATOR: {
        Capability.DELETE_CHURCH: _X,
        Capability.UPDATE_CHURCH: _X,
        Capability.VIEW_CHURCH_SETTINGS: _X,
        Capability.CREATE_CAMPUS: _X,
        Capability.DELETE_CAMPUS: _X,
        Capability.UPDATE_CAMPUS: _X,
        Capability.VIEW_ALL_CAMPUSES: _X,
        Capability.PROMOTE_TO_OWNER: _X,
        Capability.PROMOTE_TO_OVERSEER: _X,
        Capability.PROMOTE_TO_MODERATOR: _X,
        Capability.DEMOTE_MEMBERS: _X,
        Capability.REMOVE_MEMBERS: _X,
        Capability.ASSIGN_CAMPUS: _X,
        Capability.VIEW_DEPARTURES: _X,
        Capability.CREATE_INVITES: _X,
        Capability.VIEW_ALL_INVITES: _X,
        Capability.DELETE_INVITES: _X,
        Capability.APPROVE_JOIN_REQUESTS: _S,
        Capability.MANAGE_MINISTRIES: _X,
        Capability.MANAGE_SCHEDULES: _X,
        Capability.MANAGE_SAFETY_TEAM: _X,
        Capability.MANAGE_SAFETY_INCIDENTS: _C,
        Capability.MANAGE_ALL_CONTENT: _X,
        Capability.VIEW_ALL_CONTENT: _X,
    },
    ChurchRole.MEMBER: {
        Capability.DELETE_CHURCH: _X,
        Capability.UPDATE_CHURCH: _X,
        Capability.VIEW_CHURCH_SETTINGS: _X,
        Capability.CREATE_CAMPUS: _X,
        Capability.DELETE_CAMPUS: _X,
        Capability.UPDATE_CAMPUS: _X,
        Capability.VIEW_ALL_CAMPUSES: _X,
        Capability.PROMOTE_TO_OWNER: _X,
        Capability.PROMOTE_TO_OVERSEER: _X,
        Capability.PROMOTE_TO_MODERATOR: _X,
        Capability.DEMOTE_MEMBERS: _X,
        Capability.REMOVE_MEMBERS: _X,
        Capability.ASSIGN_CAMPUS: _X,
        Capability.VIEW_DEPARTURES: _X,
        Capability.CREATE_INVITES: _X,
        Capability.VIEW_ALL_INVITES: _X,
        Capability.DELETE_INVITES: _X,
        Capability.APPROVE_JOIN_REQUESTS: _X,
        Capability.MANAGE_MINISTRIES: _X,
        Capability.MANAGE_SCHEDULES: _X,
        Capability.MANAGE_SAFETY_TEAM: _X,
        Capability.MANAGE_SAFETY_INCIDENTS: _X,
        Capability.MANAGE_ALL_CONTENT: _X,
        Capability.VIEW_ALL_CONTENT: _X,
    },
}

CAPABILITY_DESCRIPTIONS: Dict[Capability, str] = {
    Capability.DELETE_CHURCH: "delete the church",
    Capability.UPDATE_CHURCH: "update church details",
    Capability.VIEW_CHURCH_SETTINGS: "view church settings",
    Capability.CREATE_CAMPUS: "create campuses",
    Capability.DELETE_CAMPUS: "delete campuses",
    Capability.UPDATE_CAMPUS: "update campuses",
    Capability.VIEW_ALL_CAMPUSES: "view all campuses",
    Capability.PROMOTE_TO_OWNER: "transfer church ownership",
    Capability.PROMOTE_TO_OVERSEER: "promote members to overseer",
    Capability.PROMOTE_TO_MODERATOR: "promote members to moderator",
    Capability.DEMOTE_MEMBERS: "demote members",
    Capability.REMOVE_MEMBERS: "remove members",
    Capability.ASSIGN_CAMPUS: "assign campuses",
    Capability.VIEW_DEPARTURES: "view departure history",
    Capability.CREATE_INVITES: "create invites",
    Capability.VIEW_ALL_INVITES: "view all invites",
    Capability.DELETE_INVITES: "manage invites",
    Capability.APPROVE_JOIN_REQUESTS: "review join requests",
    Capability.MANAGE_MINISTRIES: "manage ministries",
    Capability.MANAGE_SCHEDULES: "manage schedules",
    Capability.MANAGE_SAFETY_TEAM: "manage the safety team",
    Capability.MANAGE_SAFETY_INCIDENTS: "manage incident reports",
    Capability.MANAGE_ALL_CONTENT: "manage all content",
    Capability.VIEW_ALL_CONTENT: "view all content",
}

ROLE_DISPLAY_NAMES: Dict[ChurchRole, str] = {
    ChurchRole.OWNER: "Church Owner",
    ChurchRole.OVERSEER: "Campus Overseer",
    ChurchRole.MODERATOR: "Campus Moderator",
    ChurchRole.MEMBER: "Member",
}

ROLE_DESCRIPTIONS: Dict[ChurchRole, str] = {
    ChurchRole.OWNER: "Full access to all church settings, campuses, and members",
    ChurchRole.OVERSEER: "Manages specific campuses and can promote moderators",
    ChurchRole.MODERATOR: "Helps manage content within their campus",
    ChurchRole.MEMBER: "Can view and participate in church activities",
}


def check_table_is_total() -> None:
    """Raise RuntimeError if any role/capability pair lacks an explicit grant."""
    missing: List[str] = []
    for role in ChurchRole:
        grants = ROLE_PERMISSIONS.get(role)
        if grants is None:
            missing.append(f"{role.value}:*")
            continue
        for capability in Capability:
            if not isinstance(grants.get(capability), Grant):
                missing.append(f"{role.value}:{capability.value}")
    for capability in Capability:
        if capability not in CAPABILITY_DESCRIPTIONS:
            missing.append(f"description:{capability.value}")
    if missing:
        raise RuntimeError(f"Permission table is not total, missing: {', '.join(missing)}")


def get_permission_matrix() -> Dict[str, Dict[str, str]]:
    """
    Returns the table in plain JSON form for the frontend:
    {"owner": {"deleteChurch": "church", ...}, ...}
    """
    return {
        role.value: {capability.value: grant.value for capability, grant in grants.items()}
        for role, grants in ROLE_PERMISSIONS.items()
    }


check_table_is_total()
