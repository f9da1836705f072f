"""
Domain errors raised by the permission authority and the schedule conflict detector.
HTTP translation happens in app.main.
"""


class ChurchDomainError(Exception):
    """Base class for local validation failures. Never retried."""


class InvalidRole(ChurchDomainError):
    def __init__(self, role):
        self.role = role
        super().__init__(f"Invalid role: {role!r}")


class InvalidInvocation(ChurchDomainError):
    """Caller broke the authority contract (unknown capability, missing scope context)."""


class InvalidRange(ChurchDomainError):
    def __init__(self, start_time, end_time):
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(f"Start time {start_time} must be before end time {end_time}")


class InvalidTransition(ChurchDomainError):
    def __init__(self, current_status, new_status):
        self.current_status = current_status
        self.new_status = new_status
        if current_status is None:
            super().__init__(f"Invalid schedule status '{new_status}'")
        else:
            super().__init__(f"Cannot change schedule status from '{current_status}' to '{new_status}'")
