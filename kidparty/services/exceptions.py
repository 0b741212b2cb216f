class PartyServiceError(Exception):
    """Base exception for party, RSVP and reminder service errors"""

    pass


class PartyNotFoundError(PartyServiceError):
    """Party not found"""

    pass


class ChildNotFoundError(PartyServiceError):
    """Child not found or not owned by the caller"""

    pass


class PermissionDeniedError(PartyServiceError):
    """Permission denied for operation"""

    pass


class BusinessRuleViolationError(PartyServiceError):
    """Business rule violation"""

    pass


class RSVPValidationError(PartyServiceError):
    """RSVP validation error"""

    pass


class NotificationServiceError(Exception):
    """Base exception for queued notification errors"""

    pass
