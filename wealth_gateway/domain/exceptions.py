"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPlanError(DomainException):
    """Investment plan parameters violate plan invariants"""

    pass


class InvalidGoalError(DomainException):
    """Goal parameters cannot produce a contribution schedule request"""

    pass


class InvalidTemplatePayloadError(DomainException):
    """Stored recurring template payload is malformed"""

    pass


class TemplateConflictError(DomainException):
    """Recurring template occurrence was already claimed by another run"""

    pass


class SalaryAlreadyCreditedError(DomainException):
    """Salary for this month was already credited"""

    pass
