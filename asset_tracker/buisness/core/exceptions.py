"""
Lifecycle error taxonomy.

Every failure raised by the managers is one of these. The HTTP layer renders
them verbatim as {"error": kind, "message": ...} with the class status code.
"""


class LifecycleError(Exception):
    """Base class for all lifecycle failures"""
    status_code = 400
    kind = 'LifecycleError'

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.kind, 'message': self.message}


class NotFound(LifecycleError):
    """Entity id or tag absent"""
    status_code = 404
    kind = 'NotFound'


class InvalidTransition(LifecycleError):
    """Status precondition violated"""
    status_code = 400
    kind = 'InvalidTransition'


class CapacityExceeded(LifecycleError):
    """Seat limit reached"""
    status_code = 400
    kind = 'CapacityExceeded'


class Conflict(LifecycleError):
    """Unique-key collision or lost conditional update"""
    status_code = 409
    kind = 'Conflict'


class ValidationError(LifecycleError):
    """Malformed input, raised before any write"""
    status_code = 400
    kind = 'ValidationError'
