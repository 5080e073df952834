class BloodBankError(Exception):
    """Base class for every recoverable business rule failure."""
    default_message = 'Blood bank operation failed'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class NotFound(BloodBankError):
    default_message = 'Resource not found'


class DuplicateKey(BloodBankError):
    default_message = 'Resource already exists'


class Conflict(BloodBankError):
    default_message = 'Resource conflicts with an existing record'


class ValidationFailed(BloodBankError):
    default_message = 'Invalid input data provided'


class CapacityExceeded(BloodBankError):
    default_message = 'Maximum capacity exceeded'


class InsufficientStock(BloodBankError):
    default_message = 'Insufficient blood units available'


class AlreadyProcessed(BloodBankError):
    default_message = 'Blood request has already been processed'


class FulfillmentFailed(BloodBankError):
    default_message = 'Failed to fulfill request'
