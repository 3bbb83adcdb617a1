class InvariantViolation(Exception):
    """Raised when a content document breaks a domain invariant."""
