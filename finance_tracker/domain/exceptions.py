"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPeriod(DomainException, ValueError):
    """Period identifier is not a well-formed month or week id"""

    def __init__(self, period: str, expected: str):
        super().__init__(f"Invalid {expected} period: {period!r}")
        self.period = period


class StoreOperationFailed(DomainException):
    """Records store could not complete a read or write"""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class RecordNotFound(DomainException):
    """Store operation targeted a record that does not exist"""

    def __init__(self, kind: str, record_id):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class ParseFailed(DomainException):
    """Natural-language expense parser returned nothing usable"""

    def __init__(self, message: str, raw_input: str):
        super().__init__(message)
        self.raw_input = raw_input


class InvalidRecord(DomainException, ValueError):
    """Record fields break an entity invariant once merged with stored values"""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind


class RecordConflict(DomainException):
    """Write rejected by a uniqueness or reference constraint"""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} conflicts with an existing record: {message}")
        self.operation = operation
