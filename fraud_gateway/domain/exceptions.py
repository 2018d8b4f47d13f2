"""Domain-specific exceptions"""

from typing import Iterable


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MissingRequiredFieldError(DomainException):
    """Transaction input lacks a field required for evaluation"""

    def __init__(self, fields: Iterable[str]):
        self.fields = tuple(fields)
        super().__init__(f"Missing required field(s): {', '.join(self.fields)}")


class InvalidConfigurationError(DomainException):
    """Rule catalog or base-risk table is malformed"""

    pass
