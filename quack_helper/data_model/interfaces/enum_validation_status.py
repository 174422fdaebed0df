from enum import Enum


class ValidationStatus(Enum):
    PENDING = "pending"
    VALID = "valid"
    VALID_WITH_WARNINGS = "validWithWarnings"
    INVALID = "invalid"

    @property
    def is_importable(self) -> bool:
        return self in (ValidationStatus.VALID, ValidationStatus.VALID_WITH_WARNINGS)
