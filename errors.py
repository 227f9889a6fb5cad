"""Error hierarchy for prayer time calculation.

Boundary errors (bad coordinate, bad date, unknown method) are raised before
any astronomy runs and are fatal for that call. A marker with no geometric
solution is NOT an error: it comes back as None inside PrayerTimes.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories used in the REST envelope."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class PrayerTimesError(Exception):
    """Base exception for all calculation boundary failures."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory = ErrorCategory.VALIDATION,
        http_status: int = 400,
        field: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.field = field

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        error = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        if self.field is not None:
            error["field"] = self.field
        return {"error": error}


class InvalidCoordinate(PrayerTimesError):
    """Latitude or longitude outside its valid range."""
    def __init__(self, field: str, value: float, low: float, high: float):
        super().__init__(
            f"{field} must be within [{low:g}, {high:g}], got {value!r}",
            "INVALID_COORDINATE", field=field,
        )
        self.value = value


class InvalidDate(PrayerTimesError):
    """Calendar date or timezone offset that cannot be calculated for."""
    def __init__(self, message: str, field: str = "date"):
        super().__init__(message, "INVALID_DATE", field=field)


class UnknownMethod(PrayerTimesError):
    """Method (or Asr juristic) identifier missing from the registry."""
    def __init__(self, value: object, field: str = "calculationMethod"):
        super().__init__(
            f"Unknown {field}: {value!r}",
            "UNKNOWN_METHOD", ErrorCategory.CONFIGURATION, field=field,
        )
        self.value = value


class InvalidIqamaOffset(PrayerTimesError):
    """Iqama offset specification that names no prayer or is not a number."""
    def __init__(self, message: str):
        super().__init__(message, "INVALID_IQAMA", field="iqama")
