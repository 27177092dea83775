"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status it maps to so the API can translate
it with a single exception handler. ``extra`` holds additional JSON
fields for the response body.
"""

from typing import Any

from tirestore.models.tire import TireAttributes


class GarageError(Exception):
    """Base class for all expected failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def extra(self) -> dict[str, Any]:
        return {}


class ValidationError(GarageError):
    """Malformed rack or tire input, rejected before any mutation."""

    status_code = 400


class Unauthorized(GarageError):
    status_code = 401


class NotFound(GarageError):
    """Unknown id, or an id that belongs to another owner."""

    status_code = 404


class CatalogLookupFailure(GarageError):
    """The catalog source was unreachable or its page was not understood."""

    def __init__(self, message: str, catalog_code: str, status_code: int = 404) -> None:
        super().__init__(message)
        self.catalog_code = catalog_code
        self.status_code = status_code

    @property
    def extra(self) -> dict[str, Any]:
        return {"eprelCode": self.catalog_code}


class NoSpaceAvailable(GarageError):
    """No eligible rack row can take the tire.

    Carries the resolved attributes so callers can show what needs room
    without looking the tire up again.
    """

    status_code = 409

    def __init__(self, tire_data: TireAttributes, catalog_code: str) -> None:
        super().__init__("No storage location available for this tire.")
        self.tire_data = tire_data
        self.catalog_code = catalog_code

    @property
    def extra(self) -> dict[str, Any]:
        return {
            "eprelCode": self.catalog_code,
            "tireData": self.tire_data.model_dump(by_alias=True),
        }
