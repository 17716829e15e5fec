# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for the availability and reservation engine."""

from collections.abc import Sequence
from http import HTTPStatus


class BookingEngineError(Exception):
    """Base class for errors surfaced to the immediate caller.

    Attributes:
        error_type: Stable identifier used in API error responses.
        status_code: HTTP status the API layer maps this error to.
    """

    error_type = "error"
    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str | None = None) -> None:
        """Initialize error with an optional message.

        Args:
            message: Human readable message. Defaults to the class docstring.
        """
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        """Return the default message for this error class."""
        return (cls.__doc__ or cls.__name__).strip().splitlines()[0]

    @property
    def message(self) -> str:
        """Return the error message."""
        return str(self)


class InvalidRangeError(BookingEngineError, ValueError):
    """End date must be after start date (at least one night)."""

    error_type = "invalid_range"
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY


class MinimumStayError(InvalidRangeError):
    """Requested stay is shorter than the minimum stay."""

    error_type = "minimum_stay"

    def __init__(self, nights: int, required: int) -> None:
        """Initialize with the requested and required nights.

        Args:
            nights: Nights in the requested stay.
            required: Minimum nights required.
        """
        self.nights = nights
        self.required = required
        super().__init__(f"Mindestaufenthalt: {required} Nächte (angefragt: {nights}).")


class BookingValidationError(BookingEngineError, ValueError):
    """Booking request failed validation."""

    error_type = "validation_error"
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY


class _RangeConflictError(BookingEngineError):
    """Base for conflicts on a set of nights."""

    status_code = HTTPStatus.CONFLICT

    def __init__(
        self,
        property_id: int,
        nights: Sequence[str] = (),
        message: str | None = None,
    ) -> None:
        """Initialize conflict error.

        Args:
            property_id: Property the conflict occurred on.
            nights: Conflicting night dates, if known.
            message: Optional message override.
        """
        self.property_id = property_id
        self.nights = list(nights)
        super().__init__(message)


class RangeAlreadyRequestedError(_RangeConflictError):
    """Zeitraum bereits angefragt – bitte einen anderen Zeitraum wählen."""

    error_type = "range_already_requested"


class RangeAlreadyConfirmedError(_RangeConflictError):
    """Zeitraum bereits belegt – bereits anderweitig bestätigt."""

    error_type = "range_already_confirmed"


class InvalidTransitionError(BookingEngineError):
    """Booking status does not allow this action."""

    error_type = "invalid_transition"
    status_code = HTTPStatus.CONFLICT

    def __init__(self, booking_id: int, status: str, action: str) -> None:
        """Initialize with the rejected transition.

        Args:
            booking_id: Booking the action was attempted on.
            status: Current booking status.
            action: Attempted action.
        """
        self.booking_id = booking_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} booking {booking_id} in status '{status}'")


class BookingNotFoundError(BookingEngineError, LookupError):
    """Booking not found."""

    error_type = "not_found"
    status_code = HTTPStatus.NOT_FOUND


class PropertyNotFoundError(BookingEngineError, LookupError):
    """Property not found."""

    error_type = "not_found"
    status_code = HTTPStatus.NOT_FOUND


class SeasonNotFoundError(BookingEngineError, LookupError):
    """Season not found."""

    error_type = "not_found"
    status_code = HTTPStatus.NOT_FOUND


class TaxBandNotFoundError(BookingEngineError, LookupError):
    """Tourist-tax band not found."""

    error_type = "not_found"
    status_code = HTTPStatus.NOT_FOUND
