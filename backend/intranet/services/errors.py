"""Domain errors raised by the service layer."""

from __future__ import annotations

import uuid
from datetime import date


class BookingValidationError(ValueError):
    """A booking request is missing required data or is malformed."""


class BookingConflictError(ValueError):
    """The requested dates overlap an existing, non-rejected booking."""

    def __init__(
        self,
        message: str = "The selected dates are not available",
        *,
        conflicting_ids: list[uuid.UUID] | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> None:
        super().__init__(message)
        self.conflicting_ids = conflicting_ids or []
        self.start_date = start_date
        self.end_date = end_date


class ReservationNotFoundError(LookupError):
    """The referenced booking no longer exists."""


class InvalidStatusTransition(ValueError):
    """A booking status change is not permitted."""


class DuplicateSeasonYearError(ValueError):
    """A season table already exists for the year."""

    def __init__(self, year: int) -> None:
        super().__init__(f"Season settings for {year} already exist")
        self.year = year


class PageExistsError(ValueError):
    """A content page with the requested id already exists."""


class InvalidCredentialsError(ValueError):
    """The email and password do not match a member."""


class AccountSuspendedError(PermissionError):
    """The member exists but has been suspended by the board."""

    def __init__(self, user_id: uuid.UUID) -> None:
        super().__init__("Account suspended")
        self.user_id = user_id


class DataStoreError(RuntimeError):
    """The persistence layer failed; the operation was aborted."""


__all__ = [
    "AccountSuspendedError",
    "BookingConflictError",
    "BookingValidationError",
    "DataStoreError",
    "DuplicateSeasonYearError",
    "InvalidCredentialsError",
    "InvalidStatusTransition",
    "PageExistsError",
    "ReservationNotFoundError",
]
