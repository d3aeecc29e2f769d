"""Test factories for creating test data."""

from tests.factories.records import (
    Account,
    FailingRecord,
    Preferences,
    ReservedAttributeRecord,
)

__all__ = [
    "Account",
    "FailingRecord",
    "Preferences",
    "ReservedAttributeRecord",
]
