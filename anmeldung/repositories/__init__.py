"""Repositories module"""

from anmeldung.repositories.registration_repository import (
    AthleteSnapshot,
    RegistrationSnapshot,
    SQLAlchemyRegistrationRepository,
    athlete_from_entry,
    contact_from_registration,
    entry_from_athlete,
)
from anmeldung.repositories.season_repository import SQLAlchemySeasonRepository

__all__ = [
    "AthleteSnapshot",
    "RegistrationSnapshot",
    "SQLAlchemyRegistrationRepository",
    "SQLAlchemySeasonRepository",
    "athlete_from_entry",
    "contact_from_registration",
    "entry_from_athlete",
]
