"""データモデルパッケージ"""

from anmeldung.models.athlete import Athlete
from anmeldung.models.base import Base
from anmeldung.models.entry import (
    ContactErrorState,
    ContactInfo,
    EntryErrorState,
    ParticipantEntry,
)
from anmeldung.models.registration import Registration
from anmeldung.models.season import Season

__all__ = [
    "Athlete",
    "Base",
    "ContactErrorState",
    "ContactInfo",
    "EntryErrorState",
    "ParticipantEntry",
    "Registration",
    "Season",
]
