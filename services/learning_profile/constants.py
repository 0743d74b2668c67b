# services/learning_profile/constants.py
from enum import Enum


class ProfileCategory(Enum):
    # Declaration order doubles as the tie-break order when scores are equal.
    VISUALIS = "visualis"
    NARRA = "narra"
    LOGIKA = "logika"
    PRAX = "prax"
    KREO = "kreo"


class QuestionSection(Enum):
    PROCESSING = "processing"
    HABITS = "habits"
    PREFERENCES = "preferences"
    MOTIVATION = "motivation"


PROFILE_IDS = tuple(category.value for category in ProfileCategory)
SECTION_IDS = tuple(section.value for section in QuestionSection)
