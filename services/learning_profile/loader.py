import logging
from functools import lru_cache
from typing import Dict, Any, List, Optional

import yaml

from services.learning_profile.constants import PROFILE_IDS, SECTION_IDS
from services.learning_profile.core.config import settings
from services.learning_profile.models import (
    AccessibilityConfig,
    LearningProfile,
    ProfileCatalogue,
    Questionnaire,
)

logger = logging.getLogger(__name__)


class ConfigValidationError(ValueError):
    """Custom exception for configuration validation errors not covered by Pydantic."""
    pass


def _read_yaml(file_path: str) -> Dict[str, Any]:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise ConfigValidationError(f"YAML file is empty or invalid: {file_path}")
    return data


# --- Profile catalogue ---

def load_profile_catalogue_data(data: Dict[str, Any]) -> ProfileCatalogue:
    """
    Validates raw catalogue data and checks that it describes exactly the
    known profile categories, each once.
    """
    # Schema problems surface as pydantic ValidationError
    catalogue = ProfileCatalogue.model_validate(data)

    seen = set()
    for profile in catalogue.profiles:
        if profile.id in seen:
            raise ConfigValidationError(f"Duplicate profile ID found: {profile.id}")
        seen.add(profile.id)

    unknown = seen - set(PROFILE_IDS)
    if unknown:
        raise ConfigValidationError(f"Unknown profile IDs in catalogue: {sorted(unknown)}")
    missing = set(PROFILE_IDS) - seen
    if missing:
        raise ConfigValidationError(f"Profile catalogue is missing profiles: {sorted(missing)}")

    return catalogue

@lru_cache(maxsize=None)
def load_profile_catalogue(file_path: Optional[str] = None) -> ProfileCatalogue:
    file_path = file_path or settings.profiles_path
    catalogue = load_profile_catalogue_data(_read_yaml(file_path))
    logger.info(f"Loaded profile catalogue {catalogue.version} from {file_path}")
    return catalogue

def get_all_profiles() -> List[LearningProfile]:
    return list(load_profile_catalogue().profiles)

def get_profile_by_id(profile_id: Optional[str]) -> Optional[LearningProfile]:
    """Returns the catalogue entry for ``profile_id``, or None if there is none."""
    for profile in load_profile_catalogue().profiles:
        if profile.id == profile_id:
            return profile
    return None

def get_profile_ids() -> List[str]:
    return [profile.id for profile in load_profile_catalogue().profiles]


# --- Questionnaire ---

def load_questionnaire_data(data: Dict[str, Any]) -> Questionnaire:
    """
    Validates raw questionnaire data. Section IDs must be known scoring
    sections, question IDs unique across the questionnaire, option IDs unique
    within a question, and every option may only point at known profiles.
    """
    # Schema problems surface as pydantic ValidationError
    questionnaire = Questionnaire.model_validate(data)

    section_ids = set()
    question_ids = set()
    for section in questionnaire.sections:
        if section.id in section_ids:
            raise ConfigValidationError(f"Duplicate section ID found: {section.id}")
        if section.id not in SECTION_IDS:
            raise ConfigValidationError(f"Unknown section ID '{section.id}'. Expected one of {list(SECTION_IDS)}")
        section_ids.add(section.id)

        for question in section.questions:
            if question.id in question_ids:
                raise ConfigValidationError(f"Duplicate question ID found: {question.id}")
            question_ids.add(question.id)

            option_ids = set()
            for option in question.options:
                if option.id in option_ids:
                    raise ConfigValidationError(f"Duplicate option ID '{option.id}' in question '{question.id}'")
                option_ids.add(option.id)
                for profile_id in option.profiles:
                    if profile_id not in PROFILE_IDS:
                        raise ConfigValidationError(
                            f"Option '{option.id}' of question '{question.id}' references unknown profile '{profile_id}'"
                        )

    if questionnaire.total_questions != len(question_ids):
        raise ConfigValidationError(
            f"total_questions is {questionnaire.total_questions} but {len(question_ids)} questions are defined"
        )
    return questionnaire

@lru_cache(maxsize=None)
def load_questionnaire(file_path: Optional[str] = None) -> Questionnaire:
    file_path = file_path or settings.questionnaire_path
    questionnaire = load_questionnaire_data(_read_yaml(file_path))
    logger.info(f"Loaded questionnaire with {questionnaire.total_questions} questions from {file_path}")
    return questionnaire


# --- Accessibility ---

def load_accessibility_data(data: Dict[str, Any]) -> AccessibilityConfig:
    # Schema problems surface as pydantic ValidationError
    config = AccessibilityConfig.model_validate(data)

    adaptation_ids = set()
    for adaptation in config.adaptations:
        if adaptation.id in adaptation_ids:
            raise ConfigValidationError(f"Duplicate adaptation ID found: {adaptation.id}")
        adaptation_ids.add(adaptation.id)

    question_ids = set()
    for category in config.categories:
        for question in category.questions:
            if question.id in question_ids:
                raise ConfigValidationError(f"Duplicate accessibility question ID found: {question.id}")
            question_ids.add(question.id)
            if question.adaptation not in adaptation_ids:
                raise ConfigValidationError(
                    f"Accessibility question '{question.id}' references unknown adaptation '{question.adaptation}'"
                )
    return config

@lru_cache(maxsize=None)
def load_accessibility_config(file_path: Optional[str] = None) -> AccessibilityConfig:
    file_path = file_path or settings.accessibility_path
    config = load_accessibility_data(_read_yaml(file_path))
    logger.info(f"Loaded {len(config.adaptations)} accessibility adaptations from {file_path}")
    return config
