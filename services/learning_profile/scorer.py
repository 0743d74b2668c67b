# services/learning_profile/scorer.py
# Weighted scoring, ranking and confidence for the learning profile questionnaire.

import logging
import math
from typing import Dict, Iterable, List

from .constants import PROFILE_IDS, QuestionSection
from .models import Answer, ProfileRanking, QuickProfile

logger = logging.getLogger(__name__)

# --- Constants ---

SECTION_WEIGHTS = {
    QuestionSection.PROCESSING.value: 1.5,   # How information is processed says the most
    QuestionSection.HABITS.value: 1.2,
    QuestionSection.PREFERENCES.value: 1.0,
    QuestionSection.MOTIVATION.value: 1.3,
}
DEFAULT_SECTION = QuestionSection.PREFERENCES.value
DEFAULT_SECTION_WEIGHT = 1.0

QUESTION_SECTIONS = {
    'q1': 'processing', 'q2': 'processing', 'q3': 'processing',
    'q4': 'habits', 'q5': 'habits', 'q6': 'habits',
    'q7': 'preferences', 'q8': 'preferences', 'q9': 'preferences',
    'q10': 'motivation', 'q11': 'motivation', 'q12': 'motivation',
}

# Questions that ask most directly about learning style
KEY_QUESTIONS = frozenset({'q1', 'q3', 'q8'})
KEY_QUESTION_BONUS = 0.5

MIN_CONFIDENCE = 30.0
MAX_CONFIDENCE = 100.0
DIFFERENCE_FACTOR_WEIGHT = 30.0

HYBRID_GAP_RATIO = 0.2
HYBRID_SUPPORT_RATIO = 0.3

QUICK_HYBRID_MAX_GAP = 2

# --- Scoring Functions ---

def answer_weight(question_id: str) -> float:
    """Increment each profile named by an answer to ``question_id`` receives."""
    section = QUESTION_SECTIONS.get(question_id, DEFAULT_SECTION)
    section_weight = SECTION_WEIGHTS.get(section, DEFAULT_SECTION_WEIGHT)
    key_bonus = KEY_QUESTION_BONUS if question_id in KEY_QUESTIONS else 0.0
    return section_weight + key_bonus


def empty_scores() -> Dict[str, float]:
    return {profile_id: 0.0 for profile_id in PROFILE_IDS}


def compute_scores(answers: Iterable[Answer]) -> Dict[str, float]:
    """
    Calculates the weighted score of every profile from questionnaire answers.

    Each answer adds ``section weight + key bonus`` to every known profile it
    names. An answer naming several profiles gives each of them the full
    increment. Profiles outside the fixed set are ignored.
    """
    scores = empty_scores()

    for answer in answers:
        if not answer.profiles:
            continue

        increment = answer_weight(answer.question_id)
        for profile_id in answer.profiles:
            if profile_id in scores:
                scores[profile_id] += increment
            else:
                logger.debug(f"Ignoring unknown profile '{profile_id}' in answer to '{answer.question_id}'")

    return scores


def order_profiles(scores: Dict[str, float]) -> List[str]:
    """Profile IDs by descending score; equal scores keep declaration order."""
    priority = {profile_id: index for index, profile_id in enumerate(PROFILE_IDS)}
    return sorted(
        PROFILE_IDS,
        key=lambda profile_id: (-scores.get(profile_id, 0.0), priority[profile_id])
    )


def calculate_confidence(primary_score: float, secondary_score: float, total_score: float) -> float:
    """
    Confidence (0-100) that the primary profile is the right one.

    Combines how much of the total the primary holds with how far it leads
    the secondary, floored at 30 whenever anything was scored.
    """
    if total_score == 0:
        return 0.0

    dominance_factor = (primary_score / total_score) * 100
    difference_factor = ((primary_score - secondary_score) / primary_score) * DIFFERENCE_FACTOR_WEIGHT

    confidence = min(MAX_CONFIDENCE, dominance_factor + difference_factor)
    return max(MIN_CONFIDENCE, confidence)


def is_hybrid_profile(primary_score: float, secondary_score: float, num_answers: int) -> bool:
    """
    Hybrid policy: the runner-up must be close to the leader and backed by
    enough answers.

    Note the support check compares a weighted score against a raw answer
    count; thresholds live in HYBRID_GAP_RATIO and HYBRID_SUPPORT_RATIO.
    """
    if primary_score == 0 or secondary_score == 0:
        return False

    difference = primary_score - secondary_score
    threshold = primary_score * HYBRID_GAP_RATIO

    return difference <= threshold and secondary_score >= num_answers * HYBRID_SUPPORT_RATIO


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rank_profiles(scores: Dict[str, float], num_answers: int) -> ProfileRanking:
    """Ranks the score vector and classifies the result as clear or hybrid."""
    ordered = order_profiles(scores)
    primary, secondary = ordered[0], ordered[1]
    primary_score = scores.get(primary, 0.0)
    secondary_score = scores.get(secondary, 0.0)
    total_score = sum(scores.get(profile_id, 0.0) for profile_id in PROFILE_IDS)

    confidence = calculate_confidence(primary_score, secondary_score, total_score)
    hybrid = is_hybrid_profile(primary_score, secondary_score, num_answers)

    logger.debug(
        f"Ranked profiles {ordered} (total={total_score}, confidence={confidence:.2f}, hybrid={hybrid})"
    )
    return ProfileRanking(
        primary=primary,
        secondary=secondary,
        primary_score=primary_score,
        secondary_score=secondary_score,
        total_score=total_score,
        raw_confidence=confidence,
        confidence=round_half_up(confidence),
        is_hybrid=hybrid,
        ordered=ordered,
    )


def calculate_quick_profile(answers: List[Answer]) -> QuickProfile:
    """
    Unweighted profile: one point per profile occurrence, no section weights
    or key bonus. Gives a coarse answer without the narrative.
    """
    scores: Dict[str, int] = {profile_id: 0 for profile_id in PROFILE_IDS}
    for answer in answers:
        for profile_id in answer.profiles:
            if profile_id in scores:
                scores[profile_id] += 1

    ordered = order_profiles(scores)
    primary_score = scores[ordered[0]]
    secondary_score = scores[ordered[1]]

    is_hybrid = (
        primary_score > 0 and secondary_score > 0
        and (primary_score - secondary_score) <= QUICK_HYBRID_MAX_GAP
    )
    confidence = round_half_up(primary_score / len(answers) * 100) if answers else 0

    return QuickProfile(
        primary_profile=ordered[0],
        secondary_profile=ordered[1],
        scores=scores,
        confidence=confidence,
        is_hybrid=is_hybrid,
    )
