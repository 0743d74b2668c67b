# services/learning_profile/results_generator.py
# Builds the descriptive text of a learning profile result from the catalogue.

import logging
from typing import List, Optional

from .loader import get_profile_by_id
from .models import LearningProfile, Narrative
from .scorer import round_half_up

logger = logging.getLogger(__name__)

# --- Narrative templates ---

HIGH_CONFIDENCE_THRESHOLD = 70
MEDIUM_CONFIDENCE_THRESHOLD = 50

# How each profile learns, phrased to follow "you learn effectively both ..."
PROFILE_METHODS = {
    'visualis': 'with images and visual representations',
    'narra': 'with stories and contextualised examples',
    'logika': 'with ordered, logical structures',
    'prax': 'by practising and experimenting directly',
    'kreo': 'by exploring and making new connections',
}

UNDETERMINED_ANALYSIS = "The learning profile could not be determined."

GENERIC_STRENGTHS = [
    'Ability to adapt to different methods',
    'Flexible and versatile learning',
    'Potential to combine several styles',
]

GENERIC_RECOMMENDATIONS = [
    'Varied multimedia content',
    'Practical exercises',
    'Materials adapted to your pace',
]

GENERIC_STUDY_TIP = 'Experiment with different methods and find out what works best for each topic'
MIN_STUDY_TIPS = 3

DEFAULT_WELCOME = "Hi! 👋 I'm your personalised learning assistant. How can I help you today?"
FALLBACK_WELCOME_PROFILE = 'narra'

WELCOME_MESSAGES = {
    'visualis': (
        "Hi! 👋🎨 I'm your assistant, adapted to your **Visualis** profile.\n\n"
        "I love explaining things with images, diagrams and visual examples. 📊\n\n"
        "What would you like to learn today? I can sketch outlines, explain concepts with "
        "visual analogies, or help you build mind maps! 🖼️"
    ),
    'narra': (
        "Hi! 👋📖 I'm your assistant, adapted to your **Narra** profile.\n\n"
        "I like explaining things as if they were stories, with context and real-life examples.\n\n"
        "What would you like to learn? I'll tell you the story behind each concept and how it "
        "applies to the real world! 🌍"
    ),
    'logika': (
        "Hi! 👋🔢 I'm your assistant, adapted to your **Logika** profile.\n\n"
        "I specialise in structured, step-by-step explanations with clear definitions.\n\n"
        "What would you like to learn? I'll give you:\n"
        "1. Precise definitions\n"
        "2. Ordered steps\n"
        "3. Comparison tables when needed"
    ),
    'prax': (
        "Hi! 👋🔧 I'm your assistant, adapted to your **Prax** profile.\n\n"
        "No time wasted on unnecessary theory here - straight to practice!\n\n"
        "What do you want to learn? I'll suggest exercises, practical examples and challenges "
        "to put it into action right away! 💪"
    ),
    'kreo': (
        "Hi! 👋💡 I'm your assistant, adapted to your **Kreo** profile.\n\n"
        "I love exploring ideas, making unexpected connections and thinking creatively!\n\n"
        "What would you like to discover today? We can explore the topic from different angles "
        "and see where curiosity takes us! ✨"
    ),
}


def get_profile_method(profile_id: str) -> str:
    return PROFILE_METHODS.get(profile_id, '')


def _profile_name(profile: Optional[LearningProfile]) -> str:
    return profile.name if profile else 'another profile'


# --- Generators ---

def generate_analysis(
    primary: Optional[LearningProfile],
    secondary: Optional[LearningProfile],
    is_hybrid: bool,
    confidence: float
) -> str:
    """
    Personalised analysis paragraph.

    Hybrid results name both profiles and how each learns. Otherwise the
    primary profile is described and the closing sentence depends on the
    confidence band: high (>=70), medium (50-69, secondary mentioned as a
    complement) or low (versatile, primary only slightly ahead).
    Bands are chosen on the unrounded confidence; the printed percentage
    is rounded half-up.
    """
    if not primary:
        return UNDETERMINED_ANALYSIS

    if is_hybrid:
        secondary_id = secondary.id if secondary else ''
        return (
            f"You have a **hybrid** learning profile that combines traits of **{primary.name}** "
            f"and **{_profile_name(secondary)}**. "
            f"This means you learn effectively both {get_profile_method(primary.id)} "
            f"and {get_profile_method(secondary_id)}. "
            f"This combination gives you the flexibility to adapt to different kinds of content "
            f"and learning situations."
        )

    analysis = f"Your predominant learning profile is **{primary.name}** ({primary.short_description}). "
    analysis += f"{primary.description} "

    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        analysis += f"With {round_half_up(confidence)}% confidence, your answers show a clear preference for this learning style."
    elif confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
        analysis += (
            f"You also show some traits of the **{_profile_name(secondary)}** profile, "
            f"which could complement your main style."
        )
    else:
        analysis += (
            f"You have a versatile profile with tendencies towards several styles, "
            f"with {primary.name} slightly predominant."
        )
    return analysis


def generate_strengths(
    primary: Optional[LearningProfile],
    secondary: Optional[LearningProfile],
    is_hybrid: bool
) -> List[str]:
    strengths: List[str] = []

    if primary:
        strengths.extend(primary.characteristics[:2])

    if is_hybrid and secondary and secondary.characteristics:
        strengths.append(secondary.characteristics[0])
    elif primary and len(primary.characteristics) > 2:
        strengths.append(primary.characteristics[2])

    return strengths if strengths else list(GENERIC_STRENGTHS)


def generate_recommendations(
    primary: Optional[LearningProfile],
    secondary: Optional[LearningProfile],
    is_hybrid: bool
) -> List[str]:
    recommendations: List[str] = []

    if primary:
        recommendations.extend(primary.content_recommendations[:2 if is_hybrid else 3])

    if is_hybrid and secondary and secondary.content_recommendations:
        recommendations.append(secondary.content_recommendations[0])

    return recommendations if recommendations else list(GENERIC_RECOMMENDATIONS)


def generate_study_tips(
    primary: Optional[LearningProfile],
    secondary: Optional[LearningProfile],
    is_hybrid: bool
) -> List[str]:
    tips: List[str] = []

    if primary:
        tips.extend(primary.learning_strategies[:2 if is_hybrid else 3])

    if is_hybrid and secondary and secondary.learning_strategies:
        tips.append(secondary.learning_strategies[0])

    if len(tips) < MIN_STUDY_TIPS:
        tips.append(GENERIC_STUDY_TIP)

    return tips


def describe(primary_id: str, secondary_id: str, is_hybrid: bool, confidence: float) -> Narrative:
    """Assembles analysis, strengths, recommendations and study tips for a ranking."""
    primary = get_profile_by_id(primary_id)
    secondary = get_profile_by_id(secondary_id)
    if primary is None:
        logger.warning(f"Primary profile '{primary_id}' not found in catalogue")

    return Narrative(
        analysis=generate_analysis(primary, secondary, is_hybrid, confidence),
        strengths=generate_strengths(primary, secondary, is_hybrid),
        recommendations=generate_recommendations(primary, secondary, is_hybrid),
        study_tips=generate_study_tips(primary, secondary, is_hybrid),
    )


def generate_welcome_message(profile_id: Optional[str]) -> str:
    """
    Chat greeting adapted to a profile. Unknown profiles get a generic
    greeting; a catalogued profile without its own template gets Narra's.
    """
    if get_profile_by_id(profile_id) is None:
        return DEFAULT_WELCOME
    return WELCOME_MESSAGES.get(profile_id, WELCOME_MESSAGES[FALLBACK_WELCOME_PROFILE])
