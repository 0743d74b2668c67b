# services/learning_profile/accessibility.py
# Turns yes/no accessibility answers into the interface adaptations to enable.

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .loader import load_accessibility_config
from .models import AccessibilityAnswer, AccessibilityConfig, Adaptation

logger = logging.getLogger(__name__)


def process_accessibility_answers(
    answers: Iterable[Union[AccessibilityAnswer, Dict[str, Any]]],
    config: Optional[AccessibilityConfig] = None
) -> List[Adaptation]:
    """
    Returns the adaptations switched on by answers whose value is exactly True,
    each adaptation once, in the order first requested.
    """
    config = config or load_accessibility_config()
    adaptations = {adaptation.id: adaptation for adaptation in config.adaptations}
    question_adaptations = {
        question.id: question.adaptation
        for category in config.categories
        for question in category.questions
    }

    active: List[Adaptation] = []
    for raw_answer in answers:
        answer = raw_answer if isinstance(raw_answer, AccessibilityAnswer) else AccessibilityAnswer.model_validate(raw_answer)
        if answer.value is not True:
            continue

        adaptation_id = question_adaptations.get(answer.question_id)
        if adaptation_id is None:
            logger.debug(f"Ignoring answer to unknown accessibility question '{answer.question_id}'")
            continue

        adaptation = adaptations.get(adaptation_id)
        if adaptation and adaptation not in active:
            active.append(adaptation)

    return active
