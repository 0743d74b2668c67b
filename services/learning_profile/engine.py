import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .loader import get_profile_by_id, load_questionnaire
from .models import AnalysisResult, Answer, InvalidSubmissionError, Questionnaire
from .results_generator import describe
from .scorer import compute_scores, rank_profiles

logger = logging.getLogger(__name__)

AnswerInput = Union[Answer, Dict[str, Any]]
QuestionnaireInput = Union[Questionnaire, Dict[str, Any], None]

NOT_ANSWERED = "Not answered"


def parse_answers(answers: Any) -> List[Answer]:
    """Coerces raw answer dicts into Answer models, rejecting malformed submissions."""
    if not isinstance(answers, (list, tuple)):
        raise InvalidSubmissionError(f"Answers must be a list, got {type(answers).__name__}")

    parsed = []
    for index, answer in enumerate(answers):
        if isinstance(answer, Answer):
            parsed.append(answer)
            continue
        try:
            parsed.append(Answer.model_validate(answer))
        except ValidationError as e:
            raise InvalidSubmissionError(f"Invalid answer at position {index}: {e}") from e
    return parsed


def format_answers(questionnaire: Questionnaire, answers: List[Answer]) -> List[Dict[str, str]]:
    """
    Pairs each answered question's text with the chosen option's text, in
    questionnaire order. Used as context for language-model based analysis.
    """
    # First answer to a question wins
    by_question: Dict[str, Answer] = {}
    for answer in answers:
        by_question.setdefault(answer.question_id, answer)

    formatted = []
    for section in questionnaire.sections:
        for question in section.questions:
            answer = by_question.get(question.id)
            if answer is None:
                continue
            option = next((o for o in question.options if o.id == answer.option_id), None)
            formatted.append({
                "question": question.text,
                "answer": option.text if option else NOT_ANSWERED,
            })
    return formatted


class ProfileAnalyzer:
    """
    Determines a learning profile from questionnaire answers.

    Holds no per-call state; one instance can serve concurrent callers.
    """
    def __init__(self, questionnaire: Optional[Questionnaire] = None):
        self.questionnaire = questionnaire or load_questionnaire()

    def _resolve_questionnaire(self, questionnaire: QuestionnaireInput) -> Questionnaire:
        if questionnaire is None:
            return self.questionnaire
        if isinstance(questionnaire, Questionnaire):
            return questionnaire
        # Schema check only; id cross-checks are for the bundled assets
        return Questionnaire.model_validate(questionnaire)

    def analyze(
        self,
        questionnaire: QuestionnaireInput,
        answers: List[AnswerInput],
        additional_context: Optional[Dict[str, Any]] = None
    ) -> AnalysisResult:
        """
        Scores the answers, ranks the profiles and builds the narrative.

        Args:
            questionnaire: Questionnaire the answers belong to (model, raw dict,
                           or None for the bundled one). Only used to flag
                           answers to questions it does not contain.
            answers: Answer models or dicts with questionId, optionId and profiles.
            additional_context: Free-form user metadata (name, goals, experience).
                                Not used by the scoring.

        Returns:
            A fresh AnalysisResult.
        """
        questionnaire = self._resolve_questionnaire(questionnaire)
        parsed = parse_answers(answers)

        known_questions = set(questionnaire.question_ids())
        for answer in parsed:
            if answer.question_id not in known_questions:
                logger.warning(f"Answer to unknown question '{answer.question_id}' scored with default weight")
        if additional_context:
            logger.debug(f"Ignoring additional context keys: {sorted(additional_context)}")

        scores = compute_scores(parsed)
        ranking = rank_profiles(scores, len(parsed))
        narrative = describe(ranking.primary, ranking.secondary, ranking.is_hybrid, ranking.raw_confidence)

        logger.info(
            f"Analyzed {len(parsed)} answers: primary={ranking.primary} secondary={ranking.secondary} "
            f"confidence={ranking.confidence} hybrid={ranking.is_hybrid}"
        )
        return AnalysisResult(
            primary_profile=ranking.primary,
            secondary_profile=ranking.secondary,
            confidence=ranking.confidence,
            is_hybrid=ranking.is_hybrid,
            analysis=narrative.analysis,
            strengths=narrative.strengths,
            recommendations=narrative.recommendations,
            study_tips=narrative.study_tips,
            scores=scores,
            primary_profile_details=get_profile_by_id(ranking.primary),
            secondary_profile_details=get_profile_by_id(ranking.secondary),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )


def analyze_profile(
    questionnaire: QuestionnaireInput,
    answers: List[AnswerInput],
    additional_context: Optional[Dict[str, Any]] = None
) -> AnalysisResult:
    return ProfileAnalyzer().analyze(questionnaire, answers, additional_context)


# Example Usage (for testing purposes)
if __name__ == "__main__":
    import json
    from .core import settings, setup_logging

    setup_logging(settings.log_level)
    analyzer = ProfileAnalyzer()

    # Pick option 'a' for the processing questions and 'd' everywhere else
    simulated_answers = []
    for section in analyzer.questionnaire.sections:
        for question in section.questions:
            option = question.options[0] if section.id == 'processing' else question.options[3]
            simulated_answers.append(
                {"questionId": question.id, "optionId": option.id, "profiles": option.profiles}
            )

    result = analyzer.analyze(None, simulated_answers)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
