# tests/learning_profile/test_profile_engine.py
import logging

import pytest
from pydantic import ValidationError

from services.learning_profile import ProfileAnalyzer, analyze_profile
from services.learning_profile.engine import NOT_ANSWERED, format_answers, parse_answers
from services.learning_profile.models import AnalysisResult, Answer, InvalidSubmissionError
from services.learning_profile.results_generator import UNDETERMINED_ANALYSIS
from services.learning_profile.scorer import answer_weight


@pytest.fixture
def analyzer(questionnaire):
    return ProfileAnalyzer(questionnaire)

# --- Test Cases ---

def test_analyze_empty_answers(analyzer):
    result = analyzer.analyze(None, [])
    assert isinstance(result, AnalysisResult)
    assert result.primary_profile == "visualis"
    assert result.secondary_profile == "narra"
    assert result.confidence == 0
    assert result.is_hybrid is False
    assert all(score == 0.0 for score in result.scores.values())
    # Primary still resolves to a catalogued profile, so the narrative is not the undetermined one
    assert result.analysis != UNDETERMINED_ANALYSIS

def test_analyze_all_visual_answers(analyzer, answers_for_option, questionnaire):
    answers = answers_for_option(0)
    result = analyzer.analyze(questionnaire, answers)

    assert result.primary_profile == "visualis"
    assert result.secondary_profile == "narra"
    assert result.confidence == 100
    assert result.is_hybrid is False
    assert "With 100% confidence" in result.analysis
    assert result.scores["visualis"] == pytest.approx(
        sum(answer_weight(q) for q in questionnaire.question_ids())
    )
    assert result.primary_profile_details.id == "visualis"
    assert result.strengths == list(result.primary_profile_details.characteristics[:3])

@pytest.mark.parametrize("option_index, expected", [
    (1, "narra"),
    (2, "logika"),
    (3, "prax"),
    (4, "kreo"),
])
def test_analyze_single_option_picks_its_profile(analyzer, answers_for_option, option_index, expected):
    result = analyzer.analyze(None, answers_for_option(option_index))
    assert result.primary_profile == expected
    assert result.confidence == 100

def test_analyze_hybrid_result(analyzer, answer_factory):
    answers = [
        answer_factory("q7", "visualis", "narra"),
        answer_factory("q8", "visualis", "narra"),
        answer_factory("q9", "visualis", "narra"),
    ]
    result = analyzer.analyze(None, answers)
    assert result.scores["visualis"] == pytest.approx(3.5)
    assert result.scores["narra"] == pytest.approx(3.5)
    assert (result.primary_profile, result.secondary_profile) == ("visualis", "narra")
    assert result.is_hybrid is True
    assert result.confidence == 50
    assert "**hybrid**" in result.analysis

def test_analyze_bands_on_unrounded_confidence(analyzer, answer_factory):
    answers = [
        answer_factory("q1", "visualis"),
        answer_factory("q2", "visualis"),
        answer_factory("q4", "visualis"),
        answer_factory("q7", "visualis"),
        answer_factory("q3", "narra"),
        answer_factory("q5", "narra"),
        answer_factory("q6", "logika"),
    ]
    result = analyzer.analyze(None, answers)
    # Raw confidence 69.59 reports as 70 but stays in the medium band
    assert result.confidence == 70
    assert result.is_hybrid is False
    assert "complement" in result.analysis
    assert "% confidence" not in result.analysis

def test_analyze_accepts_snake_and_camel_case(analyzer):
    camel = [{"questionId": "q1", "optionId": "d", "profiles": ["prax"]}]
    snake = [{"question_id": "q1", "option_id": "d", "profiles": ["prax"]}]
    assert analyzer.analyze(None, camel).scores == analyzer.analyze(None, snake).scores

def test_analyze_is_idempotent(analyzer, answers_for_option):
    answers = answers_for_option(2)
    first = analyzer.analyze(None, answers)
    second = analyzer.analyze(None, answers)
    assert first.model_dump(exclude={"timestamp"}) == second.model_dump(exclude={"timestamp"})

def test_analyze_warns_on_unknown_question(analyzer, answer_factory, caplog):
    with caplog.at_level(logging.WARNING):
        result = analyzer.analyze(None, [answer_factory("q42", "kreo")])
    assert "q42" in caplog.text
    # Unknown questions fall back to the default section weight
    assert result.scores["kreo"] == pytest.approx(1.0)
    assert result.primary_profile == "kreo"

def test_analyze_ignores_additional_context(analyzer, answer_factory):
    answers = [answer_factory("q2", "logika")]
    plain = analyzer.analyze(None, answers)
    with_context = analyzer.analyze(None, answers, {"name": "Alex", "goals": ["exams"]})
    assert plain.model_dump(exclude={"timestamp"}) == with_context.model_dump(exclude={"timestamp"})

def test_analyze_with_questionnaire_dict(analyzer, questionnaire, answers_for_option):
    result = analyzer.analyze(questionnaire.model_dump(), answers_for_option(3))
    assert result.primary_profile == "prax"

def test_analyze_does_not_cross_check_caller_questionnaire(analyzer, questionnaire, answer_factory):
    data = questionnaire.model_dump()
    data["total_questions"] = 13
    data["sections"][0]["id"] = "warmup"
    result = analyzer.analyze(data, [answer_factory("q1", "prax")])
    assert result.primary_profile == "prax"

def test_analyze_rejects_malformed_questionnaire(analyzer, questionnaire, answer_factory):
    data = questionnaire.model_dump()
    del data["sections"]
    with pytest.raises(ValidationError):
        analyzer.analyze(data, [answer_factory("q1", "prax")])

def test_analyze_rejects_non_list(analyzer):
    with pytest.raises(InvalidSubmissionError, match="must be a list"):
        analyzer.analyze(None, {"questionId": "q1"})

def test_analyze_rejects_answer_without_question_id(analyzer):
    with pytest.raises(InvalidSubmissionError, match="position 1"):
        analyzer.analyze(None, [
            {"questionId": "q1", "optionId": "a", "profiles": ["visualis"]},
            {"optionId": "b", "profiles": ["narra"]},
        ])

def test_to_dict_uses_camel_case(analyzer, answers_for_option):
    data = analyzer.analyze(None, answers_for_option(1)).to_dict()
    for key in ("primaryProfile", "secondaryProfile", "confidence", "isHybrid", "analysis",
                "strengths", "recommendations", "studyTips", "scores", "timestamp"):
        assert key in data
    assert data["primaryProfileDetails"]["shortDescription"] == "Narrative"
    assert "contentRecommendations" in data["primaryProfileDetails"]

def test_analyze_profile_helper(answers_for_option):
    result = analyze_profile(None, answers_for_option(4))
    assert result.primary_profile == "kreo"

# Test cases for parse_answers
def test_parse_answers_keeps_models(answer_factory):
    answer = answer_factory("q1", "visualis")
    assert parse_answers([answer]) == [answer]

def test_parse_answers_defaults():
    parsed = parse_answers([{"questionId": "q3"}])
    assert parsed == [Answer(question_id="q3")]
    assert parsed[0].profiles == []

# Test cases for format_answers
def test_format_answers_in_questionnaire_order(questionnaire):
    answers = parse_answers([
        {"questionId": "q2", "optionId": "c", "profiles": ["logika"]},
        {"questionId": "q1", "optionId": "a", "profiles": ["visualis"]},
        {"questionId": "q3", "optionId": "z", "profiles": []},
    ])
    formatted = format_answers(questionnaire, answers)
    assert formatted == [
        {"question": "How do you best understand a new concept?",
         "answer": "With a diagram or video that shows it to me"},
        {"question": "What kind of content do you remember best?",
         "answer": "Data, lists and tables"},
        {"question": "What kind of explanation do you prefer?",
         "answer": NOT_ANSWERED},
    ]

def test_format_answers_skips_unanswered(questionnaire):
    assert format_answers(questionnaire, []) == []

def test_format_answers_first_answer_wins(questionnaire):
    answers = parse_answers([
        {"questionId": "q1", "optionId": "a", "profiles": ["visualis"]},
        {"questionId": "q1", "optionId": "b", "profiles": ["narra"]},
    ])
    assert format_answers(questionnaire, answers) == [
        {"question": "How do you best understand a new concept?",
         "answer": "With a diagram or video that shows it to me"},
    ]
