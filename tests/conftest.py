import pytest

from services.learning_profile.loader import load_questionnaire
from services.learning_profile.models import Answer


def make_answer(question_id: str, *profiles: str, option_id: str = "a") -> Answer:
    """Builds an Answer naming the given profiles."""
    return Answer(question_id=question_id, option_id=option_id, profiles=list(profiles))


@pytest.fixture(scope="session")
def questionnaire():
    """The bundled questionnaire."""
    return load_questionnaire()


@pytest.fixture
def answer_factory():
    return make_answer


@pytest.fixture
def answers_for_option(questionnaire):
    """Returns a builder answering every question with the option at the given index."""
    def _build(option_index: int):
        answers = []
        for section in questionnaire.sections:
            for question in section.questions:
                option = question.options[option_index]
                answers.append(
                    {"questionId": question.id, "optionId": option.id, "profiles": list(option.profiles)}
                )
        return answers
    return _build
