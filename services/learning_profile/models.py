from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Dict, Any, Optional, Tuple


class _FrozenModel(BaseModel):
    # snake_case in Python and YAML, camelCase on the wire
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# --- Profile catalogue ---

class LearningProfile(_FrozenModel):
    # Tuples: catalogue entries are cached and shared between calls
    id: str
    name: str
    emoji: str = ""
    color: str = ""
    description: str
    short_description: str
    characteristics: Tuple[str, ...] = ()
    content_recommendations: Tuple[str, ...] = ()
    learning_strategies: Tuple[str, ...] = ()
    ui_preferences: Dict[str, Any] = Field(default_factory=dict)

class ProfileCatalogue(_FrozenModel):
    version: str
    profiles: Tuple[LearningProfile, ...]


# --- Questionnaire ---

class QuestionOption(_FrozenModel):
    id: str
    text: str
    profiles: Tuple[str, ...] = ()

class Question(_FrozenModel):
    id: str
    text: str
    options: Tuple[QuestionOption, ...]

class QuestionnaireSection(_FrozenModel):
    id: str
    title: str
    questions: Tuple[Question, ...]

class Questionnaire(_FrozenModel):
    title: str
    description: str
    estimated_time: str
    total_questions: int
    sections: Tuple[QuestionnaireSection, ...]

    def question_ids(self) -> List[str]:
        return [q.id for section in self.sections for q in section.questions]


# --- Accessibility ---

class Adaptation(_FrozenModel):
    id: str
    name: str
    description: str
    css_class: Optional[str] = None
    css_vars: Dict[str, str] = Field(default_factory=dict)
    feature: Optional[str] = None

class AccessibilityQuestion(_FrozenModel):
    id: str
    text: str
    adaptation: str

class AccessibilityCategory(_FrozenModel):
    id: str
    name: str
    icon: str = ""
    questions: Tuple[AccessibilityQuestion, ...]

class AccessibilityConfig(_FrozenModel):
    title: str
    description: str
    categories: Tuple[AccessibilityCategory, ...]
    adaptations: Tuple[Adaptation, ...]


# --- Submissions and results ---

class Answer(_FrozenModel):
    question_id: str
    option_id: Optional[str] = None
    profiles: List[str] = Field(default_factory=list)

class AccessibilityAnswer(_FrozenModel):
    question_id: str
    value: Any = None

class ProfileRanking(_FrozenModel):
    """Outcome of ranking a score vector: the top two profiles and how clear the lead is."""
    primary: str
    secondary: str
    primary_score: float
    secondary_score: float
    total_score: float
    raw_confidence: float
    confidence: int
    is_hybrid: bool
    ordered: List[str]

class QuickProfile(_FrozenModel):
    """Unweighted profile from raw answer counts."""
    primary_profile: str
    secondary_profile: str
    scores: Dict[str, int]
    confidence: int
    is_hybrid: bool

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

class Narrative(_FrozenModel):
    analysis: str
    strengths: List[str]
    recommendations: List[str]
    study_tips: List[str]

class AnalysisResult(_FrozenModel):
    primary_profile: str
    secondary_profile: str
    confidence: int
    is_hybrid: bool
    analysis: str
    strengths: List[str]
    recommendations: List[str]
    study_tips: List[str]
    scores: Dict[str, float]
    primary_profile_details: Optional[LearningProfile] = None
    secondary_profile_details: Optional[LearningProfile] = None
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict using the camelCase keys the API layer returns."""
        return self.model_dump(mode="json", by_alias=True)


# Custom Error Classes
class InvalidSubmissionError(ValueError):
    """Custom exception for invalid submission data (e.g., answers that are not answer objects)."""
    pass
