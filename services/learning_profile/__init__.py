from .engine import ProfileAnalyzer, analyze_profile
from .models import AnalysisResult, Answer
