from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"


class EngineSettings(BaseSettings):
    log_level: str = "INFO"
    profiles_path: str = str(ASSETS_DIR / "profiles.yml")
    questionnaire_path: str = str(ASSETS_DIR / "questionnaire.yml")
    accessibility_path: str = str(ASSETS_DIR / "accessibility.yml")

    model_config = SettingsConfigDict(env_prefix='LEARNING_PROFILE_')

# Instantiate settings
settings = EngineSettings()
