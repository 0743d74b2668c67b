# Core components: config, logging
from .config import settings, EngineSettings
from .logging_config import setup_logging
