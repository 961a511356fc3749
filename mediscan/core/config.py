import os
from pathlib import Path

from mediscan.core.env import load_env

load_env()

BASE_DIR = Path(__file__).resolve().parents[1]  # mediscan/

def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"

# Storage
DB_PATH = Path(os.getenv("MEDISCAN_DB_PATH") or str(BASE_DIR / "db" / "mediscan.db"))

# Scheduling
DEFAULT_TIME_GAP_HOURS = float(os.getenv("DEFAULT_TIME_GAP_HOURS", "4"))
REMINDER_TICK_SECONDS = int(os.getenv("REMINDER_TICK_SECONDS", "60"))
AUTO_START_SCHEDULER = _flag("AUTO_START_SCHEDULER", "true")

# Delivery
NOTIFICATION_TITLE = os.getenv("NOTIFICATION_TITLE", "Medication Reminder")
REMINDER_PUSH_URL = os.getenv("REMINDER_PUSH_URL", "").strip()
REMINDER_PUSH_TIMEOUT_S = int(os.getenv("REMINDER_PUSH_TIMEOUT_S", "10"))

# Document understanding
ANALYSIS_PROVIDER = os.getenv("ANALYSIS_PROVIDER", "ollama").strip().lower()
USE_LLM_ANALYSIS = _flag("USE_LLM_ANALYSIS", "true")

OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/api")
OLLAMA_MODEL_ANALYZE = os.getenv("OLLAMA_MODEL_ANALYZE", "llama3.2")
OLLAMA_TEMPERATURE = float(os.getenv("OLLAMA_TEMPERATURE", "0"))
OLLAMA_TIMEOUT_S = int(os.getenv("OLLAMA_TIMEOUT_S", "90"))

HF_MODEL_ANALYZE = os.getenv("HF_MODEL_ANALYZE", "meta-llama/Llama-3.1-8B-Instruct")
HF_TEMPERATURE = float(os.getenv("HF_TEMPERATURE", "0"))
HF_MAX_TOKENS = int(os.getenv("HF_MAX_TOKENS", "1024"))
HF_TIMEOUT_S = int(os.getenv("HF_TIMEOUT_S", "90"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
