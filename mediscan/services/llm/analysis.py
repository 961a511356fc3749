# mediscan/services/llm/analysis.py
from mediscan.core.config import ANALYSIS_PROVIDER, HF_MODEL_ANALYZE, OLLAMA_MODEL_ANALYZE
from mediscan.schemas.models import PrescriptionAnalysis
from mediscan.services.hf_client import hf_chat_json
from mediscan.services.llm.analysis_prompt import ANALYZE_SYSTEM_PROMPT
from mediscan.services.llm.analysis_sanitize import sanitize_analysis
from mediscan.services.llm.analysis_schema import PRESCRIPTION_SCHEMA
from mediscan.services.ollama_client import ollama_chat_json

def llm_analyze_prescription(document_text: str) -> PrescriptionAnalysis:
    user = f"DOCUMENT_TEXT:\n{document_text}\n\nAnalyze this prescription."
    if ANALYSIS_PROVIDER == "hf":
        raw = hf_chat_json(
            model=HF_MODEL_ANALYZE,
            system=ANALYZE_SYSTEM_PROMPT,
            user=user,
            schema=PRESCRIPTION_SCHEMA,
        )
    else:
        raw = ollama_chat_json(
            model=OLLAMA_MODEL_ANALYZE,
            system=ANALYZE_SYSTEM_PROMPT,
            user=user,
            schema=PRESCRIPTION_SCHEMA,
        )
    return sanitize_analysis(raw)
