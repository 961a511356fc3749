# mediscan/services/llm/analysis_schema.py

PRESCRIPTION_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "is_document_valid": {"type": "boolean"},
        "document_type": {"type": "string", "enum": ["PRESCRIPTION", "OTHER"]},
        "disease": {"type": "string"},
        "medicines": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string"},
                    "dosage": {"type": "string"},
                    "frequency": {"type": "string"},
                    "timing": {"type": "string"},
                    "reason": {"type": "string"},
                    "time_gap_hours": {"type": "number"},
                },
                "required": ["name", "dosage", "frequency", "timing", "time_gap_hours"],
            },
        },
    },
    "required": ["is_document_valid", "document_type", "disease", "medicines"],
}
