"""
Scoring-engine integration: rubric prompt, engine client and reply validation.
"""

from backend_trustlend.ai_engine.inference_client import extract_json_object, request_decision
from backend_trustlend.ai_engine.prompt_builder import RUBRIC_INSTRUCTION, build_request_payload
from backend_trustlend.ai_engine.response_parser import EngineDecision, parse_engine_decision

__all__ = [
    "RUBRIC_INSTRUCTION",
    "EngineDecision",
    "build_request_payload",
    "extract_json_object",
    "parse_engine_decision",
    "request_decision",
]
