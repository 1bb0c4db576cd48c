"""
AI Services

Provider-fallback AI client, prompt library and the academic AI features.
"""

from .client import AIClient, get_ai_client
from .prompt_loader import PromptLibrary, get_prompt_library
from .services import AcademicAIService, AIServiceError, get_ai_service, parse_generated_questions

__all__ = [
    "AIClient",
    "get_ai_client",
    "PromptLibrary",
    "get_prompt_library",
    "AcademicAIService",
    "AIServiceError",
    "get_ai_service",
    "parse_generated_questions",
]
