# ABOUTME: AI integration module for Google Gemini with search grounding.
# ABOUTME: Provides the grounded generation service and its retry policy.

from brief_enricher.ai.retry import RetryPolicy, is_quota_error
from brief_enricher.ai.service import AIService

__all__ = ["AIService", "RetryPolicy", "is_quota_error"]
