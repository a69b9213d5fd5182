"""
Readiness Services Package

Provides the Form 5 readiness engine:
- Section completion scoring per delivery mode
- Submission validation (blocking errors and advisory warnings)
- Submission helpers for request handlers
"""

from readiness.services.completion import (
    SectionCompletionCalculator,
    CompletionSummary,
    SectionResult,
    calculate_section_completion,
    required_sections_for,
)
from readiness.services.validation import (
    SubmissionValidator,
    ValidationResult,
    validate_readiness_for_submission,
)
from readiness.services.submission import (
    evaluate_submission,
    section_completion_snapshot,
    validation_error_payload,
)

__all__ = [
    'SectionCompletionCalculator',
    'CompletionSummary',
    'SectionResult',
    'calculate_section_completion',
    'required_sections_for',
    'SubmissionValidator',
    'ValidationResult',
    'validate_readiness_for_submission',
    'evaluate_submission',
    'section_completion_snapshot',
    'validation_error_payload',
]
