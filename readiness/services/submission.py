"""
Submission helpers for request handlers

The handler owns fetching and saving the readiness row. These helpers cover the
steps in between: merging pending edits, running validation, shaping the 400
body and the section_completion_data snapshot stored with a submitted record.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from readiness.records import ReadinessRecord
from readiness.services.completion import (
    CompletionSummary,
    required_sections_for,
    round_half_up,
)
from readiness.services.validation import SubmissionValidator, ValidationResult

logger = logging.getLogger(__name__)


@dataclass
class SubmissionDecision:
    record: ReadinessRecord
    validation: ValidationResult
    overall_completion: int
    completion_snapshot: Dict[str, dict]

    @property
    def can_submit(self) -> bool:
        return self.validation.can_submit

    def error_payload(self) -> Optional[dict]:
        if self.can_submit:
            return None
        return validation_error_payload(self.validation)


def evaluate_submission(record, pending_updates: Optional[Mapping] = None,
                        validator: SubmissionValidator = None) -> SubmissionDecision:
    """
    Validate the record as it will look once the pending updates are saved.

    Args:
        record: ReadinessRecord, mapping or ORM row as currently stored
        pending_updates: field values the caller is about to write
        validator: optional SubmissionValidator with non-default settings

    Returns:
        SubmissionDecision with the merged record, the validation outcome and
        the completion snapshot to persist on success.
    """
    validator = validator or SubmissionValidator()
    merged = ReadinessRecord.from_object(record).merged_with(pending_updates)

    validation = validator.validate(merged)
    summary = validator.calculator.compute(merged)

    if not validation.can_submit:
        logger.info("Submit transition rejected: %s", validation.errors[0])

    return SubmissionDecision(
        record=merged,
        validation=validation,
        overall_completion=summary.overall_completion,
        completion_snapshot=section_completion_snapshot(summary),
    )


def validation_error_payload(result: ValidationResult) -> dict:
    """Body of the 400 response returned when a submit transition is refused"""
    return {
        'error': result.errors[0] if result.errors else 'Validation failed',
        'errors': list(result.errors),
        'warnings': list(result.warnings),
    }


def section_completion_snapshot(summary: CompletionSummary) -> Dict[str, dict]:
    """section_name -> {completed, required, missing_fields}, in section order"""
    return {
        section.section_name: {
            'completed': section.completed,
            'required': section.required,
            'missing_fields': list(section.missing_fields),
        }
        for section in summary.sections
    }


def snapshot_overall_completion(snapshot: Any) -> int:
    """Mean completion of a stored snapshot, as shown to QCTO reviewers"""
    if not isinstance(snapshot, Mapping) or not snapshot:
        return 0
    total = sum(
        (entry.get('completed') or 0) if isinstance(entry, Mapping) else 0
        for entry in snapshot.values()
    )
    return round_half_up(Decimal(str(total)) / len(snapshot))


def snapshot_missing_sections(snapshot: Any, delivery_mode) -> List[str]:
    """
    Required sections for the delivery mode that the stored snapshot does not
    show as complete. Sections absent from the snapshot count as missing.
    """
    required = required_sections_for(delivery_mode)
    if not isinstance(snapshot, Mapping) or not snapshot:
        return required

    missing = []
    for section_name in required:
        entry = snapshot.get(section_name)
        completed = entry.get('completed') if isinstance(entry, Mapping) else None
        if completed is None or completed < 100:
            missing.append(section_name)
    return missing
