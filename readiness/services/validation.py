"""
Form 5 Submission Validation Service

Decides whether a readiness record may be submitted to the QCTO.
Errors block submission, warnings are advisory only.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from django.conf import settings

from readiness.records import DeliveryMode, ReadinessRecord, is_present
from readiness.services.completion import (
    PHYSICAL_MODES,
    SectionCompletionCalculator,
    format_percentage,
)

logger = logging.getLogger(__name__)

DEFAULT_ADVISORY_COMPLETION = 80

QUALIFICATION_FIELDS = ('qualification_title', 'saqa_id', 'curriculum_code', 'credits')


@dataclass
class ValidationResult:
    can_submit: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'can_submit': self.can_submit,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
        }


def _same_message(a: str, b: str) -> bool:
    return a.rstrip('.').strip() == b.rstrip('.').strip()


class SubmissionValidator:
    """
    Layers the hard submission rules on top of section completion.

    Every rule runs, so a record collects all of its errors and warnings in one
    pass. The warnings raised by the completion calculator are appended last,
    skipping any the validator has already raised with the same wording.
    """

    def __init__(self, calculator: SectionCompletionCalculator = None,
                 minimum_coverage=None, advisory_completion=None):
        if minimum_coverage is None:
            minimum_coverage = (
                calculator.minimum_coverage if calculator is not None
                else getattr(settings, 'READINESS_MIN_LEARNING_MATERIAL_COVERAGE', 50)
            )
        if advisory_completion is None:
            advisory_completion = getattr(
                settings, 'READINESS_ADVISORY_COMPLETION', DEFAULT_ADVISORY_COMPLETION
            )
        self.minimum_coverage = minimum_coverage
        self.advisory_completion = advisory_completion
        self.calculator = calculator or SectionCompletionCalculator(minimum_coverage=minimum_coverage)

    def validate(self, record) -> ValidationResult:
        record = ReadinessRecord.from_object(record)
        completion = self.calculator.compute(record)
        errors = []
        warnings = []

        # Section 2: Qualification information
        if not all(is_present(getattr(record, name)) for name in QUALIFICATION_FIELDS):
            errors.append("Qualification information (Section 2) is incomplete. All fields are required.")

        # Section 3.1: Self-assessment
        if record.self_assessment_completed is None:
            errors.append("Self-assessment (Section 3.1) must be completed.")
        if record.self_assessment_completed is True and not is_present(record.self_assessment_remarks):
            warnings.append("Self-assessment remarks are recommended when completed.")

        # Section 3.2: Registration
        if not is_present(record.registration_type):
            errors.append("Registration type (Section 3.2) is required.")

        # Section 9: Learning material coverage
        coverage = record.learning_material_coverage_percentage
        if is_present(coverage) and coverage < self.minimum_coverage:
            errors.append(
                f"Learning material coverage is {format_percentage(coverage)}%, which is below the "
                f"{format_percentage(self.minimum_coverage)}% requirement per Form 5 Section 9"
            )

        # Section 3.3: Premises for face-to-face and blended delivery
        if record.delivery_mode in PHYSICAL_MODES:
            if not is_present(record.training_site_address) or not is_present(record.ownership_type):
                errors.append(
                    "Physical delivery readiness (Section 3.3) is incomplete. "
                    "Property & premises information is required."
                )

        # Section 4: LMS for blended delivery
        if record.delivery_mode == DeliveryMode.BLENDED and not is_present(record.lms_name):
            errors.append("LMS information (Section 4) is required for Blended delivery mode.")

        if completion.overall_completion < self.advisory_completion:
            warnings.append(
                f"Overall completion is {completion.overall_completion}%. "
                f"Consider completing more sections before submission."
            )

        if not completion.required_sections_complete:
            errors.append(
                "The following required sections are incomplete: "
                + ", ".join(completion.missing_required_sections)
            )

        for warning in completion.validation_warnings:
            if not any(_same_message(warning, existing) for existing in warnings):
                warnings.append(warning)

        result = ValidationResult(can_submit=not errors, errors=errors, warnings=warnings)

        if result.can_submit:
            logger.debug("Readiness record can be submitted (%s warnings)", len(warnings))
        else:
            logger.info(
                "Readiness submission blocked: %s errors, %s warnings",
                len(errors), len(warnings)
            )

        return result


def validate_readiness_for_submission(record) -> ValidationResult:
    """Validate a record with the project's default thresholds and document scorer"""
    return SubmissionValidator().validate(record)
