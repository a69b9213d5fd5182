"""
Form 5 Section Completion Service

Scores a readiness record section by section:
- Each section's completion is the share of its fields that have been answered
- Sections 3.3, 4 and 5 only apply to certain delivery modes
- Document-backed sections (3.5 and 5) are delegated to a document scorer
- Overall completion is the unweighted mean over the applicable sections
"""
import logging
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Tuple

from django.conf import settings
from django.utils.module_loading import import_string

from readiness.records import DeliveryMode, ReadinessRecord, is_present

logger = logging.getLogger(__name__)

DEFAULT_MIN_COVERAGE = 50

# Scoring rules
FIELDS = 'FIELDS'
DOCUMENTS = 'DOCUMENTS'

PHYSICAL_MODES = frozenset([DeliveryMode.FACE_TO_FACE.value, DeliveryMode.BLENDED.value])

SELF_ASSESSMENT_REMARKS_WARNING = 'Self-assessment remarks are recommended when completed'


@dataclass(frozen=True)
class SectionRule:
    section_name: str
    title: str
    delivery_modes: Optional[frozenset]  # None: every delivery mode
    fields: Tuple[str, ...] = ()
    missing_fields: Tuple[str, ...] = ()
    scoring: str = FIELDS
    required: bool = True

    def applies_to(self, delivery_mode) -> bool:
        if self.delivery_modes is None:
            return True
        return delivery_mode in self.delivery_modes


# Canonical Form 5 order
SECTION_RULES = (
    SectionRule(
        'section_2_qualification', 'Section 2: Qualification Information', None,
        fields=('qualification_title', 'saqa_id', 'curriculum_code', 'credits', 'delivery_mode'),
        # delivery_mode is the discriminator, never reported as missing
        missing_fields=('qualification_title', 'saqa_id', 'curriculum_code', 'credits'),
    ),
    SectionRule(
        'section_3_1_self_assessment', 'Section 3.1: Self-Assessment', None,
        fields=('self_assessment_completed',),
        missing_fields=('self_assessment_completed',),
    ),
    SectionRule(
        'section_3_2_registration', 'Section 3.2: Registration & Legal Compliance', None,
        fields=('registration_type', 'professional_body_registration'),
        missing_fields=('registration_type', 'professional_body_registration'),
    ),
    SectionRule(
        'section_3_3_physical_delivery', 'Section 3.3: Face-to-Face / Physical Delivery', PHYSICAL_MODES,
        fields=('training_site_address', 'ownership_type', 'number_of_training_rooms', 'facilitator_learner_ratio'),
        missing_fields=('training_site_address', 'ownership_type'),
    ),
    SectionRule(
        'section_3_4_knowledge_resources', 'Section 3.4: Physical Resources - Knowledge Module', None,
        fields=('number_of_training_rooms', 'room_capacity', 'facilitator_learner_ratio'),
    ),
    SectionRule(
        'section_3_5_practical_resources', 'Section 3.5: Practical Module Resources', None,
        scoring=DOCUMENTS,
    ),
    SectionRule(
        'section_3_6_wbl', 'Section 3.6: Workplace-Based Learning', None,
        fields=('wbl_workplace_partner_name', 'wbl_agreement_type'),
    ),
    SectionRule(
        'section_4_hybrid_blended', 'Section 4: Hybrid / Blended Delivery',
        frozenset([DeliveryMode.BLENDED.value]),
        fields=('lms_name', 'internet_connectivity_method', 'isp'),
    ),
    SectionRule(
        'section_5_mobile_unit', 'Section 5: Mobile Unit',
        frozenset([DeliveryMode.MOBILE.value]),
        scoring=DOCUMENTS,
    ),
    SectionRule(
        'section_6_lmis', 'Section 6: LMIS', None,
        fields=('lmis_functional', 'lmis_popia_compliant'),
    ),
    SectionRule(
        'section_7_policies', 'Section 7: Policies & Procedures', None,
        fields=('policies_procedures_notes',),
        missing_fields=('policies_procedures_notes',),
    ),
    SectionRule(
        'section_8_ohs', 'Section 8: Occupational Health & Safety', None,
        fields=(
            'fire_extinguisher_available', 'emergency_exits_marked',
            'accessibility_for_disabilities', 'first_aid_kit_available', 'ohs_representative_name',
        ),
    ),
    SectionRule(
        'section_9_learning_material', 'Section 9: Learning Material', None,
        fields=(
            'learning_material_exists', 'learning_material_coverage_percentage',
            'learning_material_nqf_aligned', 'knowledge_components_complete',
            'practical_components_complete', 'learning_material_quality_verified',
        ),
    ),
)

SECTION_TITLES = {rule.section_name: rule.title for rule in SECTION_RULES}


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)"""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def format_percentage(value) -> str:
    """Render 35, 35.0 and Decimal('35.00') all as '35'"""
    number = Decimal(str(value))
    if number == number.to_integral_value():
        return str(int(number))
    return str(number.normalize())


def sections_for(delivery_mode) -> List[SectionRule]:
    return [rule for rule in SECTION_RULES if rule.applies_to(delivery_mode)]


def required_sections_for(delivery_mode) -> List[str]:
    """Ordered names of the required sections for a delivery mode"""
    return [rule.section_name for rule in sections_for(delivery_mode) if rule.required]


def no_document_completion(record, section_name) -> int:
    """
    Default scorer for the document-backed sections.

    Practical resources and mobile unit evidence is uploaded as documents and
    there is no agreed formula for turning those into a percentage yet, so these
    sections always score 0 until a scorer is configured.
    """
    return 0


def get_document_scorer() -> Callable:
    path = getattr(settings, 'READINESS_DOCUMENT_SCORER', None)
    if path:
        return import_string(path)
    return no_document_completion


@dataclass
class SectionResult:
    section_name: str
    completed: int
    required: bool = True
    missing_fields: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CompletionSummary:
    sections: List[SectionResult]
    overall_completion: int
    required_sections_complete: bool
    missing_required_sections: List[str]
    validation_warnings: List[str]

    def get_section(self, section_name) -> Optional[SectionResult]:
        for section in self.sections:
            if section.section_name == section_name:
                return section
        return None

    def to_dict(self) -> dict:
        return {
            'sections': [section.to_dict() for section in self.sections],
            'overall_completion': self.overall_completion,
            'required_sections_complete': self.required_sections_complete,
            'missing_required_sections': list(self.missing_required_sections),
            'validation_warnings': list(self.validation_warnings),
        }


class SectionCompletionCalculator:
    """
    Computes per-section and overall completion for a Form 5 readiness record.

    Stateless: one instance can be shared between requests. The document scorer
    and the learning material coverage threshold are fixed at construction.
    """

    def __init__(self, document_scorer: Callable = None, minimum_coverage=None):
        self.document_scorer = document_scorer or get_document_scorer()
        if minimum_coverage is None:
            minimum_coverage = getattr(
                settings, 'READINESS_MIN_LEARNING_MATERIAL_COVERAGE', DEFAULT_MIN_COVERAGE
            )
        self.minimum_coverage = minimum_coverage

    def compute(self, record) -> CompletionSummary:
        record = ReadinessRecord.from_object(record)

        sections = [
            self._score_section(rule, record)
            for rule in sections_for(record.delivery_mode)
        ]

        if sections:
            overall = round_half_up(
                Decimal(sum(s.completed for s in sections)) / len(sections)
            )
        else:
            overall = 0

        required = [s for s in sections if s.required]
        missing_required = [s.section_name for s in required if s.completed < 100]
        warnings = [w for s in sections for w in s.validation_warnings]

        logger.debug(
            "Readiness completion %s%% (%s): missing %s",
            overall, record.delivery_mode, ', '.join(missing_required) or 'none'
        )

        return CompletionSummary(
            sections=sections,
            overall_completion=overall,
            required_sections_complete=not missing_required,
            missing_required_sections=missing_required,
            validation_warnings=warnings,
        )

    def _score_section(self, rule: SectionRule, record: ReadinessRecord) -> SectionResult:
        if rule.scoring == DOCUMENTS:
            completed = self._document_completion(rule, record)
        else:
            answered = sum(1 for name in rule.fields if is_present(getattr(record, name)))
            completed = round_half_up(Decimal(answered * 100) / len(rule.fields))

        return SectionResult(
            section_name=rule.section_name,
            completed=completed,
            required=rule.required,
            missing_fields=[
                name for name in rule.missing_fields
                if not is_present(getattr(record, name))
            ],
            validation_warnings=self._section_warnings(rule, record),
        )

    def _document_completion(self, rule: SectionRule, record: ReadinessRecord) -> int:
        score = self.document_scorer(record, rule.section_name) or 0
        return max(0, min(100, round_half_up(score)))

    def _section_warnings(self, rule: SectionRule, record: ReadinessRecord) -> List[str]:
        if rule.section_name == 'section_3_1_self_assessment':
            if record.self_assessment_completed is True and not is_present(record.self_assessment_remarks):
                return [SELF_ASSESSMENT_REMARKS_WARNING]

        elif rule.section_name == 'section_9_learning_material':
            coverage = record.learning_material_coverage_percentage
            if is_present(coverage) and coverage < self.minimum_coverage:
                return [
                    f"Learning material coverage must be ≥{format_percentage(self.minimum_coverage)}% "
                    f"per Form 5 Section 9"
                ]

        return []


def calculate_section_completion(record) -> CompletionSummary:
    """Score a record with the project's default calculator settings"""
    return SectionCompletionCalculator().compute(record)


def section_completion_breakdown(summary: CompletionSummary) -> Dict[str, dict]:
    """Per-section results keyed by section name, with display titles"""
    return {
        section.section_name: {
            'title': SECTION_TITLES.get(section.section_name, section.section_name),
            **section.to_dict(),
        }
        for section in summary.sections
    }
