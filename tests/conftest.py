"""Shared fixtures for the Form 5 readiness test suite."""

from dataclasses import replace

import pytest

from readiness.records import DeliveryMode, ReadinessDocument, ReadinessRecord
from readiness.services.completion import SectionCompletionCalculator
from readiness.services.validation import SubmissionValidator


COMPLETE_FIELDS = {
    'delivery_mode': DeliveryMode.FACE_TO_FACE,
    'qualification_title': 'Occupational Certificate: Electrician',
    'saqa_id': '91761',
    'curriculum_code': '671101000',
    'credits': 360,
    'self_assessment_completed': True,
    'self_assessment_remarks': 'Self-assessment done with the academic board',
    'registration_type': 'Private Provider',
    'professional_body_registration': False,
    'training_site_address': '12 Main Road, Germiston',
    'ownership_type': 'Leased',
    'number_of_training_rooms': 4,
    'room_capacity': 25,
    'facilitator_learner_ratio': '1:20',
    'wbl_workplace_partner_name': 'Ekurhuleni Electrical Works',
    'wbl_agreement_type': 'MoU',
    'lms_name': 'Moodle',
    'internet_connectivity_method': 'Fibre',
    'isp': 'Vumatel',
    'lmis_functional': True,
    'lmis_popia_compliant': True,
    'policies_procedures_notes': 'Assessment, appeals and RPL policies approved 2024',
    'fire_extinguisher_available': True,
    'emergency_exits_marked': True,
    'accessibility_for_disabilities': False,
    'first_aid_kit_available': True,
    'ohs_representative_name': 'T. Mokoena',
    'learning_material_exists': True,
    'learning_material_coverage_percentage': 75,
    'learning_material_nqf_aligned': True,
    'knowledge_components_complete': True,
    'practical_components_complete': True,
    'learning_material_quality_verified': True,
    'facilitators': ['fac-1', 'fac-2'],
    'documents': [ReadinessDocument('doc-1', 'PRACTICAL_RESOURCES')],
}


def documents_complete(record, section_name):
    """Document scorer that treats evidence as fully uploaded"""
    return 100


@pytest.fixture
def complete_record():
    """Scenario A: every field answered, face-to-face delivery"""
    return ReadinessRecord(**COMPLETE_FIELDS)


@pytest.fixture
def empty_record():
    return ReadinessRecord(delivery_mode=DeliveryMode.FACE_TO_FACE)


@pytest.fixture
def make_record(complete_record):
    def _make(**changes):
        return replace(complete_record, **changes)
    return _make


@pytest.fixture
def calculator():
    return SectionCompletionCalculator()


@pytest.fixture
def validator():
    return SubmissionValidator()


@pytest.fixture
def documented_validator():
    """Validator whose document-backed sections score 100"""
    return SubmissionValidator(
        calculator=SectionCompletionCalculator(document_scorer=documents_complete)
    )
