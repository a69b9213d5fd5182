"""
Form 5 readiness record
The single data shape consumed by the completion and submission engine
"""
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from typing import Any, List, Optional, Union

from django.db import models


class DeliveryMode(models.TextChoices):
    FACE_TO_FACE = 'FACE_TO_FACE', 'Face-to-Face'
    BLENDED = 'BLENDED', 'Blended'
    MOBILE = 'MOBILE', 'Mobile Unit'


def is_present(value) -> bool:
    """
    A field counts as answered once it is neither None nor an empty string.
    False and 0 are answers.
    """
    return value is not None and value != ''


@dataclass(frozen=True)
class ReadinessDocument:
    document_id: str
    document_type: Optional[str] = None


@dataclass(frozen=True)
class ReadinessRecord:
    """
    One institution's Form 5 readiness submission for one qualification offering.

    Strings use '' or None for "not captured", tri-state booleans use None for
    "not answered yet".
    """
    delivery_mode: Optional[str] = None

    # Section 2: Qualification
    qualification_title: Optional[str] = None
    saqa_id: Optional[str] = None
    curriculum_code: Optional[str] = None
    credits: Optional[int] = None

    # Section 3.1: Self-assessment
    self_assessment_completed: Optional[bool] = None
    self_assessment_remarks: Optional[str] = None

    # Section 3.2: Registration & legal compliance
    registration_type: Optional[str] = None
    professional_body_registration: Optional[bool] = None

    # Sections 3.3 / 3.4: Premises and knowledge module resources
    training_site_address: Optional[str] = None
    ownership_type: Optional[str] = None
    number_of_training_rooms: Optional[int] = None
    room_capacity: Optional[int] = None
    facilitator_learner_ratio: Optional[str] = None

    # Section 3.6: Workplace-based learning
    wbl_workplace_partner_name: Optional[str] = None
    wbl_agreement_type: Optional[str] = None

    # Section 4: Hybrid / blended delivery
    lms_name: Optional[str] = None
    internet_connectivity_method: Optional[str] = None
    isp: Optional[str] = None

    # Section 6: LMIS
    lmis_functional: Optional[bool] = None
    lmis_popia_compliant: Optional[bool] = None

    # Section 7: Policies & procedures
    policies_procedures_notes: Optional[str] = None

    # Section 8: Occupational health & safety
    fire_extinguisher_available: Optional[bool] = None
    emergency_exits_marked: Optional[bool] = None
    accessibility_for_disabilities: Optional[bool] = None
    first_aid_kit_available: Optional[bool] = None
    ohs_representative_name: Optional[str] = None

    # Section 9: Learning material
    learning_material_exists: Optional[bool] = None
    learning_material_coverage_percentage: Optional[Union[int, float, Decimal]] = None
    knowledge_module_coverage: Optional[Union[int, float, Decimal]] = None
    practical_module_coverage: Optional[Union[int, float, Decimal]] = None
    curriculum_alignment_confirmed: Optional[bool] = None
    learning_material_nqf_aligned: Optional[bool] = None
    knowledge_components_complete: Optional[bool] = None
    practical_components_complete: Optional[bool] = None
    learning_material_quality_verified: Optional[bool] = None

    # Related rows, fetched by the caller
    facilitators: List[str] = field(default_factory=list)
    documents: List[ReadinessDocument] = field(default_factory=list)

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls) if f.name not in RELATION_FIELDS]

    @classmethod
    def from_mapping(cls, data: Mapping) -> 'ReadinessRecord':
        """Build a record from a JSON payload or model_to_dict() output. Unknown keys are ignored."""
        values = {name: data.get(name) for name in cls.field_names()}
        values['facilitators'] = _facilitator_ids(data.get('facilitators'))
        values['documents'] = _documents(data.get('documents'))
        return cls(**values)

    @classmethod
    def from_object(cls, obj: Any) -> 'ReadinessRecord':
        """Build a record from anything exposing the fields as attributes, e.g. an ORM row."""
        if isinstance(obj, cls):
            return obj
        if isinstance(obj, Mapping):
            return cls.from_mapping(obj)
        data = {name: getattr(obj, name, None) for name in cls.field_names()}
        data['facilitators'] = _related(obj, 'facilitators')
        data['documents'] = _related(obj, 'documents')
        return cls.from_mapping(data)

    def merged_with(self, updates: Optional[Mapping]) -> 'ReadinessRecord':
        """Return a copy with the caller's pending field updates applied"""
        if not updates:
            return self
        known = set(self.field_names()) | RELATION_FIELDS
        changes = {key: value for key, value in updates.items() if key in known}
        if 'facilitators' in changes:
            changes['facilitators'] = _facilitator_ids(changes['facilitators'])
        if 'documents' in changes:
            changes['documents'] = _documents(changes['documents'])
        return replace(self, **changes)

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in self.field_names()}
        data['facilitators'] = list(self.facilitators)
        data['documents'] = [
            {'document_id': doc.document_id, 'document_type': doc.document_type}
            for doc in self.documents
        ]
        return data


RELATION_FIELDS = {'facilitators', 'documents'}


def _related(obj, name):
    value = getattr(obj, name, None)
    # Django related managers
    if hasattr(value, 'all'):
        return list(value.all())
    return value


def _facilitator_ids(items) -> List[str]:
    ids = []
    for item in items or []:
        if isinstance(item, Mapping):
            item = item.get('facilitator_id')
        else:
            item = getattr(item, 'facilitator_id', item)
        if is_present(item):
            ids.append(str(item))
    return ids


def _documents(items) -> List[ReadinessDocument]:
    documents = []
    for item in items or []:
        if isinstance(item, ReadinessDocument):
            documents.append(item)
        elif isinstance(item, Mapping):
            if is_present(item.get('document_id')):
                documents.append(ReadinessDocument(
                    document_id=str(item['document_id']),
                    document_type=item.get('document_type'),
                ))
        elif hasattr(item, 'document_id'):
            documents.append(ReadinessDocument(
                document_id=str(item.document_id),
                document_type=getattr(item, 'document_type', None),
            ))
        elif is_present(item):
            documents.append(ReadinessDocument(document_id=str(item)))
    return documents
