"""
Readiness app forms
Shape validation for readiness payloads arriving from outside the engine
"""
from django import forms
from django.core.exceptions import ValidationError

from .records import DeliveryMode, ReadinessRecord


class ReadinessRecordForm(forms.Form):
    """
    Coerces a raw Form 5 payload into typed values.

    Every field except delivery_mode is optional: an unanswered question is a
    completion gap, not a form error. Blank strings stay '' and unanswered
    yes/no questions stay None.
    """

    delivery_mode = forms.ChoiceField(choices=DeliveryMode.choices)

    # Section 2
    qualification_title = forms.CharField(required=False, max_length=500)
    saqa_id = forms.CharField(required=False, max_length=20)
    curriculum_code = forms.CharField(required=False, max_length=50)
    credits = forms.IntegerField(required=False, min_value=0)

    # Section 3.1 / 3.2
    self_assessment_completed = forms.NullBooleanField(required=False)
    self_assessment_remarks = forms.CharField(required=False)
    registration_type = forms.CharField(required=False, max_length=100)
    professional_body_registration = forms.NullBooleanField(required=False)

    # Sections 3.3 / 3.4 / 3.6
    training_site_address = forms.CharField(required=False)
    ownership_type = forms.CharField(required=False, max_length=100)
    number_of_training_rooms = forms.IntegerField(required=False, min_value=0)
    room_capacity = forms.IntegerField(required=False, min_value=0)
    facilitator_learner_ratio = forms.CharField(required=False, max_length=20)
    wbl_workplace_partner_name = forms.CharField(required=False, max_length=255)
    wbl_agreement_type = forms.CharField(required=False, max_length=100)

    # Section 4
    lms_name = forms.CharField(required=False, max_length=255)
    internet_connectivity_method = forms.CharField(required=False, max_length=100)
    isp = forms.CharField(required=False, max_length=255)

    # Sections 6 / 7 / 8
    lmis_functional = forms.NullBooleanField(required=False)
    lmis_popia_compliant = forms.NullBooleanField(required=False)
    policies_procedures_notes = forms.CharField(required=False)
    fire_extinguisher_available = forms.NullBooleanField(required=False)
    emergency_exits_marked = forms.NullBooleanField(required=False)
    accessibility_for_disabilities = forms.NullBooleanField(required=False)
    first_aid_kit_available = forms.NullBooleanField(required=False)
    ohs_representative_name = forms.CharField(required=False, max_length=255)

    # Section 9
    learning_material_exists = forms.NullBooleanField(required=False)
    learning_material_coverage_percentage = forms.DecimalField(required=False, min_value=0, max_value=100)
    knowledge_module_coverage = forms.DecimalField(required=False, min_value=0, max_value=100)
    practical_module_coverage = forms.DecimalField(required=False, min_value=0, max_value=100)
    curriculum_alignment_confirmed = forms.NullBooleanField(required=False)
    learning_material_nqf_aligned = forms.NullBooleanField(required=False)
    knowledge_components_complete = forms.NullBooleanField(required=False)
    practical_components_complete = forms.NullBooleanField(required=False)
    learning_material_quality_verified = forms.NullBooleanField(required=False)


def parse_readiness_payload(data) -> ReadinessRecord:
    """
    Validate an untrusted payload and build a ReadinessRecord from it.

    Raises:
        ValidationError: with the form's field errors when the payload is malformed
    """
    if not isinstance(data, dict):
        raise ValidationError("Readiness payload must be an object.")

    form = ReadinessRecordForm(data=data)
    if not form.is_valid():
        raise ValidationError(form.errors)

    cleaned = dict(form.cleaned_data)
    cleaned['facilitators'] = data.get('facilitators')
    cleaned['documents'] = data.get('documents')
    return ReadinessRecord.from_mapping(cleaned)
