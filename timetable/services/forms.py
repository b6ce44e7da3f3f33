"""Form configurations for the managed entities.

Select fields start with no options; callers resolve them from the related
collection and attach them with ``with_options``.
"""

from __future__ import annotations

import re

from timetable.domain.models import (
    EntityFormConfig,
    FieldKind,
    FormField,
    SelectOption,
    ValidationResult,
)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

FORM_CONFIGS: dict[str, EntityFormConfig] = {
    "subjects": EntityFormConfig(
        entity="subjects",
        title="Add subject",
        fields=(
            FormField(id="code", label="Code", required=True, placeholder="e.g. CC01"),
            FormField(id="name", label="Name", required=True),
            FormField(
                id="course",
                label="Course",
                kind=FieldKind.SELECT,
                required=True,
                placeholder="Select a course",
            ),
            FormField(id="theory_hours", label="Theory hours", required=True),
            FormField(id="practice_hours", label="Practice hours", required=True),
            FormField(id="preferred_room_type", label="Preferred room type"),
        ),
        defaults={
            "code": "",
            "name": "",
            "course": "",
            "theory_hours": "",
            "practice_hours": "",
            "preferred_room_type": "",
        },
    ),
    "teachers": EntityFormConfig(
        entity="teachers",
        title="Add teacher",
        fields=(
            FormField(id="name", label="Name", required=True),
            FormField(id="email", label="Email", kind=FieldKind.EMAIL, required=True),
        ),
        defaults={"name": "", "email": ""},
    ),
    "rooms": EntityFormConfig(
        entity="rooms",
        title="Add room",
        fields=(
            FormField(id="code", label="Code", required=True, placeholder="e.g. S201"),
            FormField(id="name", label="Room name", required=True),
            FormField(
                id="capacity", label="Capacity", kind=FieldKind.NUMBER, required=True
            ),
            FormField(id="type", label="Type", required=True),
        ),
        defaults={"code": "", "name": "", "capacity": 0, "type": ""},
    ),
    "courses": EntityFormConfig(
        entity="courses",
        title="Add course",
        fields=(
            FormField(id="code", label="Code", required=True),
            FormField(id="name", label="Course name", required=True),
        ),
        defaults={"code": "", "name": ""},
    ),
    "classes": EntityFormConfig(
        entity="classes",
        title="Add class",
        fields=(
            FormField(id="name", label="Class name", required=True),
            FormField(
                id="course",
                label="Course",
                kind=FieldKind.SELECT,
                required=True,
                placeholder="Select a course",
            ),
        ),
        defaults={"name": "", "course": ""},
    ),
    "semesters": EntityFormConfig(
        entity="semesters",
        title="Add semester",
        fields=(FormField(id="name", label="Semester name", required=True),),
        defaults={"name": ""},
    ),
}


def get_form_config(entity: str) -> EntityFormConfig | None:
    return FORM_CONFIGS.get(entity)


def with_options(
    config: EntityFormConfig, field_id: str, options: list[SelectOption]
) -> EntityFormConfig:
    """Return a copy of *config* with *options* attached to a select field.

    Raises ``KeyError`` if the field does not exist and ``ValueError`` if it
    is not a select field.
    """
    fields = list(config.fields)
    for i, field in enumerate(fields):
        if field.id != field_id:
            continue
        if field.kind != FieldKind.SELECT:
            raise ValueError(f"Field {field_id!r} is not a select field")
        fields[i] = field.model_copy(update={"options": tuple(options)})
        return config.model_copy(update={"fields": tuple(fields)})
    raise KeyError(field_id)


def validate_form(config: EntityFormConfig, values: dict) -> ValidationResult:
    errors: list[str] = []

    for field in config.fields:
        raw = values.get(field.id)
        text = "" if raw is None else str(raw).strip()

        if not text:
            if field.required:
                errors.append(f"{field.label} is required")
            continue

        if field.kind == FieldKind.NUMBER:
            try:
                float(text)
            except ValueError:
                errors.append(f"{field.label} must be a number")
        elif field.kind == FieldKind.EMAIL and not _EMAIL.match(text):
            errors.append(f"{field.label} must be a valid email")
        elif field.kind == FieldKind.SELECT:
            allowed = {option.value for option in field.options}
            if text not in allowed:
                errors.append(f"{field.label} must be one of the available options")

    return ValidationResult.from_errors(errors)
