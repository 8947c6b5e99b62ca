"""Build the annotated conditional logic map of a form definition."""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from map_filter.markers import (
    DEPENDS_ON_ARROW,
    DEPENDS_ON_GLYPH,
    FIELD_ID_END,
    FIELD_ID_START,
    FIELD_TYPE_END,
    FIELD_TYPE_START,
    UNUSED_END,
    UNUSED_START,
    USED_BY_PREFIX,
)

from . import labels

INDENT = "    "


class FormDefinitionError(ValueError):
    """The form definition cannot be read."""


def _empty_to_none(v):
    # Form exports store "no logic" / "no choices" as an empty string
    return None if v in ("", []) else v


def _as_str(v):
    return "" if v is None else str(v)


class FormRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_id: str = Field(alias="fieldId")
    operator: str = "is"
    value: str = ""

    @field_validator("field_id", "operator", "value", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return _as_str(v)


class ConditionalLogic(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action_type: str = Field(default="show", alias="actionType")
    logic_type: str = Field(default="all", alias="logicType")
    rules: List[FormRule] = Field(default_factory=list)


class FormChoice(BaseModel):
    text: str = ""
    value: str = ""

    @field_validator("text", "value", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return _as_str(v)


class FormField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    label: str = ""
    type: str = ""
    choices: Optional[List[FormChoice]] = None
    conditional_logic: Optional[ConditionalLogic] = Field(default=None, alias="conditionalLogic")

    @field_validator("choices", "conditional_logic", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return _empty_to_none(v)

    @field_validator("label", "type", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return _as_str(v)

    @property
    def has_logic(self) -> bool:
        return self.conditional_logic is not None and bool(self.conditional_logic.rules)


class FormDefinition(BaseModel):
    id: Optional[int] = None
    title: str = labels.UNTITLED_FORM
    fields: List[FormField]


def load_form_definition(data: Any) -> FormDefinition:
    """
    Accept a form object, an export wrapper keyed by index ({"0": form, "version": ...}),
    a list of forms (first one wins) or their JSON text.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FormDefinitionError(f"Form definition is not valid JSON: {e}") from e

    if isinstance(data, list):
        if not data:
            raise FormDefinitionError("Form export contains no forms")
        data = data[0]

    if isinstance(data, dict) and "fields" not in data:
        # Export wrapper: pick the first numerically keyed form
        form_keys = sorted((k for k in data if str(k).isdigit()), key=int)
        if form_keys:
            data = data[form_keys[0]]

    if not isinstance(data, dict) or not isinstance(data.get("fields"), list):
        raise FormDefinitionError("Form definition must be an object with a 'fields' list")

    try:
        return FormDefinition.model_validate(data)
    except ValidationError as e:
        raise FormDefinitionError(f"Invalid form definition: {e}") from e


def load_form_file(path: str) -> FormDefinition:
    with open(path, "rb") as f:
        return load_form_definition(f.read())


def source_field_id(rule: FormRule) -> Optional[int]:
    """Rules on a sub-input ("3.1") point at the parent field (3)."""
    head = rule.field_id.split(".", 1)[0].strip()
    return int(head) if head.isdigit() else None


def field_type_label(field: FormField) -> str:
    return labels.FIELD_TYPE_LABELS.get(field.type, field.type.replace("_", " ").title() or "Field")


def field_reference(field_id: int, fields: Dict[int, FormField]) -> str:
    ref = labels.FIELD_LABEL.format(id=field_id)
    field = fields.get(field_id)
    if field is None:
        return f"{ref} {labels.MISSING_FIELD_SUFFIX}"
    if field.label.strip():
        return f'{ref} "{field.label.strip()}"'
    return ref


def describe_rule(rule: FormRule, fields: Dict[int, FormField]) -> str:
    field_id = source_field_id(rule)
    subject = field_reference(field_id, fields) if field_id is not None else rule.field_id

    if rule.value == "" and rule.operator in ("is", "isnot"):
        return f"{subject} {labels.IS_EMPTY if rule.operator == 'is' else labels.IS_NOT_EMPTY}"

    operator = labels.OPERATOR_LABELS.get(rule.operator, rule.operator)
    value = rule.value
    source = fields.get(field_id) if field_id is not None else None
    if source is not None and source.choices:
        for choice in source.choices:
            if choice.value == rule.value:
                value = choice.text
                break
    return f'{subject} {operator} "{value}"'


def find_dependents(form: FormDefinition) -> Dict[int, List[int]]:
    """Map each field id to the fields whose conditional logic references it, in form order."""
    dependents: Dict[int, List[int]] = {}
    for field in form.fields:
        if not field.has_logic:
            continue
        for rule in field.conditional_logic.rules:
            source = source_field_id(rule)
            if source is None:
                continue
            users = dependents.setdefault(source, [])
            if field.id not in users:
                users.append(field.id)
    return dependents


def render_field_block(field: FormField, fields: Dict[int, FormField], used_by: List[int]) -> str:
    header = (
        f"{FIELD_ID_START}{labels.FIELD_LABEL.format(id=field.id)}{FIELD_ID_END} "
        f"{FIELD_TYPE_START}[{field_type_label(field)}]{FIELD_TYPE_END}"
    )
    if field.label.strip():
        header += f" {field.label.strip()}"

    if not field.has_logic and not used_by:
        return f"{UNUSED_START}{header}\n{INDENT}{labels.NOT_USED}{UNUSED_END}"

    lines = [header]
    if field.has_logic:
        logic = field.conditional_logic
        action = labels.HIDE_IF if logic.action_type == "hide" else labels.SHOW_IF
        joiner = labels.JOIN_ANY if logic.logic_type == "any" else labels.JOIN_ALL
        for number, rule in enumerate(logic.rules, start=1):
            lead = action if number == 1 else joiner
            lines.append(
                f"{INDENT}{DEPENDS_ON_GLYPH}[{number}]{DEPENDS_ON_ARROW}{lead} {describe_rule(rule, fields)}"
            )

    for user_id in used_by:
        lines.append(f"{INDENT}{USED_BY_PREFIX}{field_reference(user_id, fields)}")

    return "\n".join(lines)


def build_conditional_map(form: FormDefinition) -> str:
    """Render the annotated map: a header, then one block per field separated by blank lines."""
    fields = {f.id: f for f in form.fields}
    dependents = find_dependents(form)

    blocks = [labels.MAP_HEADER.format(title=form.title.strip() or labels.UNTITLED_FORM)]
    for field in form.fields:
        blocks.append(render_field_block(field, fields, dependents.get(field.id, [])))

    return "\n\n".join(blocks) + "\n"
