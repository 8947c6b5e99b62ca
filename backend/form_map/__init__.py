"""Conditional logic map producer for form definitions."""

from .form_map import (
    ConditionalLogic,
    FormChoice,
    FormDefinition,
    FormDefinitionError,
    FormField,
    FormRule,
    build_conditional_map,
    describe_rule,
    find_dependents,
    load_form_definition,
    load_form_file,
)
from . import labels

__all__ = [
    'ConditionalLogic',
    'FormChoice',
    'FormDefinition',
    'FormDefinitionError',
    'FormField',
    'FormRule',
    'build_conditional_map',
    'describe_rule',
    'find_dependents',
    'load_form_definition',
    'load_form_file',
    'labels',
]
