"""Core module - Taxonomy resolution, item wizard, dynamic forms."""

from pim_console.core.action_config import ActionFormRegistry, render_action_form
from pim_console.core.attribute_fields import AttributeFieldRegistry, render_attribute
from pim_console.core.attribute_resolution import ResolvedAttributes, resolve_attributes
from pim_console.core.item_submission import ItemSubmitter, SubmissionResult
from pim_console.core.item_wizard import ItemFormState, WizardContext, WizardStep
from pim_console.core.lookups import LookupLoader, LookupResult

__all__ = [
    "ActionFormRegistry",
    "AttributeFieldRegistry",
    "ItemFormState",
    "ItemSubmitter",
    "LookupLoader",
    "LookupResult",
    "ResolvedAttributes",
    "SubmissionResult",
    "WizardContext",
    "WizardStep",
    "render_action_form",
    "render_attribute",
    "resolve_attributes",
]
