"""Item creation wizard: form state, reducers and step validation.

The wizard is linear::

    item_type → taxonomy → associations → attributes → review → submitted

``ItemFormState`` is immutable. Every reducer returns a new state, so step
transitions can be exercised without any UI.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property
from typing import Any

from pim_console.core.association_rules import (
    ApplicableRule,
    ManualAssociationDraft,
    applicable_rules,
    can_select_more,
    eligible_targets,
    validate_associations,
)
from pim_console.core.attribute_resolution import ResolvedAttributes, resolve_attributes
from pim_console.core.lookups import LookupResult
from pim_console.core.taxonomy import (
    admissible_categories,
    admissible_families,
    category_lineage,
    family_lineage,
)
from pim_console.domain.exceptions import StepValidationError, ValidationError
from pim_console.schemas.entities import Category, Family, Item, ItemStatus, ItemType


class WizardStep(str, Enum):
    ITEM_TYPE = "item_type"
    TAXONOMY = "taxonomy"
    ASSOCIATIONS = "associations"
    ATTRIBUTES = "attributes"
    REVIEW = "review"
    SUBMITTED = "submitted"


STEP_ORDER: tuple[WizardStep, ...] = tuple(WizardStep)

# Steps reachable by next/back; SUBMITTED is only entered by submission
EDITABLE_STEPS: tuple[WizardStep, ...] = STEP_ORDER[:-1]


@dataclass(frozen=True)
class ItemFormState:
    """Everything the user has entered so far.

    Attributes:
        rule_selections: Rule id → selected target item ids, in pick order
        manual_associations: Hand-entered rows; never empty
        attribute_values: Attribute id → value
        lookups_loaded: Reference data has finished loading
    """

    step: WizardStep = WizardStep.ITEM_TYPE
    item_type_id: str = ""
    category_id: str = ""
    family_id: str = ""
    code: str = ""
    external_code: str = ""
    sku: str = ""
    status: ItemStatus = ItemStatus.DRAFT
    rule_selections: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    manual_associations: tuple[ManualAssociationDraft, ...] = (ManualAssociationDraft(),)
    attribute_values: Mapping[str, Any] = field(default_factory=dict)
    lookups_loaded: bool = False
    created_item_id: str | None = None

    @property
    def step_index(self) -> int:
        return STEP_ORDER.index(self.step)

    def selected_targets(self, rule_id: str) -> tuple[str, ...]:
        return tuple(self.rule_selections.get(rule_id, ()))


class WizardContext:
    """Fetched reference data plus the views derived from a form state.

    Derived views are computed lazily and cached; build a new context when
    the selection changes.
    """

    def __init__(self, lookups: LookupResult, state: ItemFormState, *, strict_lineage: bool = False) -> None:
        self.lookups = lookups
        self.state = state
        self._strict_lineage = strict_lineage

    def with_state(self, state: ItemFormState) -> WizardContext:
        return WizardContext(self.lookups, state, strict_lineage=self._strict_lineage)

    @cached_property
    def item_type(self) -> ItemType | None:
        return next((t for t in self.lookups.item_types if t.id == self.state.item_type_id), None)

    @cached_property
    def category(self) -> Category | None:
        return next((c for c in self.lookups.categories if c.id == self.state.category_id), None)

    @cached_property
    def family(self) -> Family | None:
        return next((f for f in self.lookups.families if f.id == self.state.family_id), None)

    @cached_property
    def category_options(self) -> list[Category]:
        if self.item_type is None:
            return []
        return admissible_categories(self.item_type, self.lookups.categories)

    @cached_property
    def family_options(self) -> list[Family]:
        if self.category is None:
            return []
        return admissible_families(self.category, self.lookups.families)

    @cached_property
    def category_lineage(self) -> list[Category]:
        if self.category is None:
            return []
        return category_lineage(self.category, self.lookups.categories, strict=self._strict_lineage)

    @cached_property
    def family_lineage(self) -> list[Family]:
        if self.family is None:
            return []
        return family_lineage(self.family, self.lookups.families, strict=self._strict_lineage)

    @cached_property
    def resolved_attributes(self) -> ResolvedAttributes:
        return resolve_attributes(
            self.item_type,
            self.category_lineage,
            self.family_lineage,
            self.lookups.attribute_groups,
        )

    @cached_property
    def applicable_rules(self) -> list[ApplicableRule]:
        if not self.state.item_type_id:
            return []
        return applicable_rules(
            self.lookups.association_types,
            self.lookups.association_rules,
            self.state.item_type_id,
            self.state.category_id or None,
            self.state.family_id or None,
        )

    def rule(self, rule_id: str) -> ApplicableRule | None:
        return next((r for r in self.applicable_rules if r.id == rule_id), None)

    def targets_for(self, rule_id: str) -> list[Item]:
        entry = self.rule(rule_id)
        if entry is None:
            return []
        return eligible_targets(entry, self.lookups.items)

    def eligible_target_ids(self, rule_id: str) -> set[str]:
        return {item.id for item in self.targets_for(rule_id)}


# =============================================================================
# Reducers
# =============================================================================


def mark_lookups_loaded(state: ItemFormState) -> ItemFormState:
    return replace(state, lookups_loaded=True)


def select_item_type(state: ItemFormState, item_type_id: str) -> ItemFormState:
    """Select an item type; everything downstream of it is cleared."""
    if item_type_id == state.item_type_id:
        return state
    return replace(
        state,
        item_type_id=item_type_id,
        category_id="",
        family_id="",
        rule_selections={},
        attribute_values={},
    )


def select_category(state: ItemFormState, category_id: str) -> ItemFormState:
    """Select a category; the family and rule picks depend on it."""
    if category_id == state.category_id:
        return state
    return replace(state, category_id=category_id, family_id="", rule_selections={})


def select_family(state: ItemFormState, family_id: str) -> ItemFormState:
    if family_id == state.family_id:
        return state
    return replace(state, family_id=family_id, rule_selections={})


def set_identifiers(
    state: ItemFormState,
    code: str | None = None,
    external_code: str | None = None,
    sku: str | None = None,
    status: ItemStatus | str | None = None,
) -> ItemFormState:
    return replace(
        state,
        code=state.code if code is None else code,
        external_code=state.external_code if external_code is None else external_code,
        sku=state.sku if sku is None else sku,
        status=state.status if status is None else ItemStatus(status),
    )


def set_rule_targets(state: ItemFormState, rule_id: str, target_ids: list[str] | tuple[str, ...]) -> ItemFormState:
    """Replace a rule's selection (duplicates dropped, order kept)."""
    unique = tuple(dict.fromkeys(target_ids))
    selections = dict(state.rule_selections)
    selections[rule_id] = unique
    return replace(state, rule_selections=selections)


def toggle_rule_target(context: WizardContext, rule_id: str, target_id: str) -> ItemFormState:
    """Add or remove a target from a rule's selection.

    Adding beyond a positive ``max_targets`` or adding an item outside the
    rule's eligible targets is refused at selection time.

    Raises:
        ValidationError: Rule not applicable, target not eligible, or
            selection full
    """
    state = context.state
    entry = context.rule(rule_id)
    if entry is None:
        raise ValidationError(f"Association rule {rule_id} does not apply", field=rule_id)

    current = state.selected_targets(rule_id)
    if target_id in current:
        return set_rule_targets(state, rule_id, [t for t in current if t != target_id])

    if target_id not in context.eligible_target_ids(rule_id):
        raise ValidationError(
            f"Item {target_id} is not an eligible target for association rule {rule_id}",
            field=rule_id,
        )

    if not can_select_more(entry.rule, current):
        raise ValidationError(
            f"Association rule {rule_id} allows at most {entry.rule.max_targets} target(s)",
            field=rule_id,
        )
    return set_rule_targets(state, rule_id, [*current, target_id])


def add_manual_association(state: ItemFormState) -> ItemFormState:
    return replace(
        state,
        manual_associations=(*state.manual_associations, ManualAssociationDraft()),
    )


def update_manual_association(state: ItemFormState, index: int, **changes: str) -> ItemFormState:
    rows = list(state.manual_associations)
    rows[index] = replace(rows[index], **changes)
    return replace(state, manual_associations=tuple(rows))


def remove_manual_association(state: ItemFormState, index: int) -> ItemFormState:
    """Remove a row; the list always keeps at least one empty row."""
    rows = [row for i, row in enumerate(state.manual_associations) if i != index]
    return replace(state, manual_associations=tuple(rows) or (ManualAssociationDraft(),))


def set_attribute_value(state: ItemFormState, attribute_id: str, value: Any) -> ItemFormState:
    values = dict(state.attribute_values)
    values[attribute_id] = value
    return replace(state, attribute_values=values)


# =============================================================================
# Navigation
# =============================================================================


def validate_step(context: WizardContext) -> None:
    """Check the current step allows moving forward.

    Raises:
        StepValidationError: With the blocking step and a user message
    """
    state = context.state
    step = state.step

    if step is WizardStep.ITEM_TYPE:
        if not state.lookups_loaded:
            raise StepValidationError(step.value, "Reference data is still loading")
        if not state.item_type_id:
            raise StepValidationError(step.value, "Please select an item type", field="item_type_id")

    elif step is WizardStep.TAXONOMY:
        if not state.category_id:
            raise StepValidationError(step.value, "Please select a category", field="category_id")
        if not state.family_id:
            raise StepValidationError(step.value, "Please select a family", field="family_id")

    elif step is WizardStep.ASSOCIATIONS:
        problems = validate_associations(
            context.applicable_rules,
            state.rule_selections,
            state.manual_associations,
        )
        if problems:
            first = problems[0]
            raise StepValidationError(step.value, first.message, field=first.field)
        for entry in context.applicable_rules:
            ineligible = set(state.selected_targets(entry.id)) - context.eligible_target_ids(entry.id)
            if ineligible:
                raise StepValidationError(
                    step.value,
                    f"{entry.association_type.name}: {', '.join(sorted(ineligible))} cannot be linked by this rule",
                    field=entry.id,
                )

    # attributes: values are optional; review: nothing left to check


def advance(context: WizardContext) -> ItemFormState:
    """Move to the next step if the current one validates.

    Review is the last step reachable this way; submission moves past it.
    """
    validate_step(context)
    state = context.state
    if state.step in (WizardStep.REVIEW, WizardStep.SUBMITTED):
        return state
    return replace(state, step=EDITABLE_STEPS[state.step_index + 1])


def go_back(state: ItemFormState) -> ItemFormState:
    if state.step is WizardStep.SUBMITTED or state.step_index == 0:
        return state
    return replace(state, step=STEP_ORDER[state.step_index - 1])


def validate_all(context: WizardContext) -> None:
    """Validate every editable step, as submission does.

    Raises:
        StepValidationError: For the first step that fails
    """
    for step in EDITABLE_STEPS:
        validate_step(context.with_state(replace(context.state, step=step)))


def mark_submitted(state: ItemFormState, item_id: str) -> ItemFormState:
    return replace(state, step=WizardStep.SUBMITTED, created_item_id=item_id)
