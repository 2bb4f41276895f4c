"""Tests for the item creation wizard state machine."""

from dataclasses import replace

import pytest

from pim_console.core.item_wizard import (
    ItemFormState,
    WizardContext,
    WizardStep,
    add_manual_association,
    advance,
    go_back,
    mark_lookups_loaded,
    remove_manual_association,
    select_category,
    select_family,
    select_item_type,
    set_attribute_value,
    set_identifiers,
    set_rule_targets,
    toggle_rule_target,
    update_manual_association,
    validate_all,
    validate_step,
)
from pim_console.core.lookups import LookupResult
from pim_console.domain.exceptions import StepValidationError, ValidationError
from pim_console.schemas.entities import ItemStatus


@pytest.fixture
def taxonomy_state() -> ItemFormState:
    """State positioned on the associations step with T1/C1/F1 selected."""
    return ItemFormState(
        step=WizardStep.ASSOCIATIONS,
        item_type_id="t1",
        category_id="c1",
        family_id="f1",
        lookups_loaded=True,
    )


class TestReducers:
    """Tests for pure state reducers."""

    def test_initial_state(self) -> None:
        state = ItemFormState()

        assert state.step is WizardStep.ITEM_TYPE
        assert len(state.manual_associations) == 1
        assert state.manual_associations[0].is_empty

    def test_select_item_type_clears_downstream(self, taxonomy_state: ItemFormState) -> None:
        state = set_attribute_value(set_rule_targets(taxonomy_state, "r1", ["i1"]), "a1", "red")

        new_state = select_item_type(state, "t2")

        assert new_state.item_type_id == "t2"
        assert new_state.category_id == ""
        assert new_state.family_id == ""
        assert new_state.rule_selections == {}
        assert new_state.attribute_values == {}
        # the original is untouched
        assert state.category_id == "c1"

    def test_reselecting_same_item_type_keeps_state(self, taxonomy_state: ItemFormState) -> None:
        assert select_item_type(taxonomy_state, "t1") is taxonomy_state

    def test_select_category_clears_family(self, taxonomy_state: ItemFormState) -> None:
        new_state = select_category(taxonomy_state, "c2")

        assert new_state.category_id == "c2"
        assert new_state.family_id == ""

    def test_select_family(self, taxonomy_state: ItemFormState) -> None:
        assert select_family(taxonomy_state, "f2").family_id == "f2"

    def test_set_identifiers(self) -> None:
        state = set_identifiers(ItemFormState(), code="SKU-1", status="active")

        assert state.code == "SKU-1"
        assert state.status is ItemStatus.ACTIVE
        assert state.sku == ""

    def test_set_rule_targets_dedups(self, taxonomy_state: ItemFormState) -> None:
        state = set_rule_targets(taxonomy_state, "r1", ["i2", "i1", "i2"])

        assert state.selected_targets("r1") == ("i2", "i1")

    def test_manual_rows(self) -> None:
        state = add_manual_association(ItemFormState())
        state = update_manual_association(state, 1, association_type_id="at1", target_item_id="i1")

        assert len(state.manual_associations) == 2
        assert state.manual_associations[1].is_complete

        state = remove_manual_association(state, 0)
        state = remove_manual_association(state, 0)

        assert len(state.manual_associations) == 1
        assert state.manual_associations[0].is_empty


class TestRuleToggling:
    """Tests for toggle_rule_target bounds."""

    def test_toggle_adds_and_removes(self, lookups: LookupResult, taxonomy_state: ItemFormState) -> None:
        state = toggle_rule_target(WizardContext(lookups, taxonomy_state), "r1", "i1")
        assert state.selected_targets("r1") == ("i1",)

        state = toggle_rule_target(WizardContext(lookups, state), "r1", "i1")
        assert state.selected_targets("r1") == ()

    def test_toggle_refuses_beyond_max(self, lookups: LookupResult, taxonomy_state: ItemFormState) -> None:
        state = set_rule_targets(taxonomy_state, "r1", ["i1", "i2"])

        with pytest.raises(ValidationError):
            toggle_rule_target(WizardContext(lookups, state), "r1", "i3")

    def test_toggle_refuses_ineligible_target(self, lookups: LookupResult, taxonomy_state: ItemFormState) -> None:
        # i4 has the source item type, not the association's target type
        with pytest.raises(ValidationError) as exc_info:
            toggle_rule_target(WizardContext(lookups, taxonomy_state), "r1", "i4")

        assert exc_info.value.field == "r1"

    def test_ineligible_selection_blocks_associations_step(
        self,
        lookups: LookupResult,
        taxonomy_state: ItemFormState,
    ) -> None:
        state = set_rule_targets(taxonomy_state, "r1", ["i1", "i4"])

        with pytest.raises(StepValidationError) as exc_info:
            advance(WizardContext(lookups, state))

        assert exc_info.value.field == "r1"
        assert "i4" in str(exc_info.value)

    def test_toggle_unknown_rule(self, lookups: LookupResult, taxonomy_state: ItemFormState) -> None:
        with pytest.raises(ValidationError):
            toggle_rule_target(WizardContext(lookups, taxonomy_state), "nope", "i1")


class TestNavigation:
    """Tests for step validation and transitions."""

    def test_cannot_leave_item_type_while_loading(self, lookups: LookupResult) -> None:
        state = select_item_type(ItemFormState(), "t1")

        with pytest.raises(StepValidationError) as exc_info:
            advance(WizardContext(lookups, state))

        assert exc_info.value.step == "item_type"

    def test_item_type_required(self, lookups: LookupResult) -> None:
        state = mark_lookups_loaded(ItemFormState())

        with pytest.raises(StepValidationError) as exc_info:
            validate_step(WizardContext(lookups, state))

        assert exc_info.value.field == "item_type_id"

    def test_taxonomy_requires_both(self, lookups: LookupResult) -> None:
        state = ItemFormState(step=WizardStep.TAXONOMY, item_type_id="t1", category_id="c1", lookups_loaded=True)

        with pytest.raises(StepValidationError) as exc_info:
            advance(WizardContext(lookups, state))

        assert exc_info.value.field == "family_id"

    def test_associations_enforce_min_targets(self, lookups: LookupResult, taxonomy_state: ItemFormState) -> None:
        with pytest.raises(StepValidationError) as exc_info:
            advance(WizardContext(lookups, taxonomy_state))

        assert exc_info.value.step == "associations"
        assert exc_info.value.field == "r1"

    def test_half_filled_manual_row_blocks(self, lookups: LookupResult, taxonomy_state: ItemFormState) -> None:
        state = set_rule_targets(taxonomy_state, "r1", ["i1"])
        state = update_manual_association(state, 0, association_type_id="at1")

        with pytest.raises(StepValidationError):
            advance(WizardContext(lookups, state))

    def test_full_walk_to_review(self, lookups: LookupResult) -> None:
        state = mark_lookups_loaded(ItemFormState())
        state = select_item_type(state, "t1")
        state = advance(WizardContext(lookups, state))
        assert state.step is WizardStep.TAXONOMY

        state = select_family(select_category(state, "c1"), "f1")
        state = advance(WizardContext(lookups, state))
        assert state.step is WizardStep.ASSOCIATIONS

        state = set_rule_targets(state, "r1", ["i1", "i2"])
        state = advance(WizardContext(lookups, state))
        assert state.step is WizardStep.ATTRIBUTES

        # attribute values are optional
        state = advance(WizardContext(lookups, state))
        assert state.step is WizardStep.REVIEW

        # review is the last step reachable by advancing
        assert advance(WizardContext(lookups, state)).step is WizardStep.REVIEW
        validate_all(WizardContext(lookups, state))

    def test_failed_advance_does_not_move(self, lookups: LookupResult) -> None:
        state = ItemFormState(step=WizardStep.TAXONOMY, item_type_id="t1", lookups_loaded=True)

        with pytest.raises(StepValidationError):
            advance(WizardContext(lookups, state))

        assert state.step is WizardStep.TAXONOMY

    def test_go_back(self, taxonomy_state: ItemFormState) -> None:
        assert go_back(taxonomy_state).step is WizardStep.TAXONOMY
        assert go_back(ItemFormState()).step is WizardStep.ITEM_TYPE

        submitted = replace(taxonomy_state, step=WizardStep.SUBMITTED)
        assert go_back(submitted) is submitted


class TestWizardContext:
    """Tests for views derived from lookups and state."""

    def test_derived_views(self, lookups: LookupResult) -> None:
        state = ItemFormState(item_type_id="t1", category_id="c2", family_id="f2")

        context = WizardContext(lookups, state)

        assert [c.id for c in context.category_lineage] == ["c2", "c1", "c-root"]
        assert [f.id for f in context.family_lineage] == ["f2", "f1"]
        assert [a.id for a in context.resolved_attributes.required] == ["a2", "a1"]
        assert [r.id for r in context.applicable_rules] == ["r1"]
        assert [i.id for i in context.targets_for("r1")] == ["i1", "i2", "i3"]

    def test_nothing_selected(self, lookups: LookupResult) -> None:
        context = WizardContext(lookups, ItemFormState())

        assert context.category_options == []
        assert context.applicable_rules == []
        assert context.resolved_attributes.attributes == ()

    def test_category_and_family_options(self, lookups: LookupResult) -> None:
        context = WizardContext(lookups, ItemFormState(item_type_id="t1", category_id="c1"))

        assert [c.id for c in context.category_options] == ["c-root", "c1", "c2"]
        assert [f.id for f in context.family_options] == ["f1"]
