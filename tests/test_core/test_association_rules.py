"""Tests for association rule applicability and cardinality."""

import pytest

from pim_console.core.association_rules import (
    ApplicableRule,
    ManualAssociationDraft,
    applicable_rules,
    can_select_more,
    eligible_targets,
    ensure_associations_valid,
    rule_applies,
    validate_associations,
    validate_rule_selection,
)
from pim_console.domain.exceptions import CardinalityError, ValidationError
from pim_console.schemas.entities import AssociationRule, AssociationType, Item


class TestRuleApplicability:
    """Tests for rule scope matching."""

    def test_empty_scopes_are_wildcards(self) -> None:
        rule = AssociationRule(id="r")

        assert rule_applies(rule, "any-category", "any-family")
        assert rule_applies(rule, None, None)

    def test_category_scope(self) -> None:
        rule = AssociationRule(id="r", source_category_ids=["c1"])

        assert rule_applies(rule, "c1", "f1")
        assert not rule_applies(rule, "c2", "f1")
        assert not rule_applies(rule, None, "f1")

    def test_family_scope(self) -> None:
        rule = AssociationRule(id="r", source_family_ids=["f1"])

        assert rule_applies(rule, "c9", "f1")
        assert not rule_applies(rule, "c9", "f2")

    def test_applicable_rules_filtered_by_source_type(
        self,
        association_types: list[AssociationType],
        association_rules: list[AssociationRule],
    ) -> None:
        assert [r.id for r in applicable_rules(association_types, association_rules, "t1", "c1", "f1")] == ["r1"]
        assert applicable_rules(association_types, association_rules, "t2", "c1", "f1") == []

    def test_target_side_rules_ignored(self, association_types: list[AssociationType]) -> None:
        rules = [AssociationRule(id="r", association_type_id="at1", applies_to="target")]

        assert applicable_rules(association_types, rules, "t1", None, None) == []

    def test_eligible_targets(
        self,
        association_types: list[AssociationType],
        target_items: list[Item],
    ) -> None:
        rule = AssociationRule(id="r", association_type_id="at1", target_category_ids=["c1"])
        entry = ApplicableRule(rule=rule, association_type=association_types[0])

        assert [i.id for i in eligible_targets(entry, target_items)] == ["i1"]

    def test_eligible_targets_wildcard(
        self,
        association_types: list[AssociationType],
        rule_r1: AssociationRule,
        target_items: list[Item],
    ) -> None:
        entry = ApplicableRule(rule=rule_r1, association_type=association_types[0])

        assert [i.id for i in eligible_targets(entry, target_items)] == ["i1", "i2", "i3"]


class TestCardinality:
    """Tests for min/max target bounds (R1: min 1, max 2)."""

    def test_zero_selected_fails_min(self, rule_r1: AssociationRule) -> None:
        with pytest.raises(CardinalityError) as exc_info:
            validate_rule_selection(rule_r1, [])

        assert "at least 1" in exc_info.value.message
        assert exc_info.value.field == "r1"

    @pytest.mark.parametrize("selected", [["i1"], ["i1", "i2"]])
    def test_within_bounds_passes(self, rule_r1: AssociationRule, selected: list[str]) -> None:
        validate_rule_selection(rule_r1, selected)

    def test_three_selected_fails_max(self, rule_r1: AssociationRule) -> None:
        with pytest.raises(CardinalityError) as exc_info:
            validate_rule_selection(rule_r1, ["i1", "i2", "i3"])

        assert "at most 2" in exc_info.value.message

    def test_zero_max_is_unbounded(self) -> None:
        rule = AssociationRule(id="r", max_targets=0)

        validate_rule_selection(rule, ["a"] * 50)
        assert can_select_more(rule, ["a"] * 50)

    def test_can_select_more(self, rule_r1: AssociationRule) -> None:
        assert can_select_more(rule_r1, ["i1"])
        assert not can_select_more(rule_r1, ["i1", "i2"])


class TestManualRows:
    """Tests for manual association row completeness."""

    def test_row_states(self) -> None:
        assert ManualAssociationDraft().is_empty
        assert ManualAssociationDraft(association_type_id="at1", target_item_id="i1").is_complete
        assert ManualAssociationDraft(association_type_id="at1").is_half_filled
        assert ManualAssociationDraft(target_item_id="  ").is_empty

    def test_half_filled_row_blocks(self) -> None:
        rows = [ManualAssociationDraft(), ManualAssociationDraft(target_item_id="i1")]

        problems = validate_associations([], {}, rows)

        assert len(problems) == 1
        assert problems[0].field == "manual_associations[1]"

    def test_ensure_raises_first_problem(
        self,
        association_types: list[AssociationType],
        rule_r1: AssociationRule,
    ) -> None:
        entry = ApplicableRule(rule=rule_r1, association_type=association_types[0])

        with pytest.raises(ValidationError):
            ensure_associations_valid([entry], {}, [ManualAssociationDraft()])

    def test_valid_selection_passes(
        self,
        association_types: list[AssociationType],
        rule_r1: AssociationRule,
    ) -> None:
        entry = ApplicableRule(rule=rule_r1, association_type=association_types[0])

        assert validate_associations([entry], {"r1": ["i1"]}, [ManualAssociationDraft()]) == []
