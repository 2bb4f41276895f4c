"""Association rule applicability and cardinality validation.

Empty scope lists on a rule are wildcards: a rule with no source categories
and no source families applies to every category/family combination of its
association type.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from pim_console.domain.exceptions import CardinalityError, ValidationError
from pim_console.schemas.entities import AssociationRule, AssociationType, Item


@dataclass(frozen=True)
class ApplicableRule:
    """A rule that applies to the current selection, with its type."""

    rule: AssociationRule
    association_type: AssociationType

    @property
    def id(self) -> str:
        return self.rule.id


@dataclass(frozen=True)
class ManualAssociationDraft:
    """Association row entered by hand, outside any rule.

    ``order_index`` and ``metadata`` are kept as raw user input and parsed
    at submission time.
    """

    association_type_id: str = ""
    target_item_id: str = ""
    order_index: str = ""
    metadata: str = ""

    @property
    def has_type(self) -> bool:
        return bool(self.association_type_id.strip())

    @property
    def has_target(self) -> bool:
        return bool(self.target_item_id.strip())

    @property
    def is_empty(self) -> bool:
        return not self.has_type and not self.has_target

    @property
    def is_complete(self) -> bool:
        return self.has_type and self.has_target

    @property
    def is_half_filled(self) -> bool:
        return self.has_type != self.has_target


def _in_scope(scope: Sequence[str], value: str | None) -> bool:
    return not scope or (value is not None and value in scope)


def rule_applies(rule: AssociationRule, category_id: str | None, family_id: str | None) -> bool:
    """Whether a rule's source scope matches the selected category/family."""
    return _in_scope(rule.source_category_ids, category_id) and _in_scope(
        rule.source_family_ids, family_id
    )


def applicable_rules(
    association_types: Iterable[AssociationType],
    rules: Iterable[AssociationRule],
    item_type_id: str,
    category_id: str | None,
    family_id: str | None,
) -> list[ApplicableRule]:
    """Rules to present for a new item of ``item_type_id``.

    Only types whose source item type is the selected type are considered;
    their rules are kept in the order given when their scope matches.
    """
    types_by_id = {
        t.id: t for t in association_types if t.source_item_type_id == item_type_id
    }
    applicable: list[ApplicableRule] = []
    for rule in rules:
        if rule.applies_to != "source":
            continue
        association_type = types_by_id.get(rule.association_type_id or "")
        if association_type is None:
            continue
        if rule_applies(rule, category_id, family_id):
            applicable.append(ApplicableRule(rule=rule, association_type=association_type))
    return applicable


def eligible_targets(applicable: ApplicableRule, items: Iterable[Item]) -> list[Item]:
    """Items the rule's picker may offer.

    Restricted to the type's target item type, then filtered by the rule's
    target categories/families (empty = no filter).
    """
    rule = applicable.rule
    target_type_id = applicable.association_type.target_item_type_id
    return [
        item
        for item in items
        if item.item_type_id == target_type_id
        and _in_scope(rule.target_category_ids, item.category_id)
        and _in_scope(rule.target_family_ids, item.family_id)
    ]


def _upper_bound(rule: AssociationRule) -> int | None:
    if rule.max_targets is not None and rule.max_targets > 0:
        return rule.max_targets
    return None


def can_select_more(rule: AssociationRule, selected: Sequence[str]) -> bool:
    """False once a positive ``max_targets`` has been reached."""
    bound = _upper_bound(rule)
    return bound is None or len(selected) < bound


def validate_rule_selection(rule: AssociationRule, selected: Sequence[str]) -> None:
    """Check one rule's selection against its bounds.

    Raises:
        CardinalityError: Fewer than ``min_targets`` or more than a positive
            ``max_targets`` targets selected
    """
    count = len(selected)
    bound = _upper_bound(rule)
    if count < rule.min_targets or (bound is not None and count > bound):
        raise CardinalityError(rule.id, count, rule.min_targets, rule.max_targets)


def validate_associations(
    applicable: Iterable[ApplicableRule],
    selections: Mapping[str, Sequence[str]],
    manual_rows: Iterable[ManualAssociationDraft],
) -> list[ValidationError]:
    """Collect every problem blocking the associations step."""
    problems: list[ValidationError] = []
    for entry in applicable:
        try:
            validate_rule_selection(entry.rule, selections.get(entry.id, ()))
        except CardinalityError as e:
            problems.append(e)

    for index, row in enumerate(manual_rows):
        if row.is_half_filled:
            problems.append(
                ValidationError(
                    "Both an association type and a target item must be selected",
                    field=f"manual_associations[{index}]",
                )
            )
    return problems


def ensure_associations_valid(
    applicable: Iterable[ApplicableRule],
    selections: Mapping[str, Sequence[str]],
    manual_rows: Iterable[ManualAssociationDraft],
) -> None:
    """Raise the first problem found by ``validate_associations``."""
    problems = validate_associations(applicable, selections, manual_rows)
    if problems:
        raise problems[0]
