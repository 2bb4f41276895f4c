"""Shared fixtures: a small taxonomy with attribute groups and rules.

Layout::

    item types   T1 (binds G1)        T2 (association targets)
    categories   c-root (binds G2) → C1 (binds G1 required) → C2
    families     F1 (under C1) → F2
    groups       G1 {A1 optional}, G2 {A2 required}, G3 {A3} (unbound)
    association  AT1: T1 → T2, rule R1 (wildcard scope, 1..2 targets)
"""

import pytest

from pim_console.core.lookups import LookupResult
from pim_console.schemas.entities import (
    AssociationRule,
    AssociationType,
    Attribute,
    AttributeGroup,
    AttributeGroupBinding,
    AttributeType,
    Category,
    Family,
    Item,
    ItemType,
)


@pytest.fixture
def item_types() -> list[ItemType]:
    return [
        ItemType(id="t1", key="product", name="Product", attribute_group_ids=["g1"]),
        ItemType(id="t2", key="accessory", name="Accessory"),
    ]


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="c-root", name="Root", attribute_group_ids=["g2"]),
        Category(
            id="c1",
            name="Shoes",
            parent_category_id="c-root",
            hierarchy_path=["c-root"],
            attribute_group_bindings=[
                AttributeGroupBinding(attribute_group_id="g1", required=True),
            ],
        ),
        Category(
            id="c2",
            name="Running shoes",
            parent_category_id="c1",
            hierarchy_path=["c1", "c-root"],
        ),
    ]


@pytest.fixture
def families() -> list[Family]:
    return [
        Family(id="f1", name="Trail", category_id="c1"),
        Family(id="f2", name="Trail pro", parent_family_id="f1", hierarchy_path=["f1"]),
    ]


@pytest.fixture
def attribute_groups() -> list[AttributeGroup]:
    return [
        AttributeGroup(
            id="g1",
            name="Basics",
            order=1,
            attributes=[Attribute(id="a1", name="Color", type=AttributeType.TEXT, required=False)],
        ),
        AttributeGroup(
            id="g2",
            name="Compliance",
            order=0,
            attributes=[Attribute(id="a2", name="Origin", type=AttributeType.TEXT, required=True)],
        ),
        AttributeGroup(
            id="g3",
            name="Unbound",
            order=2,
            attributes=[Attribute(id="a3", name="Ignored")],
        ),
    ]


@pytest.fixture
def association_types() -> list[AssociationType]:
    return [
        AssociationType(
            id="at1",
            key="accessories",
            name="Accessories",
            source_item_type_id="t1",
            target_item_type_id="t2",
        ),
    ]


@pytest.fixture
def rule_r1() -> AssociationRule:
    return AssociationRule(id="r1", association_type_id="at1", min_targets=1, max_targets=2)


@pytest.fixture
def association_rules(rule_r1: AssociationRule) -> list[AssociationRule]:
    return [rule_r1]


@pytest.fixture
def target_items() -> list[Item]:
    return [
        Item(id="i1", item_type_id="t2", category_id="c1"),
        Item(id="i2", item_type_id="t2", category_id="c2"),
        Item(id="i3", item_type_id="t2"),
        Item(id="i4", item_type_id="t1"),
    ]


@pytest.fixture
def lookups(
    item_types: list[ItemType],
    categories: list[Category],
    families: list[Family],
    attribute_groups: list[AttributeGroup],
    association_types: list[AssociationType],
    association_rules: list[AssociationRule],
    target_items: list[Item],
) -> LookupResult:
    return LookupResult(
        item_types=item_types,
        categories=categories,
        families=families,
        attribute_groups=attribute_groups,
        association_types=association_types,
        association_rules=association_rules,
        items=target_items,
    )
