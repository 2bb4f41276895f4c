"""Attribute-group requirement aggregation.

Groups are admitted by the item type and by every node of the selected
category and family lineages. A group bound with ``required=True`` anywhere
in that set promotes all of its attributes to required.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pim_console.schemas.entities import Attribute, AttributeGroup, TaxonomyNode


@dataclass(frozen=True)
class ResolvedAttribute:
    """An attribute with its effective requirement.

    Attributes:
        attribute: Definition as fetched
        required: ``group_is_required OR attribute.required`` over every
            admitting group
        group_ids: Admitted groups containing the attribute, in order seen
    """

    attribute: Attribute
    required: bool
    group_ids: tuple[str, ...]

    @property
    def id(self) -> str:
        return self.attribute.id


@dataclass(frozen=True)
class ResolvedAttributes:
    attributes: tuple[ResolvedAttribute, ...] = ()
    allowed_group_ids: frozenset[str] = field(default_factory=frozenset)
    required_group_ids: frozenset[str] = field(default_factory=frozenset)

    def get(self, attribute_id: str) -> ResolvedAttribute | None:
        for resolved in self.attributes:
            if resolved.id == attribute_id:
                return resolved
        return None

    @property
    def required(self) -> list[ResolvedAttribute]:
        return [a for a in self.attributes if a.required]

    @property
    def optional(self) -> list[ResolvedAttribute]:
        return [a for a in self.attributes if not a.required]

    def missing_required_values(self, values: Mapping[str, Any]) -> list[str]:
        """Ids of required attributes with no usable value."""
        return [
            a.id
            for a in self.attributes
            if a.required and _is_blank(values.get(a.id))
        ]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def collect_group_ids(nodes: Iterable[TaxonomyNode]) -> tuple[set[str], set[str]]:
    """Collect (allowed, required) group ids from taxonomy nodes."""
    allowed: set[str] = set()
    required: set[str] = set()
    for node in nodes:
        allowed.update(node.attribute_group_ids)
        for binding in node.attribute_group_bindings:
            allowed.add(binding.attribute_group_id)
            if binding.required:
                required.add(binding.attribute_group_id)
    return allowed, required


def resolve_attributes(
    item_type: TaxonomyNode | None,
    category_lineage: Iterable[TaxonomyNode],
    family_lineage: Iterable[TaxonomyNode],
    groups: Iterable[AttributeGroup],
) -> ResolvedAttributes:
    """Merge attribute groups for a taxonomy selection.

    Args:
        item_type: Selected item type (None before selection)
        category_lineage: Selected category and its ancestors
        family_lineage: Selected family and its ancestors
        groups: Every fetched attribute group, with attributes

    Returns:
        Attributes of every admitted group, de-duplicated by id. Group order
        follows ``AttributeGroup.order``, attribute order follows the group.
    """
    nodes: list[TaxonomyNode] = [item_type] if item_type is not None else []
    nodes.extend(category_lineage)
    nodes.extend(family_lineage)
    allowed, required_groups = collect_group_ids(nodes)

    merged: dict[str, ResolvedAttribute] = {}
    admitted = sorted(
        (g for g in groups if g.id in allowed),
        key=lambda g: g.order,
    )

    for group in admitted:
        group_required = group.id in required_groups
        for attribute in group.attributes:
            effective = group_required or attribute.required
            existing = merged.get(attribute.id)
            if existing is None:
                merged[attribute.id] = ResolvedAttribute(
                    attribute=attribute,
                    required=effective,
                    group_ids=(group.id,),
                )
            else:
                merged[attribute.id] = ResolvedAttribute(
                    attribute=existing.attribute,
                    required=existing.required or effective,
                    group_ids=(*existing.group_ids, group.id),
                )

    return ResolvedAttributes(
        attributes=tuple(merged.values()),
        allowed_group_ids=frozenset(allowed),
        required_group_ids=frozenset(required_groups),
    )
