"""Tests for view model schemas."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from pim_console.schemas.entities import AssociationRule, Category, Item, ItemStatus
from pim_console.schemas.users import UserUpdateRequest
from pim_console.schemas.workflow import ActionType, WorkflowNodeConfig


class TestViewModel:
    """ViewModel accepts snake_case or camelCase and serializes camelCase."""

    def test_accepts_camel_case(self) -> None:
        category = Category.model_validate({"id": "c1", "parentCategoryId": "c0", "hierarchyPath": ["c0"]})

        assert category.parent_category_id == "c0"
        assert category.hierarchy_path == ["c0"]

    def test_dumps_camel_case(self) -> None:
        dumped = Category(id="c1", parent_category_id="c0").model_dump(by_alias=True)

        assert dumped["parentCategoryId"] == "c0"
        assert "parent_category_id" not in dumped

    def test_unknown_keys_ignored(self) -> None:
        item = Item.model_validate({"id": "i1", "itemTypeId": "t1", "somethingNew": 1})

        assert item.status is ItemStatus.DRAFT

    def test_rule_defaults(self) -> None:
        rule = AssociationRule(id="r1")

        assert rule.applies_to == "source"
        assert rule.min_targets == 0
        assert rule.max_targets is None

    def test_rule_applies_to_restricted(self) -> None:
        with pytest.raises(PydanticValidationError):
            AssociationRule(id="r1", applies_to="both")


class TestWorkflowNodeConfig:
    def test_parses_backend_json(self) -> None:
        config = WorkflowNodeConfig.model_validate(
            {"actionType": "webhook", "actionConfig": {"url": "https://api.example.com/hook"}}
        )

        assert config.action_type is ActionType.WEBHOOK
        assert config.action_config["url"] == "https://api.example.com/hook"

    def test_unknown_action_type_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            WorkflowNodeConfig.model_validate({"actionType": "teleport"})

    def test_twenty_one_action_types(self) -> None:
        assert len(ActionType) == 21


class TestUserUpdateRequest:
    def test_partial_dump(self) -> None:
        request = UserUpdateRequest(last_name="Lovelace", notifications_enabled=False)

        assert request.model_dump(by_alias=True, exclude_none=True) == {
            "lastName": "Lovelace",
            "notificationsEnabled": False,
        }
