"""Tests for workflow action configuration forms."""

import pytest

from pim_console.core.action_config import (
    ACTION_CATALOG,
    ActionCategory,
    ActionFormRegistry,
    FieldSpec,
    catalog_by_category,
    change_action_type,
    default_action_registry,
    missing_required_fields,
    render_action_form,
    set_attribute_override,
    update_action_config,
)
from pim_console.domain.exceptions import RegistryIncompleteError, UnknownActionTypeError
from pim_console.schemas.workflow import ActionType, WorkflowNodeConfig


def keys(fields: list[FieldSpec]) -> list[str]:
    return [f.key for f in fields]


class TestCatalog:
    def test_every_action_type_listed_once(self) -> None:
        listed = [entry.action_type for entry in ACTION_CATALOG]

        assert sorted(listed) == sorted(ActionType)

    def test_grouped_in_category_order(self) -> None:
        grouped = catalog_by_category()

        assert list(grouped) == list(ActionCategory)
        assert [e.action_type for e in grouped[ActionCategory.EXTERNAL]] == [
            ActionType.WEBHOOK,
            ActionType.HTTP_REQUEST,
        ]


class TestActionFormRegistry:
    """Tests for ActionFormRegistry."""

    def test_default_registry_complete(self) -> None:
        default_action_registry.verify_complete()

        assert set(default_action_registry.available()) == set(ActionType)

    def test_incomplete_registry(self) -> None:
        registry = ActionFormRegistry()
        registry.register(ActionType.LOG, [FieldSpec("message", "Message", required=True)])

        with pytest.raises(RegistryIncompleteError) as exc_info:
            registry.verify_complete()

        assert "webhook" in exc_info.value.missing
        assert "log" not in exc_info.value.missing

    def test_duplicate_keys_rejected(self) -> None:
        with pytest.raises(ValueError):
            ActionFormRegistry().register(ActionType.LOG, [FieldSpec("a", "A"), FieldSpec("a", "B")])

    def test_unregistered_type_raises(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.LOG)

        with pytest.raises(UnknownActionTypeError):
            render_action_form(config, ActionFormRegistry())


class TestRenderActionForm:
    """Tests for render_action_form."""

    def test_no_action_selected(self) -> None:
        assert render_action_form(WorkflowNodeConfig()) == []

    def test_webhook_fields(self) -> None:
        fields = render_action_form(WorkflowNodeConfig(action_type=ActionType.WEBHOOK))

        assert keys(fields) == ["url", "method", "headersJson", "bodyJson"]
        assert fields[1].default == "POST"

    def test_http_request_auth_fields_follow_auth_type(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.HTTP_REQUEST)
        assert "authToken" not in keys(render_action_form(config))

        bearer = update_action_config(config, "authType", "bearer")
        assert "authToken" in keys(render_action_form(bearer))

        basic = update_action_config(config, "authType", "basic")
        assert {"authUsername", "authPassword"} <= set(keys(render_action_form(basic)))
        assert "authToken" not in keys(render_action_form(basic))

    def test_transform_defaults_to_pick(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.TRANSFORM_DATA)

        assert "pickKeys" in keys(render_action_form(config))
        assert "filterKey" not in keys(render_action_form(config))

        merge = update_action_config(config, "operation", "merge")
        assert "targetExpression" in keys(render_action_form(merge))
        assert "pickKeys" not in keys(render_action_form(merge))

    def test_create_item_fields_unfold(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.CREATE_ITEM)
        assert keys(render_action_form(config)) == ["itemTypeId"]

        config = update_action_config(config, "itemTypeId", "t1")
        assert keys(render_action_form(config)) == ["itemTypeId", "categoryId", "attributes"]

        config = update_action_config(config, "categoryId", "c1")
        assert keys(render_action_form(config)) == ["itemTypeId", "categoryId", "familyId", "attributes"]


class TestReducers:
    """Tests for config reducers."""

    def test_change_action_type_resets_bag(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.WEBHOOK, action_config={"url": "https://x"})

        changed = change_action_type(config, "log")

        assert changed.action_type is ActionType.LOG
        assert changed.action_config == {}
        assert config.action_config == {"url": "https://x"}

    def test_change_action_type_to_none(self) -> None:
        assert change_action_type(WorkflowNodeConfig(action_type=ActionType.LOG), None).action_type is None

    def test_update_writes_key(self) -> None:
        config = update_action_config(WorkflowNodeConfig(action_type=ActionType.LOG), "message", "hi")

        assert config.action_config == {"message": "hi"}

    def test_create_item_cascade(self) -> None:
        config = WorkflowNodeConfig(
            action_type=ActionType.CREATE_ITEM,
            action_config={"itemTypeId": "t1", "categoryId": "c1", "familyId": "f1", "attributes": {"a1": "x"}},
        )

        family_changed = update_action_config(config, "familyId", "f2")
        assert family_changed.action_config["categoryId"] == "c1"
        assert family_changed.action_config["attributes"] == {}

        category_changed = update_action_config(config, "categoryId", "c2")
        assert category_changed.action_config["familyId"] == ""
        assert category_changed.action_config["attributes"] == {}

        type_changed = update_action_config(config, "itemTypeId", "t2")
        assert type_changed.action_config == {"itemTypeId": "t2", "attributes": {}}

    def test_attribute_override_keys(self) -> None:
        clone = set_attribute_override(WorkflowNodeConfig(action_type=ActionType.CLONE_ITEM), "color", "red")
        create = set_attribute_override(WorkflowNodeConfig(action_type=ActionType.CREATE_ITEM), "color", "red")

        assert clone.action_config == {"overrides": {"color": "red"}}
        assert create.action_config == {"attributes": {"color": "red"}}


class TestMissingRequiredFields:
    def test_blank_required_fields(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.SEND_EMAIL, action_config={"to": "a@b.c", "subject": " "})

        assert missing_required_fields(config) == ["subject", "body"]

    def test_hidden_required_fields_ignored(self) -> None:
        config = WorkflowNodeConfig(action_type=ActionType.CREATE_ITEM)

        assert missing_required_fields(config) == ["itemTypeId"]
