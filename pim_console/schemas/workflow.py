"""Workflow node configuration schemas.

An action node carries an ``action_type`` tag and an opaque
``action_config`` bag whose keys depend on the tag.

Example JSON:
    {
        "actionType": "webhook",
        "actionConfig": {
            "url": "https://api.example.com/hook",
            "method": "POST",
            "bodyJson": "{\\"itemId\\": \\"{{trigger.item.id}}\\"}"
        }
    }
"""

from enum import Enum
from typing import Any

from pydantic import Field

from pim_console.schemas.common import ViewModel


class ActionType(str, Enum):
    """Every action an automation node can run."""

    # Items
    CREATE_ITEM = "create_item"
    UPDATE_ITEM = "update_item"
    DELETE_ITEM = "delete_item"
    CLONE_ITEM = "clone_item"
    FIND_ITEMS = "find_items"
    BULK_UPDATE_ITEMS = "bulk_update_items"
    UPDATE_FIELD = "update_field"
    ASSIGN_ATTRIBUTE = "assign_attribute"

    # Boards
    CREATE_BOARD_TASK = "create_board_task"
    UPDATE_BOARD_TASK = "update_board_task"
    MOVE_BOARD_TASK = "move_board_task"
    ASSIGN_BOARD_TASK = "assign_board_task"
    ARCHIVE_BOARD_TASK = "archive_board_task"

    # Notifications
    SEND_NOTIFICATION = "send_notification"
    SEND_EMAIL = "send_email"

    # External systems
    WEBHOOK = "webhook"
    HTTP_REQUEST = "http_request"

    # Data
    TRANSFORM_DATA = "transform_data"
    SET_VARIABLE = "set_variable"
    LOG = "log"
    FIRE_EVENT = "fire_event"


class WorkflowNodeConfig(ViewModel):
    """Configuration of one action node.

    Attributes:
        action_type: Selected action, None until the user picks one
        action_config: Field values keyed by the template's field keys
    """

    label: str | None = None
    action_type: ActionType | None = None
    action_config: dict[str, Any] = Field(default_factory=dict)
