"""Request and result models shared by the parser and the dispatcher."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Operation(str, Enum):
    LIST = "list"
    CREATE = "create"
    DELETE = "delete"


# operation -> (required fields, forbidden fields)
FIELD_RULES: Dict[Operation, tuple[tuple[str, ...], tuple[str, ...]]] = {
    Operation.LIST: ((), ("topic", "partitions", "replication_factor", "topic_props")),
    Operation.CREATE: (("topic", "partitions", "replication_factor"), ()),
    Operation.DELETE: (("topic",), ("partitions", "replication_factor", "topic_props")),
}

RULE_MESSAGES: Dict[tuple[Operation, str], str] = {
    (Operation.LIST, "forbidden"):
        "The --list operation CANNOT take any '--topic/--partitions/--replication-factor/--topic-props' option!",
    (Operation.CREATE, "required"):
        "The --create operation MUST be with '--topic/--partitions/--replication-factor' options!",
    (Operation.DELETE, "required"):
        "The --delete operation MUST be with '--topic' option!",
    (Operation.DELETE, "forbidden"):
        "The --delete operation CANNOT take any of '--partitions/--replication-factor/--topic-props' options!",
}


def rule_violation(operation: Operation, present: set[str]) -> Optional[str]:
    """Return the message for the first broken rule, or None when the
    set of present fields fits the operation."""
    required, forbidden = FIELD_RULES[operation]
    if any(name not in present for name in required):
        return RULE_MESSAGES[(operation, "required")]
    if any(name in present for name in forbidden):
        return RULE_MESSAGES[(operation, "forbidden")]
    return None


class TopicRequest(BaseModel):
    """One validated command-line request.

    Attributes
    ----------
    bootstrap_server : str
        Broker address used to seed the admin client.
    operation : Operation
        Exactly one of list/create/delete.
    topic : str | None
        Topic name; required for create and delete.
    partitions, replication_factor : int | None
        Positive integers; required for create only.
    admin_config : dict[str, str]
        Admin-client properties in command-line order.
    topic_props : dict[str, str] | None
        Topic-level properties; only for create. ``None`` means the option
        was not given at all.
    """

    model_config = ConfigDict(frozen=True)

    bootstrap_server: str = Field(..., min_length=1, examples=["broker:9092"])
    operation: Operation
    topic: Optional[str] = Field(None, min_length=1)
    partitions: Optional[int] = Field(None, ge=1, le=2**31 - 1)
    replication_factor: Optional[int] = Field(None, ge=1, le=2**15 - 1)
    admin_config: Dict[str, str] = Field(default_factory=dict)
    topic_props: Optional[Dict[str, str]] = None

    @model_validator(mode="after")
    def _check_operation_fields(self) -> "TopicRequest":
        present = {
            name
            for name in ("topic", "partitions", "replication_factor", "topic_props")
            if getattr(self, name) is not None
        }
        message = rule_violation(self.operation, present)
        if message:
            raise ValueError(message)
        return self


class OperationResult(BaseModel):
    """Outcome of a single admin call; rendered once, then discarded."""

    ok: bool
    detail: Optional[str] = None
    topics: Optional[List[str]] = None

    @classmethod
    def failure(cls, detail: str) -> "OperationResult":
        return cls(ok=False, detail=detail)
