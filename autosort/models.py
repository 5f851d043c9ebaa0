# autosort/models.py
"""Data model shared by the workflow engine and the content subsystem."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def _snake(name: str) -> str:
    """Turn 'FileCreated' / 'GreaterThan' / 'file-created' into snake case."""
    name = name.strip().replace("-", "_").replace(" ", "_")
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()


class _LenientEnum(str, Enum):
    """String enum that also accepts CamelCase spellings from hand-written files."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = _snake(value)
            for member in cls:
                if member.value == key or key == f"{member.value}_{cls._suffix()}":
                    return member
        return None

    @classmethod
    def _suffix(cls) -> str:
        return ""


class TriggerType(_LenientEnum):
    FILE_CREATED = "file_created"
    FILE_MODIFIED = "file_modified"
    FILE_PATTERN_MATCH = "file_pattern_match"
    MANUAL = "manual"
    SCHEDULED = "scheduled"

    @classmethod
    def _suffix(cls) -> str:
        return "trigger"


class ConditionType(_LenientEnum):
    FILE_SIZE = "file_size"
    FILE_NAME = "file_name"
    FILE_TYPE = "file_type"
    FILE_AGE = "file_age"

    @classmethod
    def _suffix(cls) -> str:
        return "condition"


class Operator(_LenientEnum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    MATCHES_REGEX = "matches_regex"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class ActionType(_LenientEnum):
    MOVE = "move"
    COPY = "copy"
    RENAME = "rename"
    TAG = "tag"
    DELETE = "delete"
    EXECUTE = "execute"

    @classmethod
    def _suffix(cls) -> str:
        return "action"


class EventOp(str, Enum):
    CREATE = "create"
    WRITE = "write"
    OTHER = "other"


# -- Workflows --


@dataclass
class Trigger:
    type: TriggerType
    pattern: str = ""
    schedule: str = ""

    def to_dict(self) -> dict:
        data = {"type": self.type.value}
        if self.pattern:
            data["pattern"] = self.pattern
        if self.schedule:
            data["schedule"] = self.schedule
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Trigger:
        return cls(
            type=TriggerType(data["type"]),
            pattern=data.get("pattern", "") or "",
            schedule=data.get("schedule", "") or "",
        )


@dataclass
class Condition:
    """
    A predicate over file metadata.

    ``type`` is kept as the raw string when it is not a known condition type,
    so the evaluator can treat it as never matching instead of failing to load.
    """

    type: ConditionType | str
    operator: Operator | str
    value: str
    value_unit: str = ""
    field: str = ""

    def to_dict(self) -> dict:
        data = {
            "type": getattr(self.type, "value", self.type),
            "field": self.field,
            "operator": getattr(self.operator, "value", self.operator),
            "value": self.value,
        }
        if self.value_unit:
            data["value_unit"] = self.value_unit
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Condition:
        raw_type = data.get("type", "")
        raw_op = data.get("operator", "")
        try:
            ctype = ConditionType(raw_type)
        except ValueError:
            ctype = raw_type
        try:
            op = Operator(raw_op)
        except ValueError:
            op = raw_op
        return cls(
            type=ctype,
            operator=op,
            value=str(data.get("value", "")),
            value_unit=data.get("value_unit", data.get("valueUnit", "")) or "",
            field=data.get("field", "") or "",
        )


@dataclass
class Action:
    type: ActionType
    target: str = ""
    options: dict[str, str] = field(default_factory=dict)

    def option_enabled(self, key: str) -> bool:
        return str(self.options.get(key, "")).lower() == "true"

    def to_dict(self) -> dict:
        data = {"type": self.type.value, "target": self.target}
        if self.options:
            data["options"] = dict(self.options)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Action:
        options = data.get("options") or {}
        return cls(
            type=ActionType(data["type"]),
            target=data.get("target", data.get("command", "")) or "",
            options={k: str(v).lower() if isinstance(v, bool) else str(v)
                     for k, v in options.items()},
        )


@dataclass
class Workflow:
    id: str
    name: str
    trigger: Trigger
    actions: list[Action] = field(default_factory=list)
    conditions: list[Condition] = field(default_factory=list)
    enabled: bool = True
    priority: int = 0
    description: str = ""

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "trigger": self.trigger.to_dict(),
            "conditions": [c.to_dict() for c in self.conditions],
            "actions": [a.to_dict() for a in self.actions],
        }
        if self.description:
            data["description"] = self.description
        if self.priority:
            data["priority"] = self.priority
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Workflow:
        return cls(
            id=data.get("id", "") or "",
            name=data.get("name", "") or "",
            description=data.get("description", "") or "",
            enabled=bool(data.get("enabled", False)),
            priority=int(data.get("priority", 0) or 0),
            trigger=Trigger.from_dict(data.get("trigger") or {"type": "manual"}),
            conditions=[Condition.from_dict(c) for c in data.get("conditions") or []],
            actions=[Action.from_dict(a) for a in data.get("actions") or []],
        )


@dataclass
class WorkflowResult:
    workflow_id: str
    workflow_name: str
    file_path: str
    success: bool = True
    message: str = ""
    error: Exception | None = None
    effects: list[str] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> dict:
        return {
            "workflow_id": self.workflow_id,
            "workflow_name": self.workflow_name,
            "file_path": self.file_path,
            "success": self.success,
            "message": self.message,
            "error": str(self.error) if self.error else None,
            "effects": list(self.effects),
            "dry_run": self.dry_run,
        }


@dataclass(frozen=True)
class FileEvent:
    path: str
    op: EventOp


# -- Content analysis --


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_ts(value: str | None) -> datetime:
    return datetime.fromisoformat(value) if value else datetime.now()


@dataclass
class ContentSignature:
    id: str
    file_path: str
    mime_type: str
    signature_type: str
    signature: str = ""
    keywords: list[str] = field(default_factory=list)
    file_size: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "file_path": self.file_path,
            "mime_type": self.mime_type,
            "signature_type": self.signature_type,
            "signature": self.signature,
            "keywords": list(self.keywords),
            "file_size": self.file_size,
            "created_at": _ts(self.created_at),
            "updated_at": _ts(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ContentSignature:
        return cls(
            id=data["id"],
            file_path=data["file_path"],
            mime_type=data.get("mime_type", ""),
            signature_type=data.get("signature_type", "generic"),
            signature=data.get("signature", ""),
            keywords=list(data.get("keywords") or []),
            file_size=int(data.get("file_size", 0)),
            created_at=_parse_ts(data.get("created_at")),
            updated_at=_parse_ts(data.get("updated_at")),
        )


@dataclass
class ClassifierCriteria:
    extension_patterns: list[str] = field(default_factory=list)
    name_patterns: list[str] = field(default_factory=list)
    content_signatures: list[str] = field(default_factory=list)
    mime_types: list[str] = field(default_factory=list)
    min_file_size: int = 0
    max_file_size: int = 0

    def to_dict(self) -> dict:
        return {
            "extension_patterns": list(self.extension_patterns),
            "name_patterns": list(self.name_patterns),
            "content_signatures": list(self.content_signatures),
            "mime_types": list(self.mime_types),
            "min_file_size": self.min_file_size,
            "max_file_size": self.max_file_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ClassifierCriteria:
        return cls(
            extension_patterns=list(data.get("extension_patterns") or []),
            name_patterns=list(data.get("name_patterns") or []),
            content_signatures=list(data.get("content_signatures") or []),
            mime_types=list(data.get("mime_types") or []),
            min_file_size=int(data.get("min_file_size", 0)),
            max_file_size=int(data.get("max_file_size", 0)),
        )


@dataclass
class FileClassification:
    id: str
    name: str
    criteria: ClassifierCriteria = field(default_factory=ClassifierCriteria)
    description: str = ""
    confidence_threshold: float = 0.5
    system_defined: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "criteria": self.criteria.to_dict(),
            "confidence_threshold": self.confidence_threshold,
            "system_defined": self.system_defined,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FileClassification:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            criteria=ClassifierCriteria.from_dict(data.get("criteria") or {}),
            confidence_threshold=float(data.get("confidence_threshold", 0.5)),
            system_defined=bool(data.get("system_defined", False)),
        )


@dataclass
class ClassificationMatch:
    file_path: str
    classification_id: str
    confidence: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "classification_id": self.classification_id,
            "confidence": self.confidence,
            "timestamp": _ts(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ClassificationMatch:
        return cls(
            file_path=data["file_path"],
            classification_id=data["classification_id"],
            confidence=float(data["confidence"]),
            timestamp=_parse_ts(data.get("timestamp")),
        )


@dataclass
class ContentRelationship:
    id: str
    source_id: str
    target_id: str
    similarity: float
    relation_type: str
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "similarity": self.similarity,
            "relation_type": self.relation_type,
            "created_at": _ts(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ContentRelationship:
        return cls(
            id=data["id"],
            source_id=data["source_id"],
            target_id=data["target_id"],
            similarity=float(data["similarity"]),
            relation_type=data.get("relation_type", ""),
            created_at=_parse_ts(data.get("created_at")),
        )


@dataclass
class ContentGroup:
    id: str
    name: str
    description: str = ""
    group_type: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "group_type": self.group_type,
            "created_at": _ts(self.created_at),
            "updated_at": _ts(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ContentGroup:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            group_type=data.get("group_type", ""),
            created_at=_parse_ts(data.get("created_at")),
            updated_at=_parse_ts(data.get("updated_at")),
        )


@dataclass
class ContentGroupMember:
    group_id: str
    signature_id: str
    membership_score: float = 1.0
    joined_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "signature_id": self.signature_id,
            "membership_score": self.membership_score,
            "joined_at": _ts(self.joined_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ContentGroupMember:
        return cls(
            group_id=data["group_id"],
            signature_id=data["signature_id"],
            membership_score=float(data.get("membership_score", 1.0)),
            joined_at=_parse_ts(data.get("joined_at")),
        )
