# autosort/store.py
"""Classification registry and content-analysis records, kept in one JSON state file."""

import json
import pathlib
import threading

from autosort.errors import RepositoryError
from autosort.models import (
    ClassificationMatch,
    ContentGroup,
    ContentGroupMember,
    ContentRelationship,
    ContentSignature,
    FileClassification,
)


BUILTIN_CLASSIFICATIONS = [
    {
        "id": "documents",
        "name": "Documents",
        "description": "Word-processor documents and PDFs",
        "criteria": {
            "extension_patterns": [".pdf", ".doc", ".docx", ".odt", ".rtf"],
            "mime_types": [
                "application/pdf",
                "application/msword",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "application/vnd.oasis.opendocument.text",
                "text/rtf",
            ],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "spreadsheets",
        "name": "Spreadsheets",
        "description": "Spreadsheets and tabular data",
        "criteria": {
            "extension_patterns": [".xls", ".xlsx", ".ods", ".csv", ".tsv"],
            "mime_types": [
                "application/vnd.ms-excel",
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                "application/vnd.oasis.opendocument.spreadsheet",
                "text/csv",
            ],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "images",
        "name": "Images",
        "description": "Photos, screenshots and graphics",
        "criteria": {
            "extension_patterns": [".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff", ".svg"],
            "name_patterns": ["img_", "dsc", "screenshot", "photo"],
            "mime_types": [
                "image/jpeg", "image/png", "image/gif", "image/bmp",
                "image/webp", "image/tiff", "image/svg+xml",
            ],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "text_notes",
        "name": "Text Notes",
        "description": "Plain-text and Markdown notes",
        "criteria": {
            "extension_patterns": [".txt", ".md", ".markdown", ".rst"],
            "name_patterns": ["note", "readme", "todo"],
            "mime_types": ["text/plain", "text/markdown", "text/x-rst"],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "invoices",
        "name": "Invoices",
        "description": "Invoices, receipts and bills",
        "criteria": {
            "extension_patterns": [".pdf", ".txt"],
            "name_patterns": ["invoice", "receipt", "bill"],
            "content_signatures": ["invoice", "total", "amount", "due"],
            "mime_types": ["application/pdf", "text/plain"],
        },
        "confidence_threshold": 0.7,
    },
    {
        "id": "archives",
        "name": "Archives",
        "description": "Compressed archives and disk images",
        "criteria": {
            "extension_patterns": [".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar", ".iso"],
            "mime_types": [
                "application/zip", "application/x-tar", "application/gzip",
                "application/x-bzip2", "application/x-xz", "application/x-7z-compressed",
                "application/vnd.rar", "application/x-iso9660-image",
            ],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "audio",
        "name": "Audio",
        "description": "Music and recordings",
        "criteria": {
            "extension_patterns": [".mp3", ".flac", ".wav", ".ogg", ".m4a", ".aac"],
            "mime_types": ["audio/mpeg", "audio/flac", "audio/x-wav", "audio/ogg", "audio/mp4"],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "video",
        "name": "Video",
        "description": "Movies and screen recordings",
        "criteria": {
            "extension_patterns": [".mp4", ".mkv", ".mov", ".avi", ".webm"],
            "mime_types": ["video/mp4", "video/x-matroska", "video/quicktime", "video/x-msvideo", "video/webm"],
        },
        "confidence_threshold": 0.4,
    },
    {
        "id": "source_code",
        "name": "Source Code",
        "description": "Program sources and scripts",
        "criteria": {
            "extension_patterns": [".py", ".go", ".js", ".ts", ".java", ".c", ".h", ".rs", ".sh", ".rb"],
            "mime_types": ["text/x-python", "text/x-script.python", "text/x-c", "text/x-shellscript", "text/x-java"],
            "content_signatures": ["import", "def", "func", "return"],
        },
        "confidence_threshold": 0.4,
    },
]


def _empty_state() -> dict:
    return {
        "classifications": {},
        "signatures": {},
        "matches": {},
        "relationships": {},
        "groups": {},
        "group_members": {},
    }


class ContentStore:
    """
    Thread-safe store for classifications, signatures, matches,
    relationships and groups.

    With a state path every mutation is written through to that JSON file;
    without one the store lives in memory only. Built-in classifications are
    seeded on construction when missing.
    """

    def __init__(self, state_path: str | None = None):
        self._state_file = pathlib.Path(state_path) if state_path else None
        self._lock = threading.RLock()
        self._state: dict = self._load_state()
        self._seed_builtins()

    # -- State persistence --

    def _load_state(self) -> dict:
        state = _empty_state()
        if self._state_file and self._state_file.exists():
            try:
                loaded = json.loads(self._state_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise RepositoryError(
                    "failed to read content store", operation="load", path=self._state_file
                ) from e
            state.update(loaded)
        return state

    def _save_state(self):
        if not self._state_file:
            return
        self._state_file.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._state_file.with_name(self._state_file.name + ".tmp")
        try:
            tmp.write_text(json.dumps(self._state, indent=2), encoding="utf-8")
            tmp.replace(self._state_file)
        except OSError as e:
            raise RepositoryError(
                "failed to write content store", operation="save", path=self._state_file
            ) from e

    def _seed_builtins(self):
        with self._lock:
            added = False
            for data in BUILTIN_CLASSIFICATIONS:
                if data["id"] not in self._state["classifications"]:
                    classification = FileClassification.from_dict({**data, "system_defined": True})
                    self._state["classifications"][data["id"]] = classification.to_dict()
                    added = True
            if added:
                self._save_state()

    # -- Classifications --

    def get_all_classifications(self) -> list[FileClassification]:
        """All classifications ordered by name."""
        with self._lock:
            items = [FileClassification.from_dict(d) for d in self._state["classifications"].values()]
        return sorted(items, key=lambda c: c.name)

    def get_classification(self, classification_id: str) -> FileClassification:
        with self._lock:
            data = self._state["classifications"].get(classification_id)
        if data is None:
            raise RepositoryError(
                "classification not found",
                operation="get_classification",
                id=classification_id,
            )
        return FileClassification.from_dict(data)

    def save_classification(self, classification: FileClassification):
        if not classification.id:
            raise RepositoryError("classification ID is required", operation="save_classification")
        with self._lock:
            self._state["classifications"][classification.id] = classification.to_dict()
            self._save_state()

    def delete_classification(self, classification_id: str):
        """Delete a user classification; built-ins are protected."""
        with self._lock:
            data = self._state["classifications"].get(classification_id)
            if data is None:
                raise RepositoryError(
                    "classification not found",
                    operation="delete_classification",
                    id=classification_id,
                )
            if data.get("system_defined"):
                raise RepositoryError(
                    "cannot delete system-defined classification",
                    operation="delete_classification",
                    id=classification_id,
                )
            del self._state["classifications"][classification_id]
            self._save_state()

    # -- Content signatures --

    def save_content_signature(self, signature: ContentSignature):
        """Store a signature, replacing any older signature for the same path."""
        with self._lock:
            stale = [
                sig_id for sig_id, d in self._state["signatures"].items()
                if d["file_path"] == signature.file_path and sig_id != signature.id
            ]
            for sig_id in stale:
                self._drop_signature(sig_id)
            self._state["signatures"][signature.id] = signature.to_dict()
            self._save_state()

    def get_content_signature(self, signature_id: str) -> ContentSignature:
        with self._lock:
            data = self._state["signatures"].get(signature_id)
        if data is None:
            raise RepositoryError(
                "content signature not found",
                operation="get_content_signature",
                id=signature_id,
            )
        return ContentSignature.from_dict(data)

    def get_content_signature_by_path(self, file_path: str) -> ContentSignature | None:
        with self._lock:
            for data in self._state["signatures"].values():
                if data["file_path"] == file_path:
                    return ContentSignature.from_dict(data)
        return None

    def get_content_signatures_by_type(self, signature_type: str, limit: int = 100) -> list[ContentSignature]:
        """Most recently updated first."""
        with self._lock:
            items = [
                ContentSignature.from_dict(d)
                for d in self._state["signatures"].values()
                if d["signature_type"] == signature_type
            ]
        items.sort(key=lambda s: s.updated_at, reverse=True)
        return items[:limit] if limit > 0 else items

    def delete_content_signature(self, signature_id: str):
        with self._lock:
            if signature_id not in self._state["signatures"]:
                raise RepositoryError(
                    "content signature not found",
                    operation="delete_content_signature",
                    id=signature_id,
                )
            self._drop_signature(signature_id)
            self._save_state()

    def _drop_signature(self, signature_id: str):
        """Remove a signature and everything that references it. Caller holds the lock."""
        self._state["signatures"].pop(signature_id, None)
        self._state["relationships"] = {
            rid: r for rid, r in self._state["relationships"].items()
            if r["source_id"] != signature_id and r["target_id"] != signature_id
        }
        for members in self._state["group_members"].values():
            members.pop(signature_id, None)

    # -- Classification matches --

    def save_classification_match(self, match: ClassificationMatch):
        """Store a match; one match per (file, classification) is kept."""
        with self._lock:
            matches = self._state["matches"].setdefault(match.file_path, [])
            matches[:] = [m for m in matches if m["classification_id"] != match.classification_id]
            matches.append(match.to_dict())
            self._save_state()

    def get_file_classifications(self, file_path: str) -> list[ClassificationMatch]:
        with self._lock:
            return [ClassificationMatch.from_dict(d) for d in self._state["matches"].get(file_path, [])]

    def clear_file_classifications(self, file_path: str):
        with self._lock:
            if self._state["matches"].pop(file_path, None) is not None:
                self._save_state()

    # -- Content relationships --

    def save_content_relationship(self, relationship: ContentRelationship):
        with self._lock:
            self._state["relationships"][relationship.id] = relationship.to_dict()
            self._save_state()

    def get_content_relationships(
        self, signature_id: str, min_similarity: float = 0.0, limit: int = 0
    ) -> list[ContentRelationship]:
        """Relationships originating at *signature_id*, highest similarity first."""
        with self._lock:
            items = [
                ContentRelationship.from_dict(d)
                for d in self._state["relationships"].values()
                if d["source_id"] == signature_id and d["similarity"] >= min_similarity
            ]
        items.sort(key=lambda r: r.similarity, reverse=True)
        return items[:limit] if limit > 0 else items

    def delete_content_relationship(self, relationship_id: str):
        with self._lock:
            if self._state["relationships"].pop(relationship_id, None) is None:
                raise RepositoryError(
                    "content relationship not found",
                    operation="delete_content_relationship",
                    id=relationship_id,
                )
            self._save_state()

    # -- Content groups --

    def save_content_group(self, group: ContentGroup):
        with self._lock:
            self._state["groups"][group.id] = group.to_dict()
            self._state["group_members"].setdefault(group.id, {})
            self._save_state()

    def get_content_group(self, group_id: str) -> ContentGroup:
        with self._lock:
            data = self._state["groups"].get(group_id)
        if data is None:
            raise RepositoryError("content group not found", operation="get_content_group", id=group_id)
        return ContentGroup.from_dict(data)

    def get_content_groups(self, group_type: str = "", limit: int = 0) -> list[ContentGroup]:
        with self._lock:
            items = [
                ContentGroup.from_dict(d) for d in self._state["groups"].values()
                if not group_type or d["group_type"] == group_type
            ]
        items.sort(key=lambda g: g.name)
        return items[:limit] if limit > 0 else items

    def add_to_content_group(self, group_id: str, signature_id: str, membership_score: float = 1.0):
        with self._lock:
            if group_id not in self._state["groups"]:
                raise RepositoryError(
                    "content group not found", operation="add_to_content_group", id=group_id
                )
            if signature_id not in self._state["signatures"]:
                raise RepositoryError(
                    "content signature not found",
                    operation="add_to_content_group",
                    id=signature_id,
                )
            member = ContentGroupMember(group_id, signature_id, membership_score)
            self._state["group_members"].setdefault(group_id, {})[signature_id] = member.to_dict()
            self._save_state()

    def remove_from_content_group(self, group_id: str, signature_id: str):
        with self._lock:
            members = self._state["group_members"].get(group_id, {})
            if members.pop(signature_id, None) is not None:
                self._save_state()

    def get_content_group_members(self, group_id: str) -> list[ContentGroupMember]:
        with self._lock:
            members = self._state["group_members"].get(group_id, {})
            return [ContentGroupMember.from_dict(d) for d in members.values()]

    def delete_content_group(self, group_id: str):
        with self._lock:
            if self._state["groups"].pop(group_id, None) is None:
                raise RepositoryError(
                    "content group not found", operation="delete_content_group", id=group_id
                )
            self._state["group_members"].pop(group_id, None)
            self._save_state()
