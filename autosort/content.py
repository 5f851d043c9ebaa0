# autosort/content.py
"""Content analyzer: signatures, similarity and related-file discovery on top of the content store."""

import os
import uuid
from datetime import datetime

from autosort.errors import AnalysisError, INVALID_OPERATION
from autosort.models import ContentGroup, ContentRelationship, ContentSignature
from autosort.signatures import generate_signature
from autosort.similarity import compare_signatures

# Candidates fetched per related-files search
CANDIDATE_LIMIT = 100


class ContentAnalyzer:
    """Analyzes files into signatures and relates them to each other."""

    def __init__(self, store, logger=None, content_sampling_enabled: bool = True):
        self._store = store
        self._logger = logger
        self.content_sampling_enabled = content_sampling_enabled

    def analyze_file(self, file_path: str) -> ContentSignature:
        """
        Return the signature for a file.

        A stored signature is reused while the file has not been modified
        since it was computed. Fresh signatures are persisted only when
        content sampling is enabled.

        Raises AnalysisError.
        """
        cached = self._store.get_content_signature_by_path(file_path)
        if cached is not None:
            try:
                modified = datetime.fromtimestamp(os.stat(file_path).st_mtime)
            except OSError:
                modified = None
            if modified is not None and modified < cached.updated_at:
                return cached

        signature = generate_signature(file_path)
        if cached is not None:
            signature.id = cached.id
            signature.created_at = cached.created_at

        if self.content_sampling_enabled:
            self._store.save_content_signature(signature)
        if self._logger:
            self._logger.log_signature(
                file_path, signature.id, signature.signature_type, signature.mime_type
            )
        return signature

    def compare_similarity(self, sig_a: ContentSignature, sig_b: ContentSignature) -> tuple[float, str]:
        return compare_signatures(sig_a, sig_b)

    def find_related_files(
        self, file_path: str, min_similarity: float = 0.5, limit: int = 10
    ) -> list[ContentRelationship]:
        """
        Find stored files whose content resembles *file_path*.

        Previously recorded relationships are returned when any exist;
        otherwise same-type signatures are compared and every hit at or
        above *min_similarity* is recorded.

        Returns:
            Relationships sorted by similarity, highest first, at most *limit*.
        """
        signature = self.analyze_file(file_path)

        existing = self._store.get_content_relationships(signature.id, min_similarity, limit)
        if existing:
            return existing

        candidates = self._store.get_content_signatures_by_type(
            signature.signature_type, CANDIDATE_LIMIT
        )
        related = []
        checked = 0
        for candidate in candidates:
            if candidate.id == signature.id or candidate.file_path == file_path:
                continue
            checked += 1
            try:
                similarity, relation = compare_signatures(signature, candidate)
            except AnalysisError as e:
                if self._logger:
                    self._logger.log_warning(
                        "failed to compare signatures",
                        file=file_path,
                        candidate=candidate.file_path,
                        error=str(e),
                    )
                continue
            if similarity < min_similarity:
                continue

            relationship = ContentRelationship(
                id=str(uuid.uuid4()),
                source_id=signature.id,
                target_id=candidate.id,
                similarity=similarity,
                relation_type=relation,
            )
            if self.content_sampling_enabled:
                self._store.save_content_relationship(relationship)
            related.append(relationship)

        related.sort(key=lambda r: r.similarity, reverse=True)
        if limit > 0:
            related = related[:limit]

        if self._logger:
            self._logger.log_related_files(file_path, checked, len(related))
        return related

    def create_content_group(
        self, name: str, description: str, group_type: str, file_paths: list[str]
    ) -> ContentGroup:
        """
        Create a group holding the signatures of *file_paths*.

        Every file is analyzed first; members join with a score of 1.0.
        """
        if not name:
            raise AnalysisError("group name is required", kind=INVALID_OPERATION)
        if not file_paths:
            raise AnalysisError("group needs at least one file", kind=INVALID_OPERATION)

        signatures = [self.analyze_file(path) for path in file_paths]
        for signature in signatures:
            if self._store.get_content_signature_by_path(signature.file_path) is None:
                self._store.save_content_signature(signature)

        group = ContentGroup(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            group_type=group_type,
        )
        self._store.save_content_group(group)
        for signature in signatures:
            self._store.add_to_content_group(group.id, signature.id, 1.0)

        if self._logger:
            self._logger.log_content_group(group.id, name, len(signatures))
        return group
