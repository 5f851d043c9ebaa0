# autosort/classifier.py
"""Score files against the classification registry."""

import os

from autosort.errors import AnalysisError, RepositoryError
from autosort.models import ClassificationMatch, ContentSignature, FileClassification

# Per-signal weights
EXTENSION_WEIGHT = 0.4
NAME_WEIGHT = 0.3
MIME_WEIGHT = 0.2
CONTENT_WEIGHT = 0.1

# Related files consulted for borrowed classifications
RELATED_MIN_SIMILARITY = 0.7
RELATED_LIMIT = 5


def score_classification(
    classification: FileClassification,
    file_path: str,
    signature: ContentSignature | None,
) -> float:
    """
    Sum the weighted signals a file shows for one classification.

    Returns:
        Confidence in [0.0, 1.0]. MIME and content signals only count when a
        signature is available.
    """
    criteria = classification.criteria
    name = os.path.basename(file_path)
    extension = os.path.splitext(name)[1]
    confidence = 0.0

    if extension in criteria.extension_patterns:
        confidence += EXTENSION_WEIGHT

    lowered = name.lower()
    if any(pattern.lower() in lowered for pattern in criteria.name_patterns if pattern):
        confidence += NAME_WEIGHT

    if signature is not None:
        if signature.mime_type in criteria.mime_types:
            confidence += MIME_WEIGHT
        if any(marker in signature.signature for marker in criteria.content_signatures if marker):
            confidence += CONTENT_WEIGHT

    return round(confidence, 10)


class ClassificationEngine:
    """Classifies files and caches accepted matches in the content store."""

    def __init__(self, store, analyzer, logger=None):
        self._store = store
        self._analyzer = analyzer
        self._logger = logger

    def classify_file(self, file_path: str) -> list[ClassificationMatch]:
        """
        Classify a file.

        Stored matches for the path are returned as-is. Otherwise every
        registered classification is scored directly, then related files lend
        their own matches scaled by similarity.
        """
        cached = self._store.get_file_classifications(file_path)
        if cached:
            if self._logger:
                self._logger.log_classification(file_path, cached, cached=True)
            return cached

        signature = None
        try:
            signature = self._analyzer.analyze_file(file_path)
        except AnalysisError as e:
            if self._logger:
                self._logger.log_warning(
                    "content analysis failed, classifying without content",
                    file=file_path,
                    error=str(e),
                )

        classifications = self._store.get_all_classifications()
        matches = []
        for classification in classifications:
            confidence = score_classification(classification, file_path, signature)
            if confidence >= classification.confidence_threshold:
                match = ClassificationMatch(file_path, classification.id, confidence)
                self._store.save_classification_match(match)
                matches.append(match)

        if signature is not None:
            matches.extend(self._borrow_from_related(file_path, classifications, matches))

        if self._logger:
            self._logger.log_classification(file_path, matches)
        return matches

    def _borrow_from_related(
        self,
        file_path: str,
        classifications: list[FileClassification],
        matches: list[ClassificationMatch],
    ) -> list[ClassificationMatch]:
        by_id = {c.id: c for c in classifications}
        present = {m.classification_id for m in matches}
        borrowed = []

        try:
            related = self._analyzer.find_related_files(
                file_path, RELATED_MIN_SIMILARITY, RELATED_LIMIT
            )
        except AnalysisError as e:
            if self._logger:
                self._logger.log_warning("related-file lookup failed", file=file_path, error=str(e))
            return borrowed

        for relationship in related:
            try:
                target = self._store.get_content_signature(relationship.target_id)
            except RepositoryError as e:
                if self._logger:
                    self._logger.log_warning(
                        "related signature missing",
                        file=file_path,
                        signature_id=relationship.target_id,
                        error=str(e),
                    )
                continue

            for related_match in self._store.get_file_classifications(target.file_path):
                classification = by_id.get(related_match.classification_id)
                if classification is None or classification.id in present:
                    continue
                confidence = related_match.confidence * relationship.similarity
                if confidence < classification.confidence_threshold:
                    continue
                match = ClassificationMatch(file_path, classification.id, confidence)
                self._store.save_classification_match(match)
                borrowed.append(match)
                present.add(classification.id)

        return borrowed

    def suggest_destination(self, file_path: str, default_dir: str) -> str:
        """
        Suggest a directory for a file from its best classification.

        Returns:
            ``default_dir/<classification id>`` for the highest-confidence
            match, or *default_dir* when nothing matches or the lookup fails.
        """
        try:
            matches = self.classify_file(file_path)
        except (AnalysisError, RepositoryError) as e:
            if self._logger:
                self._logger.log_warning("destination suggestion failed", file=file_path, error=str(e))
            return default_dir
        if not matches:
            return default_dir

        best = max(matches, key=lambda m: m.confidence)
        try:
            classification = self._store.get_classification(best.classification_id)
        except RepositoryError:
            return default_dir
        return os.path.join(default_dir, classification.id)

    def reclassify_file(self, file_path: str) -> list[ClassificationMatch]:
        """Drop stored matches for the file and classify it from scratch."""
        self._store.clear_file_classifications(file_path)
        return self.classify_file(file_path)
