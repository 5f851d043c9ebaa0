# autosort_classify.py
"""Entry point to classify files and list their related files."""

import argparse
import sys

from autosort.classifier import ClassificationEngine
from autosort.config_loader import ConfigLoader
from autosort.content import ContentAnalyzer
from autosort.errors import AnalysisError, RepositoryError
from autosort.logger import AutoSortLogger
from autosort.store import ContentStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Classify files against the AutoSort registry.")
    parser.add_argument("files", nargs="+", help="files to classify")
    parser.add_argument("--config", default=".", help="config directory holding settings.json")
    parser.add_argument("--reclassify", action="store_true", help="ignore stored matches")
    parser.add_argument("--suggest", metavar="DIR", help="also suggest a destination under DIR")
    args = parser.parse_args(argv)

    config = ConfigLoader(args.config)
    settings = config.settings
    logger = AutoSortLogger(str(config.log_file))
    store = ContentStore(str(config.store_file))
    analyzer = ContentAnalyzer(
        store, logger, content_sampling_enabled=settings["content_sampling_enabled"]
    )
    engine = ClassificationEngine(store, analyzer, logger)
    names = {c.id: c.name for c in store.get_all_classifications()}

    for file_path in args.files:
        classify = engine.reclassify_file if args.reclassify else engine.classify_file
        matches = classify(file_path)
        print(f"\n{file_path}")
        if not matches:
            print("  (no classification)")
        for match in sorted(matches, key=lambda m: m.confidence, reverse=True):
            print(f"  {names.get(match.classification_id, match.classification_id)}: {match.confidence:.2f}")
        if args.suggest:
            print(f"  -> {engine.suggest_destination(file_path, args.suggest)}")

        try:
            related = analyzer.find_related_files(file_path)
        except (AnalysisError, RepositoryError) as e:
            logger.log_error(file_path, str(e))
            continue
        for relationship in related:
            target = store.get_content_signature(relationship.target_id)
            print(f"  ~ {target.file_path} ({relationship.relation_type}, {relationship.similarity:.2f})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
