# autosort_watch.py
"""Entry point to start the AutoSort workflow watcher service."""

import sys
import time

from autosort.config_loader import ConfigLoader
from autosort.dispatcher import WorkflowManager
from autosort.logger import AutoSortLogger
from autosort.watcher import WorkflowWatcher
from autosort.workflow_store import WorkflowStore


def main(config_path: str) -> int:
    config = ConfigLoader(config_path)
    settings = config.settings
    logger = AutoSortLogger(str(config.log_file))

    if not settings["watch_paths"]:
        print(f"No watch_paths configured in {config.root / 'settings.json'}")
        return 1

    manager = WorkflowManager(
        store=WorkflowStore(str(config.workflows_dir)),
        logger=logger,
        dry_run=settings["dry_run"],
    )
    manager.load_workflows()

    watch_paths = [str(config.resolve(p)) for p in settings["watch_paths"]]
    watcher = WorkflowWatcher(
        manager,
        watch_paths,
        recursive=settings["recursive"],
        logger=logger,
        settle_delay=settings["settle_delay"],
        dedup_window=settings["dedup_window"],
    )
    watcher.start()

    print(f"AutoSort watching: {', '.join(watch_paths)}")
    print(f"Workflows: {len(manager.get_workflows())} from {config.workflows_dir}")
    print(f"Log: {config.log_file}")
    if manager.is_dry_run():
        print("Dry run: no files will be changed")
    print("Press Ctrl+C to stop.\n")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    watcher.stop()
    print("\nAutoSort stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "."))
