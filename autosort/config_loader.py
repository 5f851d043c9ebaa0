# autosort/config_loader.py
"""Load and cache JSON configuration files."""

import json
import pathlib

from autosort.errors import ConfigError


DEFAULT_SETTINGS = {
    "watch_paths": [],
    "recursive": False,
    "workflows_path": "workflows",
    "store_path": "autosort_state.json",
    "log_path": "autosort.log",
    "dry_run": False,
    "content_sampling_enabled": True,
    "settle_delay": 1.0,
    "dedup_window": 5.0,
}


class ConfigLoader:
    """Loads config files from the config directory and caches them in memory."""

    def __init__(self, config_path: str):
        self._root = pathlib.Path(config_path)
        self._cache: dict = {}

    @property
    def root(self) -> pathlib.Path:
        return self._root

    def _load(self, relative_path: str) -> dict:
        """Load a JSON file relative to the config root, with caching."""
        if relative_path not in self._cache:
            full = self._root / relative_path
            try:
                self._cache[relative_path] = json.loads(
                    full.read_text(encoding="utf-8")
                )
            except json.JSONDecodeError as e:
                raise ConfigError(f"invalid JSON in {full}: {e}") from e
        return self._cache[relative_path]

    def _save(self, relative_path: str, data: dict):
        """Write JSON data to a config file and update the cache."""
        full = self._root / relative_path
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(
            json.dumps(data, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        self._cache[relative_path] = data

    def reload(self, relative_path: str | None = None):
        """Clear cache for one file or all files, forcing a fresh read."""
        if relative_path:
            self._cache.pop(relative_path, None)
        else:
            self._cache.clear()

    def resolve(self, path: str) -> pathlib.Path:
        """Resolve a settings path; relative paths are taken from the config root."""
        p = pathlib.Path(path).expanduser()
        return p if p.is_absolute() else self._root / p

    @property
    def settings(self) -> dict:
        """settings.json merged over the defaults; a missing file yields the defaults."""
        if not (self._root / "settings.json").exists():
            return dict(DEFAULT_SETTINGS)
        return {**DEFAULT_SETTINGS, **self._load("settings.json")}

    def save_settings(self, settings: dict):
        """Persist settings.json."""
        self._save("settings.json", settings)

    @property
    def workflows_dir(self) -> pathlib.Path:
        return self.resolve(self.settings["workflows_path"])

    @property
    def store_file(self) -> pathlib.Path:
        return self.resolve(self.settings["store_path"])

    @property
    def log_file(self) -> pathlib.Path:
        return self.resolve(self.settings["log_path"])
