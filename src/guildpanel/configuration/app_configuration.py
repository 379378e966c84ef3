from __future__ import annotations

import fcntl
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from guildpanel.configuration.defaults import BLOCK_COMMENTS, CONFIG_HEADER, SIDE_COMMENTS, build_default_document
from guildpanel.configuration.document import FlatDocument, flatten, get_path, is_section, iter_paths, set_path
from guildpanel.configuration.migration import plan_replay
from guildpanel.configuration.version import CURRENT_VERSION, UNVERSIONED, is_at_least
from guildpanel.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("config.yml")
BACKUP_FILENAME = "config-old.yml"
STORAGE_DIRNAME = "storage"


@dataclass(frozen=True)
class ConfigResult:
    """Outcome of a configuration I/O step.

    Startup never fails because of the config file; instead every step
    reports what it did so the caller can decide whether to log or stop.
    """

    ok: bool
    action: str
    reason: Optional[str] = None

    @classmethod
    def succeeded(cls, action: str, reason: Optional[str] = None) -> "ConfigResult":
        return cls(True, action, reason)

    @classmethod
    def failed(cls, action: str, exc: BaseException | str) -> "ConfigResult":
        return cls(False, action, str(exc))


def _dump(entry: Dict[Any, Any]) -> List[str]:
    return yaml.safe_dump(entry, sort_keys=False, default_flow_style=False, allow_unicode=True).splitlines()


def _render_section(section: Dict[Any, Any], prefix: str, depth: int, lines: List[str]) -> None:
    indent = "  " * depth
    for key, value in section.items():
        path = f"{prefix}{key}"
        if depth == 0:
            lines.append("")
        comment = BLOCK_COMMENTS.get(path)
        if comment:
            lines.append(f"{indent}# {comment}")

        if is_section(value) and value:
            # "key: null" minus the value gives the key exactly as YAML quotes it
            header = _dump({key: None})[0].rsplit(" ", 1)[0]
            lines.append(indent + header)
            _render_section(value, f"{path}.", depth + 1, lines)
            continue

        rendered = _dump({key: value})
        side = SIDE_COMMENTS.get(path)
        if side and len(rendered) == 1:
            rendered[0] = f"{rendered[0]}  # {side}"
        lines.extend(indent + line for line in rendered)


def render_document(data: Dict[str, Any]) -> str:
    """Serialize ``data`` as YAML with the file header and per-key comments."""
    lines = CONFIG_HEADER.splitlines()
    _render_section(data, "", 0, lines)
    return "\n".join(lines) + "\n"


class AppConfig:
    """YAML-backed backend configuration with schema migration.

    The object is built once at startup and handed to the components that
    need it; :meth:`init` creates ``config.yml`` with defaults on the first
    run and loads and migrates it afterwards. File access takes fcntl locks
    so a second process never reads a half-written file.
    """

    def __init__(
        self,
        config_path: Path = CONFIG_PATH,
        backup_path: Optional[Path] = None,
        storage_dir: Optional[Path] = None,
    ) -> None:
        self.config_path = Path(config_path)
        self.backup_path = Path(backup_path) if backup_path else self.config_path.with_name(BACKUP_FILENAME)
        self.storage_dir = Path(storage_dir) if storage_dir else self.config_path.parent / STORAGE_DIRNAME
        self._data: Dict[str, Any] = {}

    # --------------------------
    # Private helpers
    # --------------------------
    def _ensure_storage_dir(self) -> None:
        if self.storage_dir.exists():
            return
        try:
            self.storage_dir.mkdir(parents=True)
        except OSError as exc:
            logger.error("[APP CONFIGURATION] Could not create storage directory %s: %s", self.storage_dir, exc)

    def load_from_disk(self) -> Dict[str, Any]:
        """Read and parse the YAML file.

        Raises:
            OSError: If the file cannot be read.
            yaml.YAMLError: If the file is not valid YAML or not a mapping.
        """
        with self.config_path.open("r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                data = yaml.safe_load(f)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise yaml.YAMLError(f"{self.config_path} does not contain a mapping")
        return data

    def _backup(self) -> bool:
        if self.backup_path.exists():
            logger.warning("[APP CONFIGURATION] Backup %s already exists, keeping the older copy", self.backup_path)
            return False
        try:
            shutil.copyfile(self.config_path, self.backup_path)
        except OSError as exc:
            logger.warning("[APP CONFIGURATION] Could not copy %s to %s: %s", self.config_path, self.backup_path, exc)
            logger.warning("[APP CONFIGURATION] This means the config file is not backed up!")
            return False
        logger.info("[APP CONFIGURATION] Backed up old configuration to %s", self.backup_path)
        return True

    # --------------------------
    # Lifecycle
    # --------------------------
    def init(self) -> ConfigResult:
        """Create the config file with defaults, or load and migrate it.

        I/O and YAML errors are logged and reported in the result; they never
        propagate. A malformed ``config.version`` does raise ``ValueError``.
        """
        self._ensure_storage_dir()

        if not self.config_path.exists():
            self._data = build_default_document()
            result = self.save()
            if result.ok:
                logger.info("[APP CONFIGURATION] Created default configuration at %s", self.config_path)
            return ConfigResult(result.ok, "create", result.reason)

        try:
            self._data = self.load_from_disk()
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return ConfigResult.failed("load", exc)

        return self.migrate_old_config()

    def migrate_old_config(self) -> ConfigResult:
        """Rewrite an older config file into the current schema.

        Files already at :data:`CURRENT_VERSION` or newer are left untouched.
        Older files are backed up, recreated from defaults, and every leaf
        value of the old file is written back through the migration rules.
        """
        config_version = self.version

        if is_at_least(config_version, CURRENT_VERSION):
            return ConfigResult.succeeded("migrate", f"already at {config_version}")

        logger.info("[APP CONFIGURATION] Migrating config from %s to %s", config_version, CURRENT_VERSION)
        snapshot: FlatDocument = list(iter_paths(self._data))

        self._backup()

        try:
            self.config_path.unlink()
        except OSError as exc:
            logger.error("[APP CONFIGURATION] Could not replace %s: %s", self.config_path, exc)
            return ConfigResult.failed("migrate", exc)

        self.init()

        replayed = 0
        for key, value in plan_replay(snapshot, config_version):
            self.set(key, value)
            replayed += 1

        result = self.save()
        if result.ok:
            logger.info("[APP CONFIGURATION] Migration finished, %d values carried over", replayed)
        return ConfigResult(result.ok, "migrate", result.reason)

    def save(self) -> ConfigResult:
        try:
            with self.config_path.open("w", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    f.write(render_document(self._data))
                    f.flush()
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to save config %s: %s", self.config_path, exc)
            return ConfigResult.failed("save", exc)
        return ConfigResult.succeeded("save")

    # --------------------------
    # Public API
    # --------------------------
    @property
    def data(self) -> Dict[str, Any]:
        """Return the loaded document.

        This is the internal mapping, not a copy; use :meth:`set` to change it.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``hikari.sql.user``."""
        return get_path(self._data, key, default)

    def set(self, key: str, value: Any) -> None:
        set_path(self._data, key, value)

    def values(self) -> FlatDocument:
        """Return the document as ordered ``(dotted_key, leaf_value)`` pairs."""
        return flatten(self._data)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def version(self) -> str:
        """Return the declared schema version, ``3.0.0`` when the file has none."""
        version = self.get("config.version")
        return UNVERSIONED if version is None else str(version)

    @property
    def storage_engine(self) -> str:
        """Return ``sqlite`` or ``mariadb`` (lower-cased)."""
        return str(self.get("hikari.misc.storage", "sqlite")).lower()

    @property
    def storage_file(self) -> Path:
        """Return the SQLite database path, relative paths resolved against the config directory."""
        path = Path(str(self.get("hikari.misc.storageFile", "storage/Ree6.db")))
        if not path.is_absolute():
            path = self.config_path.parent / path
        return path

    @property
    def webinterface_hostname(self) -> str:
        return str(self.get("webinterface.hostname", ""))

    @property
    def webinterface_using_ssl(self) -> bool:
        return bool(self.get("webinterface.usingSSL", True))

    @property
    def discord_redirect(self) -> str:
        return str(self.get("webinterface.discordRedirect", ""))

    @property
    def twitch_redirect(self) -> str:
        return str(self.get("webinterface.twitchRedirect", ""))

    @property
    def webinterface_origin(self) -> str:
        """Return the panel's origin, e.g. ``https://cp.ree6.de``."""
        scheme = "https" if self.webinterface_using_ssl else "http"
        return f"{scheme}://{self.webinterface_hostname}"
