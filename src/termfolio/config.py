"""Configuration loading and directory resolution for termfolio."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

try:  # pragma: no cover - exercised on Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python 3.9/3.10
    import tomli as tomllib  # type: ignore[no-redef]

from termfolio.errors import ProjectConfigError
from termfolio.kernel.cells import DEFAULT_USER_AGENT
from termfolio.kernel.content import DEFAULT_JOKE_URL, DEFAULT_WAIFU_URL
from termfolio.kernel.theme import DEFAULT_THEME, get_theme, theme_ids
from termfolio.kernel.window import DEFAULT_HEIGHT, DEFAULT_WIDTH, clamp_size

CONFIG_DIR_NAME = ".termfolio"
CONFIG_FILE_NAME = "config.toml"
LOGS_DIR_NAME = "logs"

DEFAULT_CELL_WIDTH_PX = 10
DEFAULT_CELL_HEIGHT_PX = 20
DEFAULT_FETCH_TIMEOUT_SEC = 10.0
DEFAULT_LOGS_ENABLED = True
DEFAULT_LOGS_MAX_FILE_BYTES = 10 * 1024 * 1024
DEFAULT_LOGS_MAX_FILES = 5


@dataclass
class ProjectConfig:
    theme: str = DEFAULT_THEME.value
    window_width: int = DEFAULT_WIDTH
    window_height: int = DEFAULT_HEIGHT
    cell_width_px: int = DEFAULT_CELL_WIDTH_PX
    cell_height_px: int = DEFAULT_CELL_HEIGHT_PX
    fetch_timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC
    joke_url: str = DEFAULT_JOKE_URL
    waifu_url: str = DEFAULT_WAIFU_URL
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES


@dataclass
class Settings:
    project_root: Path
    config_root: Path
    theme: str = DEFAULT_THEME.value
    window_width: int = DEFAULT_WIDTH
    window_height: int = DEFAULT_HEIGHT
    cell_width_px: int = DEFAULT_CELL_WIDTH_PX
    cell_height_px: int = DEFAULT_CELL_HEIGHT_PX
    fetch_timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC
    user_agent: str = DEFAULT_USER_AGENT
    joke_url: str = DEFAULT_JOKE_URL
    waifu_url: str = DEFAULT_WAIFU_URL
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES

    @property
    def logs_dir(self) -> Path:
        return self.config_root / LOGS_DIR_NAME


def resolve_project_root(workspace_dir: Optional[Path] = None) -> Path:
    return (workspace_dir or Path.cwd()).resolve()


def resolve_project_config_root(workspace_dir: Optional[Path] = None) -> Path:
    return resolve_project_root(workspace_dir) / CONFIG_DIR_NAME


def project_config_exists(workspace_dir: Optional[Path] = None) -> bool:
    config_root = resolve_project_config_root(workspace_dir)
    return config_root.is_dir() and (config_root / CONFIG_FILE_NAME).is_file()


def _safe_positive_int(value: object, default: int) -> int:
    try:
        converted = int(value)
    except (TypeError, ValueError):
        return default
    if converted <= 0:
        return default
    return converted


def _safe_positive_float(value: object, default: float) -> float:
    try:
        converted = float(value)
    except (TypeError, ValueError):
        return default
    if converted <= 0:
        return default
    return converted


def _safe_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _safe_theme(value: object, default: str) -> str:
    normalized = str(value or "").strip().lower()
    if normalized not in theme_ids():
        return default
    return normalized


def _safe_url(value: object, default: str) -> str:
    text = str(value or "").strip()
    if not text.startswith(("http://", "https://")):
        return default
    return text


def _section(parsed: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    current: object = parsed
    for key in keys:
        if not isinstance(current, dict):
            return {}
        current = current.get(key)
    if not isinstance(current, dict):
        return {}
    return current


def _parse_project_config_data(parsed: Dict[str, Any]) -> ProjectConfig:
    defaults = ProjectConfig()
    terminal = _section(parsed, "terminal")
    window = _section(parsed, "window")
    fetch = _section(parsed, "fetch")
    logs = _section(parsed, "runtime", "logs")

    width, height = clamp_size(
        _safe_positive_int(window.get("width"), defaults.window_width),
        _safe_positive_int(window.get("height"), defaults.window_height),
    )

    return ProjectConfig(
        theme=_safe_theme(terminal.get("theme"), defaults.theme),
        window_width=width,
        window_height=height,
        cell_width_px=_safe_positive_int(window.get("cell_width_px"), defaults.cell_width_px),
        cell_height_px=_safe_positive_int(window.get("cell_height_px"), defaults.cell_height_px),
        fetch_timeout_sec=_safe_positive_float(fetch.get("timeout_sec"), defaults.fetch_timeout_sec),
        joke_url=_safe_url(fetch.get("joke_url"), defaults.joke_url),
        waifu_url=_safe_url(fetch.get("waifu_url"), defaults.waifu_url),
        logs_enabled=_safe_bool(logs.get("enabled"), defaults.logs_enabled),
        logs_max_file_bytes=_safe_positive_int(logs.get("max_file_bytes"), defaults.logs_max_file_bytes),
        logs_max_files=_safe_positive_int(logs.get("max_files"), defaults.logs_max_files),
    )


def _render_project_config(config: ProjectConfig) -> str:
    def _toml_string(value: str) -> str:
        return '"{0}"'.format(str(value or "").replace("\\", "\\\\").replace('"', '\\"'))

    lines: List[str] = [
        "[terminal]",
        "theme = {0}".format(_toml_string(config.theme)),
        "",
        "[window]",
        "width = {0}".format(int(config.window_width)),
        "height = {0}".format(int(config.window_height)),
        "cell_width_px = {0}".format(int(config.cell_width_px)),
        "cell_height_px = {0}".format(int(config.cell_height_px)),
        "",
        "[fetch]",
        "timeout_sec = {0:g}".format(float(config.fetch_timeout_sec)),
        "joke_url = {0}".format(_toml_string(config.joke_url)),
        "waifu_url = {0}".format(_toml_string(config.waifu_url)),
        "",
        "[runtime.logs]",
        "enabled = {0}".format(str(bool(config.logs_enabled)).lower()),
        "max_file_bytes = {0}".format(int(config.logs_max_file_bytes)),
        "max_files = {0}".format(int(config.logs_max_files)),
    ]
    return "\n".join(lines) + "\n"


def initialize_project_config(workspace_dir: Optional[Path] = None, force: bool = False) -> Path:
    project_root = resolve_project_root(workspace_dir)
    config_root = resolve_project_config_root(project_root)
    config_file = config_root / CONFIG_FILE_NAME

    if config_root.exists():
        if not force:
            raise ProjectConfigError(
                "configuration directory already exists: {0}".format(config_root),
                path=str(config_root),
            )
        shutil.rmtree(config_root)

    (config_root / LOGS_DIR_NAME).mkdir(parents=True, exist_ok=True)
    config_file.write_text(_render_project_config(ProjectConfig()), encoding="utf-8")
    return config_root


def load_project_config(config_root: Optional[Path] = None, workspace_dir: Optional[Path] = None) -> ProjectConfig:
    """Read ``config.toml``; a missing file yields the built-in defaults."""

    resolved_root = (config_root or resolve_project_config_root(workspace_dir)).resolve()
    config_file = resolved_root / CONFIG_FILE_NAME
    if not config_file.is_file():
        return ProjectConfig()

    try:
        parsed = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ProjectConfigError(
            "invalid config file: {0}".format(config_file),
            path=str(config_file),
            reason=str(exc),
        ) from exc

    if not isinstance(parsed, dict):
        raise ProjectConfigError("invalid config file: {0}".format(config_file), path=str(config_file))

    return _parse_project_config_data(parsed)


def load_settings(workspace_dir: Optional[Path] = None, theme: Optional[str] = None) -> Settings:
    """Resolve settings from project config + explicit overrides."""

    project_root = resolve_project_root(workspace_dir)
    config_root = resolve_project_config_root(project_root)
    project_config = load_project_config(config_root=config_root)

    resolved_theme = project_config.theme
    if theme is not None:
        # explicit overrides are validated strictly; UnknownThemeError propagates
        resolved_theme = get_theme(theme).preset_id

    return Settings(
        project_root=project_root,
        config_root=config_root,
        theme=resolved_theme,
        window_width=project_config.window_width,
        window_height=project_config.window_height,
        cell_width_px=project_config.cell_width_px,
        cell_height_px=project_config.cell_height_px,
        fetch_timeout_sec=project_config.fetch_timeout_sec,
        joke_url=project_config.joke_url,
        waifu_url=project_config.waifu_url,
        # no debug log until `init` has created the config directory
        logs_enabled=project_config.logs_enabled and project_config_exists(project_root),
        logs_max_file_bytes=project_config.logs_max_file_bytes,
        logs_max_files=project_config.logs_max_files,
    )
