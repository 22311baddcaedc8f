"""Site configuration loading for Quire.

This module decodes the site's configuration document (TOML, or YAML by
file suffix) into a read-only SiteConfig record and validates it.

Key functions:
- parse_config: Decode configuration text into a SiteConfig.
- load_config: Load a configuration file from disk.
- find_config: Locate the configuration file in a project root.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Lookup order for configuration files in a project root
CONFIG_FILENAMES = (
    "hugo.toml",
    "hugo.yaml",
    "hugo.yml",
    "config.toml",
    "config.yaml",
    "config.yml",
)

DEFAULT_PAGINATE = 10

# Top-level keys are matched case-insensitively, as Hugo does
_TOP_LEVEL_KEYS = {
    "baseurl",
    "languagecode",
    "title",
    "theme",
    "copyright",
    "paginate",
    "pagination",
    "pygmentsstyle",
    "pygmentscodefences",
    "pygmentscodefencesguesssyntax",
    "params",
    "menu",
    "social",
}


@dataclass(frozen=True)
class MenuEntry:
    """One entry of the main menu.

    Attributes:
        name: Label shown in the menu.
        url: Target URL.
        weight: Display position; lower weights come first.
    """

    name: str
    url: str
    weight: int


@dataclass(frozen=True)
class SocialLink:
    """One social profile link.

    Attributes:
        name: Display name.
        icon: Icon identifier understood by the theme.
        url: Profile URL.
    """

    name: str
    icon: str
    url: str


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide configuration, read-only during a build.

    Attributes:
        base_url: Absolute base URL of the published site.
        title: Site title.
        language_code: Language tag (e.g. 'en-us').
        theme: Name of the external rendering theme.
        copyright: Copyright notice.
        paginate: Items per listing page.
        menu_entries: Main menu entries, ascending by weight.
        social_links: Social links in source order.
        params: Remaining theme parameters from the ``params`` table.
        pygments_style: Code highlighting style.
        pygments_code_fences: Whether fenced code blocks are highlighted.
        pygments_guess_syntax: Whether unlabelled fences guess their language.
    """

    base_url: str
    title: str
    language_code: str = ""
    theme: str = ""
    copyright: str = ""
    paginate: int = DEFAULT_PAGINATE
    menu_entries: tuple[MenuEntry, ...] = ()
    social_links: tuple[SocialLink, ...] = ()
    params: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    pygments_style: str = ""
    pygments_code_fences: bool = False
    pygments_guess_syntax: bool = False

    @property
    def subtitle(self) -> str:
        return str(self.params.get("subtitle", ""))

    def absolute_url(self, path: str) -> str:
        """Join a site-relative path onto the base URL."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


def find_config(project_root: Path) -> Path:
    """Locate the configuration file in a project root.

    Raises:
        ConfigError: If none of the known configuration filenames exists.
    """
    for name in CONFIG_FILENAMES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    raise ConfigError(
        f"no configuration file found (looked for {', '.join(CONFIG_FILENAMES)})",
        project_root,
    )


def load_config(path: Path) -> SiteConfig:
    """Load and validate a configuration file.

    Args:
        path: Path to a ``.toml``, ``.yaml`` or ``.yml`` file.

    Returns:
        Validated SiteConfig.

    Raises:
        ConfigError: If the file cannot be decoded or fails validation.
    """
    fmt = "yaml" if path.suffix.lower() in (".yaml", ".yml") else "toml"
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"not valid UTF-8: {exc.reason}", path) from exc
    try:
        config = parse_config(text, fmt)
    except ConfigError as exc:
        exc.with_source(path)
        raise
    logger.debug("Loaded configuration from %s", path)
    return config


def parse_config(text: str, fmt: str = "toml") -> SiteConfig:
    """Decode configuration text into a SiteConfig.

    Args:
        text: Raw configuration document.
        fmt: 'toml' or 'yaml'.

    Returns:
        Validated SiteConfig.

    Raises:
        ConfigError: On undecodable input, missing ``baseURL``/``title``,
            a non-positive ``paginate``, incomplete menu or social entries,
            or duplicate menu weights.
    """
    data = _lower_keys(_decode(text, fmt))

    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        logger.debug("Ignoring configuration keys: %s", ", ".join(unknown))

    params = data.get("params") or {}
    if not isinstance(params, dict):
        raise ConfigError("params must be a table")
    params = dict(params)
    social = params.pop("social", None) or []
    if not isinstance(social, list):
        raise ConfigError("params.social must be a list of tables")

    return SiteConfig(
        base_url=_base_url(data),
        title=_required_string(data, "title"),
        language_code=_optional_string(data, "languageCode"),
        theme=_optional_string(data, "theme"),
        copyright=_optional_string(data, "copyright"),
        paginate=_paginate(data),
        menu_entries=_menu_entries(data),
        social_links=_social_links(social + _list(data, "social")),
        params=params,
        pygments_style=_optional_string(data, "pygmentsstyle"),
        pygments_code_fences=bool(data.get("pygmentscodefences", False)),
        pygments_guess_syntax=bool(data.get("pygmentscodefencesguesssyntax", False)),
    )


def _decode(text: str, fmt: str) -> dict[str, Any]:
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            data = tomllib.loads(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"invalid {fmt.upper()} configuration: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping")
    return data


def _lower_keys(mapping: dict[str, Any]) -> dict[str, Any]:
    return {str(key).lower(): value for key, value in mapping.items()}


def _required_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key.lower())
    if value is None:
        raise ConfigError(f"missing required key '{key}'")
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value.strip()


def _optional_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key.lower(), "")
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def _list(data: dict[str, Any], key: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of tables")
    return value


def _base_url(data: dict[str, Any]) -> str:
    base_url = _required_string(data, "baseURL")
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"'baseURL' must be an absolute http(s) URL, got {base_url!r}")
    return base_url


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"'{key}' must be greater than zero, got {value}")
    return value


def _paginate(data: dict[str, Any]) -> int:
    if "paginate" in data:
        return _positive_int(data["paginate"], "paginate")
    pagination = data.get("pagination")
    if isinstance(pagination, dict):
        pagination = _lower_keys(pagination)
    if isinstance(pagination, dict) and "pagersize" in pagination:
        return _positive_int(pagination["pagersize"], "pagination.pagerSize")
    return DEFAULT_PAGINATE


def _entry_field(entry: Any, key: str, where: str) -> str:
    if not isinstance(entry, dict):
        raise ConfigError(f"{where} must be a table")
    value = _lower_keys(entry).get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where} is missing a non-empty '{key}'")
    return value.strip()


def _menu_entries(data: dict[str, Any]) -> tuple[MenuEntry, ...]:
    menu = data.get("menu") or {}
    if not isinstance(menu, dict):
        raise ConfigError("'menu' must be a table")
    raw = _lower_keys(menu).get("main") or []
    if not isinstance(raw, list):
        raise ConfigError("'menu.main' must be a list of tables")

    entries: list[MenuEntry] = []
    by_weight: dict[int, str] = {}
    for index, entry in enumerate(raw):
        where = f"menu.main[{index}]"
        name = _entry_field(entry, "name", where)
        url = _entry_field(entry, "url", where)
        weight = _lower_keys(entry).get("weight", 0)
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise ConfigError(f"{where} weight must be an integer, got {weight!r}")
        if weight in by_weight:
            raise ConfigError(
                f"menu entries '{by_weight[weight]}' and '{name}' share weight {weight}"
            )
        by_weight[weight] = name
        entries.append(MenuEntry(name=name, url=url, weight=weight))
    return tuple(sorted(entries, key=lambda e: e.weight))


def _social_links(raw: list) -> tuple[SocialLink, ...]:
    links: list[SocialLink] = []
    for index, entry in enumerate(raw):
        where = f"social[{index}]"
        links.append(
            SocialLink(
                name=_entry_field(entry, "name", where),
                icon=_entry_field(entry, "icon", where),
                url=_entry_field(entry, "url", where),
            )
        )
    return tuple(links)
