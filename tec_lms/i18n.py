"""Project-level i18n: reads from ``tec_lms/locales/<lang>.json``.

One JSON tree per language, nested to any depth, addressed with dot-separated
key paths.  The trees are loaded once at import and never mutated.

Fallback chain:  requested language tree → Khmer tree → the key path itself.

Usage::

    from tec_lms.i18n import translate

    translate('dashboard.admin.title', 'en')    # "Admin Dashboard"
    translate('dashboard.admin.title', 'km')    # "ផ្ទាំងគ្រប់គ្រងអ្នកគ្រប់គ្រង"
    translate('no.such.key')                    # "no.such.key"
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tec_lms.config import settings
from tec_lms.language import DEFAULT_LANGUAGE, Language, coerce_language
from tec_lms.preferences import resolve_active_language

logger = logging.getLogger("tec_lms.i18n")

LOCALES_DIR = Path(__file__).resolve().parent / "locales"

Dictionaries = Mapping[Language, Mapping[str, Any]]


def _load_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        logger.warning("Locale file not found: %s", path)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read locale file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_dictionaries(locales_dir: Path | str | None = None) -> dict[Language, dict[str, Any]]:
    search = Path(locales_dir) if locales_dir else (settings.locales_dir or LOCALES_DIR)
    return {lang: _load_json(search / f"{lang.value}.json") for lang in Language}


DICTIONARIES: Dictionaries = load_dictionaries()


def lookup_node(tree: Any, path: str) -> Any:
    """Walk ``tree`` one dot-separated segment at a time; ``None`` on a miss."""
    current = tree
    for key in path.split("."):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        else:
            return None
    return current


def lookup(tree: Any, path: str, default: str = "") -> str:
    """Return the string leaf at ``path``, else ``default`` or the path itself."""
    node = lookup_node(tree, path)
    return node if isinstance(node, str) else (default or path)


def get_dictionary(language: Language | str | None, dictionaries: Dictionaries | None = None) -> Mapping[str, Any]:
    """The tree for ``language``; the Khmer tree stands in for a missing one."""
    trees = DICTIONARIES if dictionaries is None else dictionaries
    tree = trees.get(coerce_language(language))
    if not tree:
        tree = trees.get(DEFAULT_LANGUAGE) or {}
    return tree


def translate(
    key: str,
    language: Language | str | None = None,
    fallback: str | None = None,
    dictionaries: Dictionaries | None = None,
) -> str:
    if language is None:
        language = resolve_active_language()
    return lookup(get_dictionary(language, dictionaries), key, fallback or key)


t = translate
