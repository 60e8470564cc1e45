"""
Translation handling for Kometa Images.

Poster text comes from per-language YAML files (translations/en.yml, ...):

    key_names:
      english: English
    collections:
      language:
        en: ENGLISH
"""

from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .constants import logger, TRANSLATIONS_DIR
from .errors import TranslationError

MISSING = object()


def _read_yaml(path: Path) -> Any:
    """Read a YAML file with the safe loader."""
    yaml_parser = YAML(typ='safe')
    with path.open('r', encoding='utf-8') as f:
        return yaml_parser.load(f)


def load_translation(language: str, translations_dir: Path = TRANSLATIONS_DIR) -> Dict[str, Any]:
    """Load the translation file for language."""
    path = Path(translations_dir) / f"{language}.yml"
    if not path.exists():
        raise TranslationError(f"Translation file not found: {path}")

    try:
        data = _read_yaml(path)
    except YAMLError as e:
        raise TranslationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TranslationError(f"Translation file {path} must contain a mapping")

    logger.info(f"TRANSLATION_LOADED language={language} path={path}")
    return data


def get_property(data: Dict[str, Any], *path: str, default: Any = MISSING) -> Any:
    """
    Walk nested mappings along path.

    Raises TranslationError naming the dotted path when a step is missing and
    no default was given.
    """
    current: Any = data
    for step in path:
        if isinstance(current, dict) and step in current:
            current = current[step]
        elif default is MISSING:
            raise TranslationError(f"Missing translation property: {'.'.join(path)}")
        else:
            return default
    return current


def translate(data: Dict[str, Any], category: str, key: str, default: Optional[str] = None) -> str:
    """Display text for key in category."""
    value = get_property(data, 'collections', category, key, default=None)
    if value is None:
        value = get_property(data, 'key_names', key, default=None)
    if value is None:
        value = default
    if value is None:
        logger.debug(f"TRANSLATION_FALLBACK category={category} key={key}")
        value = key.replace('_', ' ').upper()
    return str(value)
