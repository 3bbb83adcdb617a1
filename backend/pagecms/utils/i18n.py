"""
Editor wording catalogue.

Keys are dotted paths into pagecms/i18n/<locale>.json ("blocks.image.label").
Unknown locales fall back to DEFAULT_LOCALE, missing keys to the key itself.
"""
import json
from pathlib import Path
from typing import Optional

DEFAULT_LOCALE = "en"

_I18N_CACHE: dict = {}
_I18N_DIR = Path(__file__).parent.parent / "i18n"


def _load_locale(locale: str) -> dict:
    """Loads i18n/<locale>.json lazily and caches it."""
    if locale not in _I18N_CACHE:
        path = _I18N_DIR / f"{locale}.json"
        if path.exists():
            with open(path, encoding="utf-8") as f:
                _I18N_CACHE[locale] = json.load(f)
        else:
            _I18N_CACHE[locale] = {}
    return _I18N_CACHE[locale]


def _lookup(catalog: dict, key: str) -> Optional[str]:
    node = catalog
    for part in key.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            return None
    return node if isinstance(node, str) else None


def translate(key: str, locale: str = DEFAULT_LOCALE, **params) -> str:
    """
    translate("editor.new_block_title", "tr", label="Görsel Bloğu")
    → "Yeni Görsel Bloğu"
    """
    text = _lookup(_load_locale(locale), key)
    if text is None and locale != DEFAULT_LOCALE:
        text = _lookup(_load_locale(DEFAULT_LOCALE), key)
    if text is None:
        return key
    return text.format(**params) if params else text


def available_locales() -> list:
    return sorted(p.stem for p in _I18N_DIR.glob("*.json"))
