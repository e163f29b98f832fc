import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

import config
from enums.text_entity import TextEntity

L10N_DIR = Path(__file__).resolve().parent.parent / "l10n"


@lru_cache(maxsize=None)
def _load_localization(language: str) -> dict:
    localization_file = L10N_DIR / f"{language}.json"
    with open(localization_file, "r", encoding="UTF-8") as f:
        return json.loads(f.read())


class Localizator:

    @staticmethod
    def get_text(entity: TextEntity, key: str, lang: Optional[str] = None) -> str:
        """
        Get localized text for given entity and key.

        Args:
            entity: Text section (CART, CHECKOUT, COMMON)
            key: Localization key
            lang: Optional language code (e.g., "de", "en").
                  If None, uses config.STORE_LANGUAGE (default).
                  Services pass the language from their StoreSettings so that
                  several isolated carts can run with different languages.

        Returns:
            Localized text string

        Example:
            text = Localizator.get_text(TextEntity.CART, "item_added", lang="en")
        """
        # Use provided lang or fall back to global config
        language = lang if lang is not None else config.STORE_LANGUAGE
        data = _load_localization(language)
        if entity == TextEntity.CART:
            return data["cart"][key]
        elif entity == TextEntity.CHECKOUT:
            return data["checkout"][key]
        else:
            return data["common"][key]

    @staticmethod
    def get_field_label(field: str, lang: Optional[str] = None) -> str:
        """
        Localized label of a customer form field ("name" → "Name").

        Unknown (host-defined) fields are returned capitalized.
        """
        try:
            return Localizator.get_text(TextEntity.CHECKOUT, f"field_{field}", lang=lang)
        except KeyError:
            return field.replace("_", " ").capitalize()
