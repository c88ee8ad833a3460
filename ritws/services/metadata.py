"""
services/metadata.py
──────────────────────────────────────────────────────────────────────────────
MetadataCatalog: lookups over the decoded MetadataOfRIT response.

Each call without a snapshot fetches fresh metadata for the requested
language.  Callers that need several lookups should fetch once with
``snapshot(language)`` and pass the result back in (every method accepts an
optional ``snapshot``) to avoid one round trip per lookup.
"""
from __future__ import annotations

import logging
from typing import Optional

from ritws.domain.models import Attribute, Category, Dictionary, MetadataSnapshot
from ritws.services import categories as resolver
from ritws.services.categories import MissingParentPolicy
from ritws.services.client import RITClient

logger = logging.getLogger(__name__)

# Dictionary holding every language code RIT supports.
LANGUAGES_DICTIONARY = "L001"


class MetadataCatalog:
    """Category, attribute and dictionary lookups for one RIT client.

    Args:
        client: RITClient used to fetch metadata.
    """

    def __init__(self, client: RITClient) -> None:
        self._client = client

    def snapshot(self, language: str) -> MetadataSnapshot:
        return self._client.get_metadata(language)

    def _resolve(self, language: str, snapshot: Optional[MetadataSnapshot]) -> MetadataSnapshot:
        if snapshot is not None:
            if snapshot.language != language:
                logger.warning(
                    "Snapshot language %s differs from requested %s; using snapshot",
                    snapshot.language,
                    language,
                )
            return snapshot
        return self.snapshot(language)

    # ── Attributes ─────────────────────────────────────────────────────────

    def get_attributes(
        self, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> tuple[Attribute, ...]:
        return self._resolve(language, snapshot).attributes

    def get_attribute(
        self, code: str, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> Optional[Attribute]:
        return resolver.lookup_attribute(self.get_attributes(language, snapshot), code)

    def is_translatable(
        self, code: str, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> bool:
        return resolver.is_translatable(self.get_attributes(language, snapshot), code)

    # ── Categories ─────────────────────────────────────────────────────────

    def get_categories(
        self, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> tuple[Category, ...]:
        return self._resolve(language, snapshot).categories

    def get_category(
        self,
        code: str,
        language: str,
        inherit_attributes: bool = True,
        snapshot: Optional[MetadataSnapshot] = None,
        on_missing_parent: MissingParentPolicy = MissingParentPolicy.RAISE,
    ) -> Optional[Category]:
        """Resolve one category; with ``inherit_attributes`` its attribute
        codes include those of every ancestor (own codes first).

        Returns None if the code is unknown.
        """
        return resolver.resolve_by_code(
            self.get_categories(language, snapshot),
            code,
            inherit_attributes=inherit_attributes,
            on_missing_parent=on_missing_parent,
        )

    def get_childless_categories(
        self, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> set[str]:
        """Codes of leaf categories, the only ones objects can be filed under."""
        return resolver.childless_categories(self.get_categories(language, snapshot))

    # ── Dictionaries ───────────────────────────────────────────────────────

    def get_dictionaries(
        self, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> tuple[Dictionary, ...]:
        return self._resolve(language, snapshot).dictionaries

    def get_dictionary(
        self, code: str, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> Optional[Dictionary]:
        for dictionary in self.get_dictionaries(language, snapshot):
            if dictionary.code == code:
                return dictionary
        return None

    def get_dictionary_title(
        self, code: str, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> Optional[str]:
        dictionary = self.get_dictionary(code, language, snapshot)
        return dictionary.name if dictionary else None

    def get_dictionary_values(
        self, code: str, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> Optional[tuple[str, ...]]:
        dictionary = self.get_dictionary(code, language, snapshot)
        return dictionary.values if dictionary else None

    def get_languages(
        self, language: str, snapshot: Optional[MetadataSnapshot] = None
    ) -> Optional[tuple[str, ...]]:
        """All language codes known to RIT (dictionary L001).

        The result is the same whatever ``language`` the metadata is
        fetched in.
        """
        return self.get_dictionary_values(LANGUAGES_DICTIONARY, language, snapshot)
