"""
Listing extractor registry and factory.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping

from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.extractors import (
    CardListingExtractor,
    ListingExtractor,
    TableListingExtractor,
    TextListExtractor,
)


class ExtractorRegistry:
    """
    Maps a source's ``parser`` discriminant to an extractor; supports dynamic import paths.
    """

    def __init__(self, registrations: Mapping[str, type[ListingExtractor]] | None = None) -> None:
        builtins: dict[str, type[ListingExtractor]] = {
            "card": CardListingExtractor,
            "listing-card": CardListingExtractor,
            "table": TableListingExtractor,
            "text-list": TextListExtractor,
        }
        if registrations:
            builtins.update(registrations)
        self._registrations = builtins

    def register(self, *, parser: str, extractor_class: type[ListingExtractor]) -> None:
        self._registrations[parser.strip().lower()] = extractor_class

    def create(self, source: SourceConfig) -> ListingExtractor:
        return self._resolve_extractor_class(source)()

    def _resolve_extractor_class(self, source: SourceConfig) -> type[ListingExtractor]:
        if source.extractor_class:
            return self._load_dynamic_class(source.extractor_class)

        resolved = self._registrations.get(source.parser.strip().lower())
        if resolved is None:
            allowed = ", ".join(sorted(self._registrations.keys()))
            raise ValueError(
                f"Unknown parser='{source.parser}' for source='{source.display_name}'. "
                f"Allowed parsers: {allowed}."
            )
        return resolved

    @staticmethod
    def _load_dynamic_class(path: str) -> type[ListingExtractor]:
        if ":" not in path:
            raise ValueError(f"Invalid extractor_class '{path}'. Use 'module.path:ClassName'.")

        module_path, class_name = path.split(":", 1)
        module = importlib.import_module(module_path)
        loaded = getattr(module, class_name, None)
        if loaded is None:
            raise ValueError(f"Unable to resolve extractor class '{path}'.")
        if not isinstance(loaded, type) or not issubclass(loaded, ListingExtractor):
            raise ValueError(f"Class '{path}' must inherit from ListingExtractor.")
        return loaded
