"""Static mapping of source identifier → adapter class."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Type

from config.settings import SearchConfig
from search.archive_source import InternetArchiveSource
from search.base import BaseSource
from search.bing_source import BingSource
from search.flickr_source import FlickrSource
from search.google_source import GoogleSource
from search.loc_source import LibraryOfCongressSource
from search.maps_source import HistoricalMapsSource
from search.nypl_source import NyplSource
from search.redfin_source import RedfinSource
from search.unsplash_source import UnsplashSource
from search.wikimedia_source import WikimediaSource
from search.zillow_source import ZillowSource

SOURCE_REGISTRY: Dict[str, Type[BaseSource]] = {
    "google":    GoogleSource,
    "bing":      BingSource,
    "flickr":    FlickrSource,
    "unsplash":  UnsplashSource,
    "zillow":    ZillowSource,
    "redfin":    RedfinSource,
    "loc":       LibraryOfCongressSource,
    "wikimedia": WikimediaSource,
    "archive":   InternetArchiveSource,
    "nypl":      NyplSource,
    "maps":      HistoricalMapsSource,
}


def build_sources(
    cfg: SearchConfig,
    names: Optional[Iterable[str]] = None,
) -> Dict[str, BaseSource]:
    """Instantiate adapters, keyed by identifier, in registry order."""
    wanted = set(names) if names is not None else set(SOURCE_REGISTRY)
    return {
        name: cls(cfg)
        for name, cls in SOURCE_REGISTRY.items()
        if name in wanted
    }
