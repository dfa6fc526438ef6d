"""Data models used throughout the resolver pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ImageType(str, Enum):
    """Host-side image slot a result can fill."""

    PRIMARY = "primary"
    LOGO = "logo"
    ART = "art"
    BANNER = "banner"
    BACKDROP = "backdrop"


@dataclass(frozen=True)
class RawImage:
    """Single image entry as listed in the remote catalog."""

    url: Optional[str] = None
    lang: Optional[str] = None
    likes: Optional[str] = None
    id: Optional[str] = None
    disc: Optional[str] = None
    size: Optional[str] = None


@dataclass(frozen=True)
class RawAlbum:
    """Per-release image group; parsed but never ranked."""

    release_group_id: Optional[str] = None
    cdart: List[RawImage] = field(default_factory=list)
    albumcover: List[RawImage] = field(default_factory=list)


@dataclass(frozen=True)
class RawCatalog:
    """Deserialized catalog document for one identifier."""

    name: Optional[str] = None
    mbid_id: Optional[str] = None
    artistbackground: List[RawImage] = field(default_factory=list)
    artistthumb: List[RawImage] = field(default_factory=list)
    hdmusiclogo: List[RawImage] = field(default_factory=list)
    musicbanner: List[RawImage] = field(default_factory=list)
    musiclogo: List[RawImage] = field(default_factory=list)
    hdmusicarts: List[RawImage] = field(default_factory=list)
    musicarts: List[RawImage] = field(default_factory=list)
    albums: List[RawAlbum] = field(default_factory=list)

    def images_for(self, category: str) -> List[RawImage]:
        return getattr(self, category)


# Written in place of a catalog when the service has nothing for an identifier.
EMPTY_CATALOG_DOCUMENT: Dict[str, Any] = {
    "name": None,
    "mbid_id": None,
    "artistthumb": None,
    "artistbackground": None,
    "hdmusiclogo": None,
    "musicbanner": None,
    "musiclogo": None,
    "musicarts": None,
    "hdmusicarts": None,
    "albums": None,
}


@dataclass
class ImageResult:
    """Normalized, caller-facing description of a remote image."""

    category: str
    image_type: ImageType
    url: str
    width: Optional[int]
    height: Optional[int]
    provider_name: str
    language: Optional[str] = None
    popularity: Optional[int] = None
    vote_count: Optional[int] = None
    rating_type: str = "likes"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "category": self.category,
            "type": self.image_type.value,
            "url": self.url,
            "width": self.width,
            "height": self.height,
            "provider": self.provider_name,
            "language": self.language,
            "popularity": self.popularity,
            "vote_count": self.vote_count,
            "rating_type": self.rating_type,
        }
