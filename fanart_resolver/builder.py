"""Normalization of raw catalog entries into image results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import PROVIDER_NAME
from .models import ImageResult, ImageType, RawCatalog, RawImage
from .utils import parse_invariant_int, upgrade_to_https


@dataclass(frozen=True)
class CategorySpec:
    """Catalog field plus the nominal size and slot stamped on its images."""

    field: str
    image_type: ImageType
    width: int
    height: int


# Order matters: it is the input order the ranker's stable sort preserves.
CATEGORIES = (
    CategorySpec("artistbackground", ImageType.BACKDROP, 1920, 1080),
    CategorySpec("artistthumb", ImageType.PRIMARY, 500, 281),
    CategorySpec("hdmusiclogo", ImageType.LOGO, 800, 310),
    CategorySpec("musicbanner", ImageType.BANNER, 1000, 185),
    CategorySpec("musiclogo", ImageType.LOGO, 400, 155),
    CategorySpec("hdmusicarts", ImageType.ART, 1000, 562),
    CategorySpec("musicarts", ImageType.ART, 500, 281),
)


def build_result(
    image: RawImage,
    spec: CategorySpec,
    provider_name: str = PROVIDER_NAME,
) -> Optional[ImageResult]:
    """Normalize one entry, or return ``None`` when it has no usable URL."""
    if not image.url:
        return None
    return ImageResult(
        category=spec.field,
        image_type=spec.image_type,
        url=upgrade_to_https(image.url),
        width=spec.width,
        height=spec.height,
        provider_name=provider_name,
        language=image.lang,
        popularity=parse_invariant_int(image.likes) if image.likes else None,
    )


def build_category(
    images: Iterable[RawImage],
    spec: CategorySpec,
    provider_name: str = PROVIDER_NAME,
) -> List[ImageResult]:
    results = []
    for image in images:
        result = build_result(image, spec, provider_name)
        if result is not None:
            results.append(result)
    return results


def build_results(
    catalog: RawCatalog,
    provider_name: str = PROVIDER_NAME,
) -> List[ImageResult]:
    """Flatten every rankable category of ``catalog`` into image results."""
    results: List[ImageResult] = []
    for spec in CATEGORIES:
        results.extend(build_category(catalog.images_for(spec.field), spec, provider_name))
    return results
