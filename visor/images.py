"""Transformation catalogue and image sizing helpers."""

from __future__ import annotations

import base64
import copy
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal, Mapping

from .errors import UnknownTransformationError
from .utils.merge import deep_merge

Dimension = Literal["width", "height"]

DEFAULT_IMAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class TransformationType:
    """One entry of the transformation catalogue."""

    type: str
    title: str
    sub_title: str
    config: Mapping[str, Any]
    icon: str


@dataclass(frozen=True, slots=True)
class AspectRatioOption:
    aspect_ratio: str
    label: str
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class ImageDimensions:
    """Stored size of an image plus its optional aspect ratio preset."""

    width: int | None = None
    height: int | None = None
    aspect_ratio: str | None = None


TRANSFORMATION_TYPES: Mapping[str, TransformationType] = MappingProxyType(
    {
        "restore": TransformationType(
            type="restore",
            title="Restore Image",
            sub_title="Refine images by removing noise and imperfections",
            config={"restore": True},
            icon="image.svg",
        ),
        "removeBackground": TransformationType(
            type="removeBackground",
            title="Background Remove",
            sub_title="Removes the background of the image using AI",
            config={"removeBackground": True},
            icon="camera.svg",
        ),
        "fill": TransformationType(
            type="fill",
            title="Generative Fill",
            sub_title="Enhance an image's dimensions using AI outpainting",
            config={"fillBackground": True},
            icon="stars.svg",
        ),
        "remove": TransformationType(
            type="remove",
            title="Object Remove",
            sub_title="Identify and eliminate objects from images",
            config={"remove": {"prompt": "", "removeShadow": True, "multiple": True}},
            icon="scan.svg",
        ),
        "recolor": TransformationType(
            type="recolor",
            title="Object Recolor",
            sub_title="Identify and recolor objects from the image",
            config={"recolor": {"prompt": "", "to": "", "multiple": True}},
            icon="filter.svg",
        ),
    }
)

ASPECT_RATIO_OPTIONS: Mapping[str, AspectRatioOption] = MappingProxyType(
    {
        "1:1": AspectRatioOption(aspect_ratio="1:1", label="Square (1:1)", width=1000, height=1000),
        "3:4": AspectRatioOption(aspect_ratio="3:4", label="Standard Portrait (3:4)", width=1000, height=1334),
        "9:16": AspectRatioOption(aspect_ratio="9:16", label="Phone Portrait (9:16)", width=1000, height=1778),
    }
)


def get_transformation(type_: str) -> TransformationType:
    try:
        return TRANSFORMATION_TYPES[type_]
    except KeyError:
        raise UnknownTransformationError(f"Unknown transformation type '{type_}'.") from None


def merge_transformation_config(type_: str, updates: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    """Overlay user-supplied settings on the catalogue defaults for ``type_``.

    Values in ``updates`` win; nested defaults such as ``removeShadow`` are
    kept when the update only sets a prompt. The result is a fresh copy that
    shares nothing with the catalogue.
    """

    defaults = get_transformation(type_).config
    if updates is None:
        return copy.deepcopy(dict(defaults))
    return copy.deepcopy(deep_merge(updates, defaults))


def get_image_size(type_: str, image: ImageDimensions, dimension: Dimension) -> int:
    """Return the rendered width or height for an image."""

    if type_ == "fill":
        option = ASPECT_RATIO_OPTIONS.get(image.aspect_ratio or "")
        size = getattr(option, dimension) if option else None
        return size or DEFAULT_IMAGE_SIZE
    return getattr(image, dimension) or DEFAULT_IMAGE_SIZE


def shimmer_svg(width: int, height: int) -> str:
    """Animated gradient SVG shown while an image loads."""

    return (
        f'<svg width="{width}" height="{height}" version="1.1" '
        'xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
        '<defs><linearGradient id="g">'
        '<stop stop-color="#7986AC" offset="20%" />'
        '<stop stop-color="#68769e" offset="50%" />'
        '<stop stop-color="#7986AC" offset="70%" />'
        "</linearGradient></defs>"
        f'<rect width="{width}" height="{height}" fill="#7986AC" />'
        f'<rect id="r" width="{width}" height="{height}" fill="url(#g)" />'
        f'<animate xlink:href="#r" attributeName="x" from="-{width}" to="{width}" dur="1s" repeatCount="indefinite" />'
        "</svg>"
    )


def placeholder_data_url(width: int = DEFAULT_IMAGE_SIZE, height: int = DEFAULT_IMAGE_SIZE) -> str:
    encoded = base64.b64encode(shimmer_svg(width, height).encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


PLACEHOLDER_DATA_URL = placeholder_data_url()


__all__ = [
    "ASPECT_RATIO_OPTIONS",
    "AspectRatioOption",
    "DEFAULT_IMAGE_SIZE",
    "ImageDimensions",
    "PLACEHOLDER_DATA_URL",
    "TRANSFORMATION_TYPES",
    "TransformationType",
    "get_image_size",
    "get_transformation",
    "merge_transformation_config",
    "placeholder_data_url",
    "shimmer_svg",
]
