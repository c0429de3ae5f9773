"""Tests for the transformation catalogue and image helpers."""

from __future__ import annotations

import base64

import pytest

from visor.errors import UnknownTransformationError
from visor.images import (
    ASPECT_RATIO_OPTIONS,
    PLACEHOLDER_DATA_URL,
    ImageDimensions,
    get_image_size,
    get_transformation,
    merge_transformation_config,
    placeholder_data_url,
)


def test_fill_uses_aspect_ratio_preset() -> None:
    image = ImageDimensions(width=640, height=480, aspect_ratio="9:16")

    assert get_image_size("fill", image, "height") == ASPECT_RATIO_OPTIONS["9:16"].height
    assert get_image_size("fill", image, "width") == 1000


def test_fill_without_known_preset_defaults() -> None:
    assert get_image_size("fill", ImageDimensions(width=640), "width") == 1000
    assert get_image_size("fill", ImageDimensions(aspect_ratio="4:5"), "height") == 1000


def test_other_types_use_image_dimensions() -> None:
    image = ImageDimensions(width=640, height=480)

    assert get_image_size("restore", image, "width") == 640
    assert get_image_size("restore", image, "height") == 480
    assert get_image_size("restore", ImageDimensions(), "height") == 1000


def test_unknown_transformation_raises() -> None:
    with pytest.raises(UnknownTransformationError):
        get_transformation("sharpen")


def test_transformation_lookup() -> None:
    remove = get_transformation("remove")

    assert remove.title == "Object Remove"
    assert remove.config["remove"]["removeShadow"] is True


def test_merge_transformation_config_keeps_nested_defaults() -> None:
    merged = merge_transformation_config("recolor", {"recolor": {"prompt": "shirt", "to": "blue"}})

    assert merged == {"recolor": {"prompt": "shirt", "to": "blue", "multiple": True}}
    assert get_transformation("recolor").config["recolor"]["prompt"] == ""


def test_merge_transformation_config_without_updates_copies_defaults() -> None:
    assert merge_transformation_config("restore") == {"restore": True}


def test_placeholder_is_base64_svg() -> None:
    prefix = "data:image/svg+xml;base64,"

    assert PLACEHOLDER_DATA_URL.startswith(prefix)
    svg = base64.b64decode(placeholder_data_url(200, 100)[len(prefix) :]).decode("utf-8")
    assert svg.startswith('<svg width="200" height="100"')
    assert 'from="-200" to="200"' in svg


def test_merged_config_does_not_share_catalogue_dicts() -> None:
    merged = merge_transformation_config("remove", {"other": 1})
    merged["remove"]["prompt"] = "leaked"

    defaults = merge_transformation_config("recolor")
    defaults["recolor"]["to"] = "red"

    assert get_transformation("remove").config["remove"]["prompt"] == ""
    assert get_transformation("recolor").config["recolor"]["to"] == ""
