"""
Image Service Module

Canonical image payloads for content blocks. Uploading itself happens in the
image provider; this module only knows its URL conventions:
- Transformation presets and storage folders
- Delivery URL variants for a public id
- Building the {url, publicId, variants, metadata} shape from an upload result
"""

import logging
import re
from typing import Any, Dict, Optional

from blockpress.errors import UpstreamError
from blockpress.utils.enums import ImagePreset

logger = logging.getLogger(__name__)

DELIVERY_BASE = "https://res.cloudinary.com/{cloud_name}/image/upload"

TRANSFORMATION_PRESETS: Dict[str, Dict[str, Any]] = {
    ImagePreset.HERO.value: {
        "width": 1200, "height": 800, "crop": "fill", "gravity": "auto",
        "quality": "auto", "fetch_format": "auto",
    },
    ImagePreset.ARTICLE.value: {
        "width": 800, "height": 600, "crop": "fill", "gravity": "auto",
        "quality": "auto", "fetch_format": "auto",
    },
    ImagePreset.INGREDIENT.value: {
        "width": 300, "height": 300, "crop": "fill", "gravity": "center",
        "quality": "auto", "fetch_format": "auto", "background": "white",
    },
    ImagePreset.THUMBNAIL.value: {
        "width": 400, "height": 300, "crop": "fill", "gravity": "auto",
        "quality": "auto", "fetch_format": "auto",
    },
    ImagePreset.GENERAL.value: {
        "width": 800, "height": 600, "crop": "fill", "gravity": "auto",
        "quality": "auto", "fetch_format": "auto",
    },
}

FOLDERS = {
    ImagePreset.HERO.value: "health-articles/hero-images",
    ImagePreset.ARTICLE.value: "health-articles/supplements",
    ImagePreset.INGREDIENT.value: "health-articles/ingredients",
    ImagePreset.THUMBNAIL.value: "health-articles/thumbnails",
    ImagePreset.GENERAL.value: "health-articles/general",
}

# Transformation parameter -> URL shortcode, in URL order
_PARAM_CODES = (
    ("width", "w"),
    ("height", "h"),
    ("crop", "c"),
    ("gravity", "g"),
    ("quality", "q"),
    ("fetch_format", "f"),
    ("background", "b"),
)

_TRANSFORM_SEGMENT = re.compile(r"^(w|h|c|q|f|e)_")
_EXTENSION = re.compile(r"\.[^/.]+$")


def resolve_preset(preset: Optional[str]) -> str:
    return preset if preset in TRANSFORMATION_PRESETS else ImagePreset.GENERAL.value


def get_folder_by_preset(preset: Optional[str]) -> str:
    return FOLDERS[resolve_preset(preset)]


def _base_url(cloud_name: str) -> str:
    return DELIVERY_BASE.format(cloud_name=cloud_name)


def generate_image_variants(public_id: str, cloud_name: str) -> Dict[str, str]:
    base = _base_url(cloud_name)
    return {
        "original": f"{base}/{public_id}",
        "optimized": f"{base}/q_auto,f_auto/{public_id}",
        "thumbnail": f"{base}/w_400,h_300,c_fill,q_auto,f_auto/{public_id}",
        "medium": f"{base}/w_800,h_600,c_fill,q_auto,f_auto/{public_id}",
        "large": f"{base}/w_1200,h_800,c_fill,q_auto,f_auto/{public_id}",
        "square_small": f"{base}/w_150,h_150,c_fill,q_auto,f_auto/{public_id}",
        "square_medium": f"{base}/w_300,h_300,c_fill,q_auto,f_auto/{public_id}",
        "square_large": f"{base}/w_600,h_600,c_fill,q_auto,f_auto/{public_id}",
        "webp_thumbnail": f"{base}/w_400,h_300,c_fill,q_auto,f_webp/{public_id}",
        "webp_medium": f"{base}/w_800,h_600,c_fill,q_auto,f_webp/{public_id}",
        "placeholder": f"{base}/w_50,h_50,c_fill,q_auto,f_auto,e_blur:1000/{public_id}",
    }


def transformation_string(preset: Optional[str]) -> str:
    params = TRANSFORMATION_PRESETS[resolve_preset(preset)]
    return ",".join(f"{code}_{params[key]}" for key, code in _PARAM_CODES if key in params)


def get_optimized_image_url(public_id: str, cloud_name: str, preset: Optional[str] = None) -> str:
    return f"{_base_url(cloud_name)}/{transformation_string(preset)}/{public_id}"


def extract_public_id_from_url(url: str) -> Optional[str]:
    """Public id from a delivery URL, ignoring transformation segments and the extension."""
    if not isinstance(url, str):
        return None
    parts = url.split("/")
    if "upload" not in parts:
        return None
    after_upload = parts[parts.index("upload") + 1:]
    public_parts = [p for p in after_upload if not _TRANSFORM_SEGMENT.match(p)]
    public_id = _EXTENSION.sub("", "/".join(public_parts))
    return public_id or None


def build_image_payload(provider_result: Dict[str, Any], preset: Optional[str], cloud_name: str) -> Dict[str, Any]:
    """
    Canonical image shape consumed by ``imageUrl`` and image custom fields.

    Uploads run against the provider outside this service, so no route calls
    this yet; an upload endpoint would map UpstreamError to a 500.

    Raises:
        UpstreamError: If the provider result has no secure_url or public_id
    """
    if not isinstance(provider_result, dict) or not provider_result.get("secure_url") or not provider_result.get("public_id"):
        logger.error("Image provider returned an unusable result: %r", provider_result)
        raise UpstreamError("Upload failed", detail="Provider result is missing secure_url or public_id")

    preset = resolve_preset(preset)
    public_id = provider_result["public_id"]

    return {
        "url": provider_result["secure_url"],
        "publicId": public_id,
        "folder": get_folder_by_preset(preset),
        "preset": preset,
        "variants": generate_image_variants(public_id, cloud_name),
        "metadata": {
            "width": provider_result.get("width"),
            "height": provider_result.get("height"),
            "format": provider_result.get("format"),
            "bytes": provider_result.get("bytes"),
            "assetId": provider_result.get("asset_id"),
            "version": provider_result.get("version"),
            "createdAt": provider_result.get("created_at"),
            "tags": provider_result.get("tags") or [],
            "imageType": preset,
        },
    }


def list_presets(cloud_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "cloudName": cloud_name,
        "presets": {
            name: {**params, "folder": FOLDERS[name]}
            for name, params in TRANSFORMATION_PRESETS.items()
        },
    }
