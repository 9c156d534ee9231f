from flask import current_app
from blockpress.utils.http import ok, error, arg_str
from blockpress.services.image_service import (
    generate_image_variants,
    get_folder_by_preset,
    get_optimized_image_url,
    list_presets,
    resolve_preset,
)


def _cloud_name():
    return current_app.config.get("CLOUDINARY_CLOUD_NAME")


def presets_handler():
    cloud_name = _cloud_name()
    if not cloud_name:
        return error("CONFIG_ERROR", "Image storage is not configured", 500)
    return ok({"success": True, **list_presets(cloud_name)})


def variants_handler():
    cloud_name = _cloud_name()
    if not cloud_name:
        return error("CONFIG_ERROR", "Image storage is not configured", 500)

    public_id = arg_str("publicId")
    if not public_id:
        return error("VALIDATION_ERROR", "publicId is required", 400)

    preset = resolve_preset(arg_str("preset"))
    return ok({
        "success": True,
        "publicId": public_id,
        "preset": preset,
        "folder": get_folder_by_preset(preset),
        "url": get_optimized_image_url(public_id, cloud_name, preset),
        "variants": generate_image_variants(public_id, cloud_name),
    })
