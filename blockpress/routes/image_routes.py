from flask import Blueprint
from blockpress.controllers.image_controller import presets_handler, variants_handler

image_bp = Blueprint("images", __name__, url_prefix="/api/images")


@image_bp.get("/presets")
def presets():
    return presets_handler()


@image_bp.get("/variants")
def variants():
    return variants_handler()
