# sitecms/api/v1/layouts.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.utils.decorators import tenant_required, feature_enabled
from sitecms.application.cms.get_layout import get_layout_by_slug, get_page_layout
from sitecms.application.cms.get_pages import get_page_by_slug
from sitecms.application.cms.upsert_page_layout import upsert_page_layout
from sitecms.domain.exceptions import ValidationError
from sitecms.domain.invariants.page import normalize_slug
from . import v1_bp


def _layout_payload(data):
    """Accept ``{"layout_json": ...}`` or the layout document itself."""
    if "layout_json" in data:
        return data["layout_json"]
    if "components" in data:
        return data
    raise ValidationError("layout_json is required")


def _language(data):
    return request.args.get("language") or data.get("language")


@v1_bp.route("/pages/<page_id>/layout", methods=["GET"])
def get_layout(page_id):
    return jsonify(get_page_layout(
        page_id=page_id,
        tenant_id=g.tenant_id,
        language=request.args.get("language"),
    ))


@v1_bp.route("/pages/<page_id>/layout", methods=["PUT"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def save_layout(page_id):
    data = request.get_json(silent=True) or {}
    result = upsert_page_layout(
        page_id=page_id,
        layout_json=_layout_payload(data),
        tenant_id=g.tenant_id,
        language=_language(data),
    )
    return jsonify(result)


@v1_bp.route("/layout", methods=["GET"])
def get_layout_for_slug():
    slug = request.args.get("slug")
    if not slug:
        raise ValidationError("slug is required")

    return jsonify(get_layout_by_slug(
        slug=slug,
        tenant_id=g.tenant_id,
        language=request.args.get("language"),
    ))


@v1_bp.route("/layout", methods=["PUT"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def save_layout_for_slug():
    data = request.get_json(silent=True) or {}
    slug = request.args.get("slug") or data.get("slug")
    if not slug:
        raise ValidationError("slug is required")

    page = get_page_by_slug(slug=normalize_slug(slug), tenant_id=g.tenant_id)
    result = upsert_page_layout(
        page_id=page.id,
        layout_json=_layout_payload(data),
        tenant_id=g.tenant_id,
        language=_language(data),
    )
    return jsonify(result)
