# sitecms/api/v1/pages.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.utils.decorators import tenant_required, feature_enabled
from sitecms.application.cms.create_page import create_page as create_page_uc
from sitecms.application.cms.update_page import update_page as update_page_uc
from sitecms.application.cms.delete_page import delete_page as delete_page_uc
from sitecms.application.cms.get_pages import get_all_pages_with_types, get_pages
from sitecms.application.cms.get_layout import get_page_with_layout
from sitecms.application.cms.update_page_slug import get_slug_change_history, update_page_slug
from sitecms.domain.exceptions import ValidationError
from sitecms.normalizers.page import normalize_page
from . import v1_bp # import the versioned blueprint


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages/all", methods=["GET"])
def list_all_pages():
    pages = get_all_pages_with_types(
        tenant_id=g.tenant_id,
        theme_id=request.args.get("themeId") or None,
    )
    return jsonify({"pages": pages, "count": len(pages)})


@v1_bp.route("/pages", methods=["GET"])
def list_pages():
    pages = get_pages(tenant_id=g.tenant_id, page_type=request.args.get("type") or None)
    return jsonify({"pages": [normalize_page(p) for p in pages]})


@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def create_page():
    data = request.get_json(silent=True) or {}
    page = create_page_uc(tenant_id=g.tenant_id, data=data, actor_id=g.actor_id)

    return jsonify(normalize_page(page)), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
def get_page(page_id):
    return jsonify(get_page_with_layout(
        page_id=page_id,
        tenant_id=g.tenant_id,
        language=request.args.get("language"),
    ))


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def update_page(page_id):
    data = request.get_json(silent=True) or {}
    page = update_page_uc(
        tenant_id=g.tenant_id,
        page_id=page_id,
        data=data,
        actor_id=g.actor_id,
    )
    return jsonify(normalize_page(page))


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def delete_page(page_id):
    delete_page_uc(tenant_id=g.tenant_id, page_id=page_id, actor_id=g.actor_id)
    return jsonify({"message": "Page deleted successfully"})


# ------------------------
# Slugs
# ------------------------

@v1_bp.route("/pages/update-slug", methods=["POST"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def change_page_slug():
    data = request.get_json(silent=True) or {}

    page_id = data.get("pageId", data.get("page_id"))
    page_type = data.get("pageType", data.get("page_type"))
    new_slug = data.get("newSlug", data.get("new_slug"))
    if page_id is None or not page_type or not new_slug:
        raise ValidationError("pageId, pageType and newSlug are required")

    result = update_page_slug(
        page_id=page_id,
        page_type=page_type,
        new_slug=new_slug,
        old_slug=data.get("oldSlug", data.get("old_slug")),
        tenant_id=g.tenant_id,
        actor_id=g.actor_id,
    )
    return jsonify(result)


@v1_bp.route("/pages/slug-history", methods=["GET"])
@jwt_required()
@tenant_required
def slug_history():
    history = get_slug_change_history(
        page_id=request.args.get("pageId") or None,
        page_type=request.args.get("pageType") or None,
        tenant_id=g.tenant_id,
    )
    return jsonify({"history": history})
