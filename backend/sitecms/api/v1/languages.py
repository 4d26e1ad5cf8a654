# sitecms/api/v1/languages.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.utils.decorators import tenant_required, roles_required, feature_enabled
from sitecms.application.settings.languages import (
    add_language,
    get_language_configuration,
    remove_language,
    set_default_language,
)
from sitecms.domain.exceptions import ValidationError
from . import v1_bp


def _code(data):
    code = data.get("code") or data.get("language")
    if not code:
        raise ValidationError("Language code is required")
    return code


@v1_bp.route("/languages", methods=["GET"])
def list_languages():
    return jsonify(get_language_configuration(tenant_id=g.tenant_id))


@v1_bp.route("/languages", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("multilingual")
def create_language():
    data = request.get_json(silent=True) or {}
    config = add_language(tenant_id=g.tenant_id, code=_code(data), actor_id=g.actor_id)
    return jsonify(config), 201


@v1_bp.route("/languages/<code>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("multilingual")
def delete_language(code):
    return jsonify(remove_language(tenant_id=g.tenant_id, code=code, actor_id=g.actor_id))


@v1_bp.route("/languages/default", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required("admin")
@feature_enabled("multilingual")
def change_default_language():
    data = request.get_json(silent=True) or {}
    return jsonify(set_default_language(tenant_id=g.tenant_id, code=_code(data), actor_id=g.actor_id))
