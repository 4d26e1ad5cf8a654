from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt
from sitecms.domain.tenancy import can_access_tenant, is_super_admin


def tenant_required(fn):
    """Require a JWT whose claims grant access to the request's tenant."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        tenant = g.get("current_tenant")
        if not tenant:
            return jsonify({"error": "Tenant context missing"}), 400

        if not can_access_tenant(get_jwt(), tenant.id):
            return jsonify({"error": "Tenant mismatch"}), 403

        return fn(*args, **kwargs)
    return wrapper

def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()

            if claims.get("role") not in allowed_roles and not is_super_admin(claims):
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

def feature_enabled(feature_name):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            tenant = g.get("current_tenant")

            if not tenant.has_feature(feature_name):
                return jsonify({
                    "error": f"Feature '{feature_name}' is disabled for this tenant"
                }), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
