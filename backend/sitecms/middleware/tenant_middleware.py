from flask import request, g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from sitecms.models.tenant import Tenant

TENANT_HEADER = "X-Tenant-Id"
TENANT_QUERY_PARAM = "tenantId"
TENANT_EXEMPT_ENDPOINTS = {"v1.health_check", "openapi_cms", "static"}
TENANT_EXEMPT_PREFIXES = ("/swagger",)


def _is_exempt() -> bool:
    if request.endpoint in TENANT_EXEMPT_ENDPOINTS:
        return True
    return request.path.startswith(TENANT_EXEMPT_PREFIXES)


def tenant_middleware(app):
    @app.before_request
    def load_tenant():
        g.current_tenant = None
        g.tenant_id = None
        g.actor_id = None

        if request.method == "OPTIONS" or _is_exempt():
            return None

        # Token is optional here; routes that write enforce it themselves
        claims = {}
        if verify_jwt_in_request(optional=True):
            claims = get_jwt()
            g.actor_id = get_jwt_identity()

        tenant_id = (
            request.headers.get(TENANT_HEADER)
            or request.args.get(TENANT_QUERY_PARAM)
            or claims.get("tenant_id")
        )
        if not tenant_id:
            return jsonify({"error": f"{TENANT_HEADER} header is missing"}), 400

        tenant = Tenant.query.filter_by(id=tenant_id, is_active=True).first()
        if not tenant:
            return jsonify({"error": "Invalid tenant"}), 404

        # Attach tenant to global context
        g.current_tenant = tenant
        g.tenant_id = tenant.id
