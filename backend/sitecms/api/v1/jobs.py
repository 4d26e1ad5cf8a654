# sitecms/api/v1/jobs.py
from flask import current_app, g, jsonify
from flask_jwt_extended import jwt_required
from sitecms.utils.decorators import tenant_required
from . import v1_bp


def _job_tenant(result):
    """Tenant a job was submitted for (task kwargs, else the returned payload)."""
    kwargs = result.kwargs or {}
    if isinstance(kwargs, dict) and kwargs.get("tenant_id"):
        return kwargs["tenant_id"]
    info = result.info
    if isinstance(info, dict):
        return info.get("tenant_id")
    return None


@v1_bp.route("/jobs/<job_id>", methods=["GET"])
@jwt_required()
@tenant_required
def get_job(job_id):
    result = current_app.extensions["celery"].AsyncResult(job_id)

    # Unknown ids and jobs of other tenants are reported as missing
    if _job_tenant(result) != g.tenant_id:
        return jsonify({"error": "NotFoundError", "message": "Job not found"}), 404

    job = {
        "id": result.id,
        "name": result.name,
        "status": result.status,
        "result": result.result if result.successful() else None,
        "error": str(result.result) if result.failed() else None,
        "date_done": result.date_done.isoformat() if result.date_done else None,
    }
    return jsonify(job)
