from sitecms.extensions import db
from .base import JSONType, utcnow


class Tenant(db.Model):
    __tablename__ = "tenants"

    id = db.Column(db.String(64), primary_key=True)

    # Basic info
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Feature toggles
    enable_cms = db.Column(db.Boolean, default=True, nullable=False)
    enable_multilingual = db.Column(db.Boolean, default=True, nullable=False)

    # JSON field for future toggles (flexible)
    features = db.Column(JSONType, default=dict)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def has_feature(self, feature_name: str) -> bool:
        """
        Check if a feature is enabled for this tenant.
        """
        # Check JSON overrides first
        overrides = self.features or {}
        if overrides.get(feature_name) is not None:
            return bool(overrides.get(feature_name))

        # Fallback to attribute toggles
        attr_name = f"enable_{feature_name}"
        return bool(getattr(self, attr_name, False))
