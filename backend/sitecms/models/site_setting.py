from sitecms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class SiteSetting(BaseModel, TenantMixin):
    __tablename__ = "site_settings"

    setting_key = db.Column(db.String(100), nullable=False, index=True)
    setting_value = db.Column(db.Text, nullable=True)
    setting_type = db.Column(db.String(50), nullable=False, default="text")
    setting_category = db.Column(db.String(50), nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.UniqueConstraint("setting_key", "tenant_id", name="uq_site_setting_key_per_tenant"),
    )
