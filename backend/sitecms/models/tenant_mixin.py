from sqlalchemy.orm import declared_attr
from sitecms.extensions import db


class TenantMixin:
    # NULL marks a master row shared by every tenant
    @declared_attr
    def tenant_id(cls):
        return db.Column(
            db.String(64),
            db.ForeignKey("tenants.id"),
            nullable=True,
            index=True
        )
