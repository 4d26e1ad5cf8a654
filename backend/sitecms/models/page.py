from sitecms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class Page(BaseModel, TenantMixin):
    __tablename__ = "pages"

    page_name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, index=True)
    page_type = db.Column(db.String(50), nullable=False, default="page", index=True)
    status = db.Column(db.String(50), nullable=False, default="draft", index=True)
    theme_id = db.Column(db.String(100), nullable=True, index=True)

    # SEO
    meta_title = db.Column(db.String(255), nullable=True)
    meta_description = db.Column(db.Text, nullable=True)
    seo_index = db.Column(db.Boolean, nullable=False, default=True)

    # Landing pages
    campaign_source = db.Column(db.String(100), nullable=True)
    conversion_goal = db.Column(db.String(255), nullable=True)

    # Legal pages
    legal_type = db.Column(db.String(100), nullable=True)
    last_reviewed_date = db.Column(db.Date, nullable=True)
    legal_version = db.Column(db.String(20), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )

    # One layout per language, removed together with the page
    layouts = db.relationship(
        "PageLayout",
        back_populates="page",
        cascade="all, delete-orphan",
    )
