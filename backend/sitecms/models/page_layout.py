from sitecms.extensions import db
from sitecms.domain.invariants.layout import DEFAULT_LANGUAGE
from .base import BaseModel, JSONType

LAYOUT_UNIQUE_CONSTRAINT = "page_layouts_page_id_language_unique"


class PageLayout(BaseModel):
    __tablename__ = "page_layouts"

    page_id = db.Column(
        db.Integer,
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    language = db.Column(
        db.String(50),
        nullable=False,
        default=DEFAULT_LANGUAGE,
        server_default=DEFAULT_LANGUAGE,
    )
    layout_json = db.Column(JSONType, nullable=False, default=dict)
    version = db.Column(db.Integer, nullable=False, default=1, server_default="1")

    page = db.relationship("Page", back_populates="layouts")

    __table_args__ = (
        db.UniqueConstraint("page_id", "language", name=LAYOUT_UNIQUE_CONSTRAINT),
    )
