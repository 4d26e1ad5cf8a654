from typing import Any, Dict


def normalize_layout(layout) -> Dict[str, Any]:
    return {
        "id": layout.id,
        "page_id": layout.page_id,
        "language": layout.language,
        "layout_json": layout.layout_json or {"components": []},
        "version": layout.version,
        "updated_at": layout.updated_at.isoformat() if layout.updated_at else None,
    }
