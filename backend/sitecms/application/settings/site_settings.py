from typing import Optional
from sitecms.extensions import db
from sitecms.models.site_setting import SiteSetting
from sitecms.domain.exceptions import ForbiddenMasterWriteError
from sitecms.domain.tenancy import resolve_read_scope


def get_setting(*, key: str, tenant_id: Optional[str]) -> Optional[str]:
    """Tenant value for ``key``, falling back to the master value."""
    query = SiteSetting.query.filter(SiteSetting.setting_key == key)
    setting = resolve_read_scope(query, SiteSetting, tenant_id).first()
    return setting.setting_value if setting else None


def set_setting(
    *,
    key: str,
    value: Optional[str],
    tenant_id: Optional[str],
    setting_type: str = "text",
    category: Optional[str] = None,
    is_public: bool = False,
) -> SiteSetting:
    """
    Write the tenant's own value for ``key``; master values are never touched.

    The caller owns the transaction.
    """
    if tenant_id is None:
        raise ForbiddenMasterWriteError()

    setting = SiteSetting.query.filter_by(setting_key=key, tenant_id=tenant_id).first()
    if setting is None:
        setting = SiteSetting()
        setting.setting_key = key
        setting.tenant_id = tenant_id
        setting.setting_type = setting_type
        setting.setting_category = category
        setting.is_public = is_public
        db.session.add(setting)

    setting.setting_value = value
    return setting
