# app/core/rbac.py

from fastapi import Depends, HTTPException, status

from app.api.deps import get_current_account
from app.models.enums import AccountRole


def AllowRoles(*allowed_roles):
    """
    Route guard for admin / staff / user accounts.
    Roles may be given as AccountRole members or their string values.
    Admins pass every guard.
    """
    allowed = {AccountRole(r) for r in allowed_roles}

    async def role_checker(current_account=Depends(get_current_account)):
        role = AccountRole(current_account.role)

        if role == AccountRole.Admin or role in allowed:
            return current_account

        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied for role '{role.value}'"
        )

    return role_checker


def is_admin(account) -> bool:
    return AccountRole(account.role) == AccountRole.Admin


def is_assignee(account, assigned_name: str) -> bool:
    # assignments are recorded by staff display name
    return AccountRole(account.role) == AccountRole.Staff and assigned_name == account.name


require_admin = AllowRoles(AccountRole.Admin)
require_office = AllowRoles(AccountRole.Admin, AccountRole.Staff)
