# app/services/repair_service.py

from datetime import datetime, date, time, timezone
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlmodel import select
from sqlalchemy import and_, or_, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.columns import utc_now
from app.models.enums import AccountRole, RepairStatus
from app.models.repair_request import RepairRequest, RepairRemark
from app.models.staff import Staff
from app.schemas.repair_request import RepairRequestRead, RemarkRead, RemarkFeedItem
from app.services import email_service

# target status -> states it may be entered from
ALLOWED_TRANSITIONS = {
    RepairStatus.Assigned: {RepairStatus.Pending, RepairStatus.Assigned},
    RepairStatus.Completed: {RepairStatus.Assigned},
    RepairStatus.Verified: {RepairStatus.Completed},
}


# ===================================================================
# MAIL CONTEXT (plain dicts, safe for BackgroundTasks)
# ===================================================================
def mail_context(request: RepairRequest) -> dict:
    return {
        "id": str(request.id),
        "username": request.username,
        "department": request.department,
        "email": request.email,
        "description": request.description,
        "is_new_requirement": request.is_new_requirement,
        "status": RepairStatus(request.status).value,
        "assigned_to": request.assigned_to,
        "completed_at": request.completed_at,
        "verified_by": request.verified_by,
    }


def staff_context(staff: Optional[Staff], fallback_name: str = "") -> dict:
    if staff is None:
        return {"name": fallback_name, "email": None}
    return {"name": staff.name, "email": staff.email}


def transition_notifications(status: RepairStatus, request: RepairRequest, staff: Optional[Staff] = None):
    """
    E-mails owed after `request` entered `status`.
    Returns (function, *args) tuples for BackgroundTasks.add_task.
    """
    ctx = mail_context(request)

    if status == RepairStatus.Assigned:
        staff_ctx = staff_context(staff, request.assigned_to)
        jobs = [
            (email_service.send_assigned_to_staff_email, ctx, staff_ctx),
            (email_service.send_assignment_notification_email, ctx, staff_ctx),
        ]
        if request.email:
            jobs.append((email_service.send_requester_assignment_email, ctx, staff_ctx))
        return jobs

    if status == RepairStatus.Completed:
        jobs = [(email_service.send_completion_to_project_email, ctx)]
        if request.email:
            jobs.insert(0, (email_service.send_completion_to_requester_email, ctx))
        return jobs

    if status == RepairStatus.Verified:
        jobs = [(email_service.send_verification_notification_email, ctx)]
        if request.email:
            jobs.append((email_service.send_verification_to_requester_email, ctx))
        return jobs

    return []


# ===================================================================
# CREATE
# ===================================================================
async def create_repair_request(
    session: AsyncSession,
    account,
    description: str,
    is_new_requirement: bool = False,
    email: Optional[str] = None,
    mobile: Optional[str] = None,
    file_url: str = "",
) -> RepairRequest:

    request = RepairRequest(
        username=account.username,
        department=account.department,
        role=AccountRole(account.role).value,
        email=email or account.email or None,
        mobile=mobile or account.phone or None,
        description=description,
        is_new_requirement=is_new_requirement,
        file_url=file_url,
        status=RepairStatus.Pending,
        assigned_to="",
    )
    session.add(request)
    await session.commit()
    await session.refresh(request)

    logger.info(f"Repair request {request.id} created by {request.username}")
    return request


# ===================================================================
# VISIBILITY
# ===================================================================
def _visibility_clause(account):
    role = AccountRole(account.role)

    # USER → own requests in own department
    if role == AccountRole.User:
        return and_(
            RepairRequest.username == account.username,
            RepairRequest.department == account.department,
        )

    # STAFF → assigned to them, or raised by them
    if role == AccountRole.Staff:
        return or_(
            RepairRequest.assigned_to == account.name,
            RepairRequest.username == account.username,
        )

    # ADMIN → everything
    return None


def can_view(account, request: RepairRequest) -> bool:
    role = AccountRole(account.role)
    if role == AccountRole.Admin:
        return True
    if role == AccountRole.User:
        return request.username == account.username and request.department == account.department
    return request.assigned_to == account.name or request.username == account.username


# ===================================================================
# LIST / GET
# ===================================================================
async def list_repair_requests(
    session: AsyncSession,
    account,
    search: Optional[str] = None,
    status: Optional[RepairStatus] = None,
    assigned_to: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[RepairRequest]:

    query = select(RepairRequest)

    visibility = _visibility_clause(account)
    if visibility is not None:
        query = query.where(visibility)

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                RepairRequest.username.ilike(pattern),
                RepairRequest.department.ilike(pattern),
                RepairRequest.description.ilike(pattern),
            )
        )

    if status:
        query = query.where(RepairRequest.status == status)

    if assigned_to:
        query = query.where(RepairRequest.assigned_to == assigned_to)

    if date_from:
        query = query.where(RepairRequest.created_at >= datetime.combine(date_from, time.min, tzinfo=timezone.utc))

    if date_to:
        # whole day inclusive
        query = query.where(RepairRequest.created_at <= datetime.combine(date_to, time.max, tzinfo=timezone.utc))

    result = await session.execute(query.order_by(RepairRequest.created_at.desc()))
    return result.scalars().all()


async def get_repair_request(session: AsyncSession, request_id: UUID) -> RepairRequest | None:
    return await session.get(RepairRequest, request_id)


# ===================================================================
# REMARKS
# ===================================================================
async def get_remarks(session: AsyncSession, request_id: UUID) -> list[RepairRemark]:
    result = await session.execute(
        select(RepairRemark)
        .where(RepairRemark.request_id == request_id)
        .order_by(RepairRemark.date.asc())
    )
    return result.scalars().all()


async def remarks_by_request(session: AsyncSession, request_ids: list[UUID]) -> dict:
    grouped = {rid: [] for rid in request_ids}
    if not request_ids:
        return grouped

    result = await session.execute(
        select(RepairRemark)
        .where(RepairRemark.request_id.in_(request_ids))
        .order_by(RepairRemark.date.asc())
    )
    for remark in result.scalars().all():
        grouped.setdefault(remark.request_id, []).append(remark)
    return grouped


def to_read(request: RepairRequest, remarks: list[RepairRemark]) -> RepairRequestRead:
    data = RepairRequestRead.model_validate(request, from_attributes=True)
    data.remarks = [RemarkRead.model_validate(r, from_attributes=True) for r in remarks]
    return data


async def read_with_remarks(session: AsyncSession, request: RepairRequest) -> RepairRequestRead:
    return to_read(request, await get_remarks(session, request.id))


async def add_remark(session: AsyncSession, request: RepairRequest, text: str, entered_by: str) -> RepairRemark:
    remark = RepairRemark(
        request_id=request.id,
        text=text,
        entered_by=entered_by,
        date=utc_now(),
    )
    request.updated_at = utc_now()
    session.add(remark)
    session.add(request)
    await session.commit()
    await session.refresh(remark)
    return remark


async def list_all_remarks(session: AsyncSession) -> list[RemarkFeedItem]:
    result = await session.execute(
        select(RepairRemark, RepairRequest)
        .join(RepairRequest, RepairRequest.id == RepairRemark.request_id)
        .order_by(RepairRemark.date.desc())
    )

    return [
        RemarkFeedItem(
            request_id=request.id,
            remark_id=remark.id,
            username=request.username,
            department=request.department,
            text=remark.text,
            entered_by=remark.entered_by,
            date=remark.date,
            seen=remark.seen or False,
        )
        for remark, request in result.all()
    ]


async def mark_remark_seen(session: AsyncSession, request_id: UUID, remark_id: UUID) -> bool:
    """False when no unseen remark matched (missing, or already seen)."""
    result = await session.execute(
        update(RepairRemark)
        .where(
            RepairRemark.id == remark_id,
            RepairRemark.request_id == request_id,
            RepairRemark.seen.is_(False),
        )
        .values(seen=True)
    )
    await session.commit()
    return result.rowcount > 0


async def verify_remark(session: AsyncSession, request_id: UUID, remark_id: UUID, verifier: str) -> RepairRemark | None:
    result = await session.execute(
        select(RepairRemark).where(
            RepairRemark.id == remark_id,
            RepairRemark.request_id == request_id,
        )
    )
    remark = result.scalar_one_or_none()
    if not remark:
        return None

    remark.is_verified = True
    remark.verified_by = verifier
    remark.verified_at = utc_now()
    session.add(remark)
    await session.commit()
    await session.refresh(remark)
    return remark


# ===================================================================
# STATUS PROGRESSION  Pending → Assigned → Completed → Verified
# ===================================================================
def _apply_status(request: RepairRequest, target: RepairStatus, actor_name: Optional[str] = None):
    current = RepairStatus(request.status)
    if current not in ALLOWED_TRANSITIONS.get(target, set()):
        raise ValueError(f"Cannot change status from {current.value} to {target.value}")

    now = utc_now()

    if target == RepairStatus.Assigned and not request.assigned_to:
        raise ValueError("A staff member must be assigned first")

    if target == RepairStatus.Completed:
        request.completed_at = now

    if target == RepairStatus.Verified:
        request.is_verified = True
        request.verified_by = actor_name
        request.verified_at = now

    request.status = target
    request.updated_at = now


def _assign(request: RepairRequest, staff_name: str):
    current = RepairStatus(request.status)
    if current not in ALLOWED_TRANSITIONS[RepairStatus.Assigned]:
        raise ValueError(f"Cannot assign a request that is {current.value}")

    request.assigned_to = staff_name
    _apply_status(request, RepairStatus.Assigned)


async def _save(session: AsyncSession, request: RepairRequest) -> RepairRequest:
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def assign_request(session: AsyncSession, request: RepairRequest, staff: Staff) -> RepairRequest:
    _assign(request, staff.name)
    logger.info(f"Repair request {request.id} assigned to {staff.name}")
    return await _save(session, request)


async def complete_request(session: AsyncSession, request: RepairRequest) -> RepairRequest:
    _apply_status(request, RepairStatus.Completed)
    logger.info(f"Repair request {request.id} completed")
    return await _save(session, request)


async def verify_request(session: AsyncSession, request: RepairRequest, verifier: str) -> RepairRequest:
    _apply_status(request, RepairStatus.Verified, actor_name=verifier)
    logger.info(f"Repair request {request.id} verified by {verifier}")
    return await _save(session, request)


async def update_request(
    session: AsyncSession,
    request: RepairRequest,
    changes: dict,
    staff: Optional[Staff] = None,
    actor_name: Optional[str] = None,
) -> tuple[RepairRequest, list[RepairStatus]]:
    """
    Admin edit. Plain fields are copied; a new assignee and/or a new status
    run through the progression. Returns the request and every status it
    entered, in order, so the caller can queue the matching e-mails.
    """
    entered: list[RepairStatus] = []

    target_status = changes.pop("status", None)
    changes.pop("assigned_to", None)

    for field, value in changes.items():
        if value is not None:
            setattr(request, field, value)

    if staff is not None and staff.name != request.assigned_to:
        _assign(request, staff.name)
        entered.append(RepairStatus.Assigned)

    if target_status is not None and RepairStatus(target_status) != RepairStatus(request.status):
        _apply_status(request, RepairStatus(target_status), actor_name=actor_name)
        entered.append(RepairStatus(target_status))

    request.updated_at = utc_now()
    return await _save(session, request), entered


# ===================================================================
# DELETE
# ===================================================================
async def delete_repair_request(session: AsyncSession, request: RepairRequest) -> None:
    await session.execute(delete(RepairRemark).where(RepairRemark.request_id == request.id))
    await session.delete(request)
    await session.commit()
