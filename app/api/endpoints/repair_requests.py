# app/api/endpoints/repair_requests.py

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_current_account
from app.core.rbac import is_admin, is_assignee, require_admin
from app.core.storage import save_upload
from app.models.enums import RepairStatus
from app.schemas.repair_request import (
    AssignStaffRequest,
    RemarkCreate,
    RemarkFeedItem,
    RemarkRead,
    RepairRequestRead,
    RepairRequestUpdate,
)
from app.services import email_service
from app.services import repair_service
from app.services.staff_service import get_staff_by_name

router = APIRouter(prefix="/api/repair-requests", tags=["Repair Requests"])


# ===================================================================
# HELPERS
# ===================================================================
async def _load_visible(session: AsyncSession, request_id: UUID, account):
    request = await repair_service.get_repair_request(session, request_id)
    if not request or not repair_service.can_view(account, request):
        raise HTTPException(404, detail="Request not found")
    return request


async def _resolve_staff(session: AsyncSession, name: str):
    staff = await get_staff_by_name(session, name)
    if not staff:
        raise HTTPException(404, detail=f"Staff '{name}' not found")
    return staff


def _queue(background_tasks: BackgroundTasks, jobs):
    for fn, *args in jobs:
        background_tasks.add_task(fn, *args)


# ===================================================================
# CREATE (multipart, optional attachment)
# ===================================================================
@router.post("/", response_model=RepairRequestRead, status_code=status.HTTP_201_CREATED)
async def create_repair_request(
    background_tasks: BackgroundTasks,
    description: str = Form(...),
    is_new_requirement: bool = Form(False),
    email: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    if not description.strip():
        raise HTTPException(400, detail="Description is required")

    file_url = await save_upload(file)

    request = await repair_service.create_repair_request(
        session,
        current_account,
        description=description.strip(),
        is_new_requirement=is_new_requirement,
        email=email,
        mobile=mobile,
        file_url=file_url,
    )

    background_tasks.add_task(email_service.send_new_request_email, repair_service.mail_context(request))

    return repair_service.to_read(request, [])


# ===================================================================
# LIST (role filtered)
# ===================================================================
@router.get("/", response_model=List[RepairRequestRead])
async def list_repair_requests(
    search: Optional[str] = None,
    status: Optional[RepairStatus] = None,
    assigned_to: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    requests = await repair_service.list_repair_requests(
        session,
        current_account,
        search=search,
        status=status,
        assigned_to=assigned_to,
        date_from=date_from,
        date_to=date_to,
    )

    remarks = await repair_service.remarks_by_request(session, [r.id for r in requests])
    return [repair_service.to_read(r, remarks.get(r.id, [])) for r in requests]


# ===================================================================
# REMARK FEED (all requests, admin)
# ===================================================================
@router.get("/all-remarks", response_model=List[RemarkFeedItem])
async def all_remarks(
    session: AsyncSession = Depends(get_db_session),
    _=Depends(require_admin),
):
    return await repair_service.list_all_remarks(session)


# ===================================================================
# GET ONE
# ===================================================================
@router.get("/{request_id}", response_model=RepairRequestRead)
async def get_repair_request(
    request_id: UUID,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    request = await _load_visible(session, request_id, current_account)
    return await repair_service.read_with_remarks(session, request)


# ===================================================================
# ADMIN EDIT (status / assignee go through the progression)
# ===================================================================
@router.put("/{request_id}", response_model=RepairRequestRead)
async def update_repair_request(
    request_id: UUID,
    data: RepairRequestUpdate,
    background_tasks: BackgroundTasks,
    current_account=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    request = await repair_service.get_repair_request(session, request_id)
    if not request:
        raise HTTPException(404, detail="Request not found")

    staff = await _resolve_staff(session, data.assigned_to) if data.assigned_to else None

    try:
        request, entered = await repair_service.update_request(
            session,
            request,
            data.model_dump(exclude_unset=True),
            staff=staff,
            actor_name=current_account.name,
        )
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

    for new_status in entered:
        _queue(background_tasks, repair_service.transition_notifications(new_status, request, staff))

    return await repair_service.read_with_remarks(session, request)


# ===================================================================
# ASSIGN → Assigned
# ===================================================================
@router.put("/{request_id}/assign", response_model=RepairRequestRead)
async def assign_repair_request(
    request_id: UUID,
    data: AssignStaffRequest,
    background_tasks: BackgroundTasks,
    _=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    request = await repair_service.get_repair_request(session, request_id)
    if not request:
        raise HTTPException(404, detail="Request not found")

    staff = await _resolve_staff(session, data.staff_name)

    try:
        request = await repair_service.assign_request(session, request, staff)
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

    _queue(background_tasks, repair_service.transition_notifications(RepairStatus.Assigned, request, staff))
    return await repair_service.read_with_remarks(session, request)


# ===================================================================
# COMPLETE → Completed (admin or the assigned staff member)
# ===================================================================
@router.put("/{request_id}/complete", response_model=RepairRequestRead)
async def complete_repair_request(
    request_id: UUID,
    background_tasks: BackgroundTasks,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    request = await repair_service.get_repair_request(session, request_id)
    if not request:
        raise HTTPException(404, detail="Request not found")

    if not (is_admin(current_account) or is_assignee(current_account, request.assigned_to)):
        raise HTTPException(403, detail="Only the assigned staff member or an admin can complete this request")

    try:
        request = await repair_service.complete_request(session, request)
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

    _queue(background_tasks, repair_service.transition_notifications(RepairStatus.Completed, request))
    return await repair_service.read_with_remarks(session, request)


# ===================================================================
# VERIFY → Verified (admin)
# ===================================================================
@router.put("/{request_id}/verify", response_model=RepairRequestRead)
async def verify_repair_request(
    request_id: UUID,
    background_tasks: BackgroundTasks,
    current_account=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    request = await repair_service.get_repair_request(session, request_id)
    if not request:
        raise HTTPException(404, detail="Request not found")

    try:
        request = await repair_service.verify_request(session, request, current_account.name)
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

    _queue(background_tasks, repair_service.transition_notifications(RepairStatus.Verified, request))
    return await repair_service.read_with_remarks(session, request)


# ===================================================================
# DELETE (admin)
# ===================================================================
@router.delete("/{request_id}", status_code=204)
async def delete_repair_request(
    request_id: UUID,
    _=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    request = await repair_service.get_repair_request(session, request_id)
    if not request:
        raise HTTPException(404, detail="Request not found")

    await repair_service.delete_repair_request(session, request)
    return None


# ===================================================================
# REMARKS
# ===================================================================
@router.post("/{request_id}/remarks", response_model=RepairRequestRead)
async def add_remark(
    request_id: UUID,
    data: RemarkCreate,
    background_tasks: BackgroundTasks,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    if not data.text.strip():
        raise HTTPException(400, detail="Remark text is required")

    request = await _load_visible(session, request_id, current_account)
    remark = await repair_service.add_remark(session, request, data.text.strip(), current_account.name)

    if request.email:
        background_tasks.add_task(
            email_service.send_new_remark_email,
            repair_service.mail_context(request),
            {"text": remark.text, "entered_by": remark.entered_by, "date": remark.date},
        )

    return await repair_service.read_with_remarks(session, request)


@router.get("/{request_id}/remarks", response_model=List[RemarkRead])
async def get_remarks(
    request_id: UUID,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    request = await _load_visible(session, request_id, current_account)
    return await repair_service.get_remarks(session, request.id)


@router.patch("/{request_id}/remarks/{remark_id}/mark-seen")
async def mark_remark_seen(
    request_id: UUID,
    remark_id: UUID,
    current_account=Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
):
    await _load_visible(session, request_id, current_account)

    if not await repair_service.mark_remark_seen(session, request_id, remark_id):
        raise HTTPException(404, detail="Remark not found or already marked")

    return {"detail": "Remark marked as seen"}


@router.patch("/{request_id}/remarks/{remark_id}/verify", response_model=RemarkRead)
async def verify_remark(
    request_id: UUID,
    remark_id: UUID,
    current_account=Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    remark = await repair_service.verify_remark(session, request_id, remark_id, current_account.name)
    if not remark:
        raise HTTPException(404, detail="Remark not found")
    return remark
