from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request, status

from remind_service.api.deps import get_remind_service
from remind_service.core.responses import success_response
from remind_service.schemas.remind import RemindCancel, RemindCreate, ThrottledUpdate
from remind_service.services.reminds import RemindService

router = APIRouter(prefix="/reminds", tags=["Reminds"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_reminds(
    payload: RemindCreate,
    request: Request,
    service: RemindService = Depends(get_remind_service),
):
    output = await service.create_reminds(
        times=payload.times,
        user_id=payload.user_id,
        devices=payload.devices,
        task_id=payload.task_id,
        task_type=payload.task_type,
    )
    return success_response(data=output, request=request)


@router.get("")
async def list_reminds(
    request: Request,
    start: datetime = Query(...),
    end: datetime = Query(...),
    service: RemindService = Depends(get_remind_service),
):
    output = await service.list_reminds_by_time_range(start, end)
    return success_response(data=output, request=request)


@router.post("/cancel")
async def cancel_reminds(
    payload: RemindCancel,
    request: Request,
    service: RemindService = Depends(get_remind_service),
):
    await service.cancel_reminds_by_task_id(payload.task_id, payload.user_id)
    return success_response(data={"ok": True}, request=request)


@router.post("/{remind_id}/throttled")
async def update_throttled(
    remind_id: str,
    payload: ThrottledUpdate,
    request: Request,
    service: RemindService = Depends(get_remind_service),
):
    output = await service.update_throttled(remind_id, payload.throttled)
    return success_response(data=output, request=request)


@router.delete("/{remind_id}")
async def delete_remind(
    remind_id: str,
    request: Request,
    service: RemindService = Depends(get_remind_service),
):
    await service.delete_remind(remind_id)
    return success_response(data={"ok": True}, request=request)
