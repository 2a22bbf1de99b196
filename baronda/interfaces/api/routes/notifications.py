"""Endpoints and websocket handler for notification fan-out and inboxes."""

from __future__ import annotations

import logging
from typing import Literal, NoReturn

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from baronda.application.use_cases.notifications import (
    broadcast_notification,
    count_unread,
    delete_all,
    delete_many,
    delete_one,
    list_inbox,
    mark_many_read,
    mark_read,
    resolve_recipients,
)
from baronda.domain.entities import (
    CallerContext,
    DeliveryRecord,
    InboxPage,
    InboxScope,
    MessageTemplate,
)
from baronda.domain.errors import (
    AccessDenied,
    BulkDeleteFailed,
    EmptySelection,
    FanoutBatchConflict,
    FanoutWriteFailed,
    NotificationError,
)
from baronda.infrastructure.database import SessionLocal, get_db
from baronda.infrastructure.notifications import (
    notification_manager,
    serialize_delivery_record,
)
from baronda.infrastructure.repositories import DeliveryRecordRepository
from baronda.interfaces.api.dependencies import (
    get_current_caller,
    require_staff,
    resolve_current_recipient,
)
from baronda.interfaces.api.schemas import (
    DeleteManyRequest,
    DeleteResponse,
    DeliveryRecordRead,
    FanoutRequest,
    FanoutResponse,
    InboxPageRead,
    MarkReadResponse,
    RecipientPreviewResponse,
    TargetSpec,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

Direction = Literal["next", "prev"]


def _raise_http(exc: NotificationError) -> NoReturn:
    """Translate a domain error into the matching HTTP response."""

    if isinstance(exc, AccessDenied):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, EmptySelection):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, FanoutBatchConflict):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, (FanoutWriteFailed, BulkDeleteFailed)):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=code, detail=str(exc)) from exc


def _record_to_schema(record: DeliveryRecord) -> DeliveryRecordRead:
    return DeliveryRecordRead.model_validate(record)


def _page_to_schema(page: InboxPage) -> InboxPageRead:
    return InboxPageRead(
        records=[_record_to_schema(record) for record in page.records],
        next_cursor=page.next_cursor,
        prev_cursor=page.prev_cursor,
        is_last_page=page.is_last_page,
        is_first_page=page.is_first_page,
    )


def _list_scope(
    db: Session,
    caller: CallerContext,
    scope: InboxScope,
    *,
    cursor: str | None,
    page_size: int | None,
    direction: str,
) -> InboxPageRead:
    try:
        page = list_inbox(
            db,
            caller,
            scope,
            cursor=cursor,
            page_size=page_size,
            direction=direction,
        )
    except ValueError as exc:
        if isinstance(exc, NotificationError):
            _raise_http(exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _page_to_schema(page)


@router.post("/fanout", response_model=FanoutResponse, status_code=status.HTTP_201_CREATED)
def send_notification(
    request: FanoutRequest,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(require_staff),
) -> FanoutResponse:
    """Send one message to every recipient selected by the target."""

    template = MessageTemplate(
        title=request.template.title,
        body=request.template.body,
        link=request.template.link,
        image_url=request.template.image_url,
    )
    try:
        result = broadcast_notification(
            db,
            caller,
            request.target.to_rule(),
            template,
            batch_id=request.batch_id,
        )
    except EmptySelection as exc:
        logger.warning("Fan-out by %s matched no recipients", caller.recipient_id)
        _raise_http(exc)
    except NotificationError as exc:
        _raise_http(exc)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return FanoutResponse(
        batch_id=result.batch_id,
        count=result.count,
        created=result.created,
        duplicate=result.duplicate,
    )


@router.post("/recipients/preview", response_model=RecipientPreviewResponse)
def preview_recipients(
    target: TargetSpec,
    db: Session = Depends(get_db),
    _: CallerContext = Depends(require_staff),
) -> RecipientPreviewResponse:
    """Return who a target would reach without sending anything."""

    try:
        recipient_ids = resolve_recipients(db, target.to_rule())
    except NotificationError as exc:
        _raise_http(exc)
    ordered = sorted(recipient_ids)
    return RecipientPreviewResponse(count=len(ordered), recipient_ids=ordered)


@router.get("/", response_model=InboxPageRead)
def list_my_notifications(
    cursor: str | None = Query(default=None),
    page_size: int | None = Query(default=None, ge=1),
    direction: Direction = Query(default="next"),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> InboxPageRead:
    """Return a page of the authenticated recipient's inbox, newest first."""

    return _list_scope(
        db,
        caller,
        InboxScope.for_recipient(caller.recipient_id),
        cursor=cursor,
        page_size=page_size,
        direction=direction,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> UnreadCountRead:
    unread = count_unread(db, caller, caller.recipient_id)
    return UnreadCountRead(recipient_id=caller.recipient_id, unread=unread)


@router.get("/all", response_model=InboxPageRead)
def list_all_notifications(
    cursor: str | None = Query(default=None),
    page_size: int | None = Query(default=None, ge=1),
    direction: Direction = Query(default="next"),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(require_staff),
) -> InboxPageRead:
    """Audit view over every delivery record (staff only)."""

    return _list_scope(
        db,
        caller,
        InboxScope.all(),
        cursor=cursor,
        page_size=page_size,
        direction=direction,
    )


@router.get("/recipients/{recipient_id}", response_model=InboxPageRead)
def list_recipient_notifications(
    recipient_id: str,
    cursor: str | None = Query(default=None),
    page_size: int | None = Query(default=None, ge=1),
    direction: Direction = Query(default="next"),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> InboxPageRead:
    """Inbox of ``recipient_id``; staff may read any, recipients only their own."""

    return _list_scope(
        db,
        caller,
        InboxScope.for_recipient(recipient_id),
        cursor=cursor,
        page_size=page_size,
        direction=direction,
    )


@router.post("/{record_id}/read", response_model=MarkReadResponse)
def mark_notification_read(
    record_id: str,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> MarkReadResponse:
    """Mark a record as read; repeating the call is harmless."""

    try:
        transition = mark_read(db, caller, record_id)
    except NotificationError as exc:
        _raise_http(exc)
    return MarkReadResponse(id=record_id, status=transition.value)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    record_id: str,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> Response:
    try:
        if not delete_one(db, caller, record_id):
            logger.info("Delivery record %s was already deleted", record_id)
    except NotificationError as exc:
        _raise_http(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/delete", response_model=DeleteResponse)
def delete_selected_notifications(
    request: DeleteManyRequest,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> DeleteResponse:
    """Delete a selection of records in a single transaction."""

    try:
        deleted = delete_many(db, caller, request.unique_ids())
    except NotificationError as exc:
        _raise_http(exc)
    return DeleteResponse(deleted=deleted)


@router.delete("/", response_model=DeleteResponse)
def delete_all_notifications(
    recipient_id: str | None = Query(
        default=None,
        description="Hapus hanya milik penerima ini; kosongkan untuk semua (khusus pengurus)",
    ),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
) -> DeleteResponse:
    scope = InboxScope.for_recipient(recipient_id) if recipient_id else InboxScope.all()
    try:
        deleted = delete_all(db, caller, scope)
    except NotificationError as exc:
        _raise_http(exc)
    return DeleteResponse(deleted=deleted)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream new delivery records to the authenticated recipient.

    Clients send ``{"type": "ping"}`` to keep the connection alive and
    ``{"type": "ack", "ids": [...]}`` to mark records as read.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        recipient = resolve_current_recipient(token, session)
        if not recipient.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Pengguna tidak aktif"
            )
        caller = CallerContext.from_recipient(recipient)
        pending = DeliveryRecordRepository(session).list_page(
            recipient_id=recipient.id, cursor=None, limit=50
        )
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_manager.connect(caller.recipient_id, websocket)
    try:
        unread = [serialize_delivery_record(record) for record in pending if not record.read]
        if unread:
            await websocket.send_json({"type": "init", "data": unread})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        mark_many_read(
                            ack_session,
                            caller,
                            [str(record_id) for record_id in ids if record_id],
                        )
                    finally:
                        ack_session.close()
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(caller.recipient_id, websocket)
    except Exception:
        notification_manager.disconnect(caller.recipient_id, websocket)
        raise
