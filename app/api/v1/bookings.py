import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.v1.schemas import (
    CreateSessionRequestSchema,
    FormUpdateRequestSchema,
    SelectionRequestSchema,
    SessionStateSchema,
)
from app.application.exceptions import (
    BookingInProgressError,
    BookingSubmissionError,
    InvalidSelectionError,
    SessionNotFoundError,
    SubmissionTimeoutError,
)
from app.application.ports.booking_backend import BookingBackendPort
from app.application.ports.session_store import BookingSessionStorePort
from app.application.use_cases.booking_flow import BookingFlow
from app.application.utils.availability_policy import AvailabilityPolicy
from app.domain.entities.widget_options import WidgetOptions
from app.wiring.dependencies import (
    build_booking_flow,
    default_widget_options,
    get_availability_policy,
    get_booking_backend,
    get_session_store,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_flow(store: BookingSessionStorePort, session_id: str) -> BookingFlow:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Booking session not found")


def _snapshot(flow: BookingFlow) -> SessionStateSchema:
    return SessionStateSchema.from_state(flow.session_id, flow.state)


@router.post("", response_model=SessionStateSchema, status_code=201)
def create_session(
    req: CreateSessionRequestSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
    backend: BookingBackendPort = Depends(get_booking_backend),
    policy: AvailabilityPolicy = Depends(get_availability_policy),
):
    defaults = default_widget_options()
    options = WidgetOptions(
        theme=req.theme or defaults.theme,
        lang=req.lang or defaults.lang,
        api_key=req.api_key,
    )
    # the local clock is only read here, at the edge
    today = req.today or date.today()
    flow = build_booking_flow(today=today, options=options, backend=backend, policy=policy)
    store.create(flow)
    return _snapshot(flow)


@router.get("/{session_id}", response_model=SessionStateSchema)
def get_session(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    return _snapshot(_get_flow(store, session_id))


@router.delete("/{session_id}", status_code=204)
def delete_session(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    try:
        store.delete(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return Response(status_code=204)


@router.put("/{session_id}/selection", response_model=SessionStateSchema)
def update_selection(
    session_id: str,
    req: SelectionRequestSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    flow = _get_flow(store, session_id)
    try:
        flow.update_form_data(**req.model_dump(include=req.model_fields_set))
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _snapshot(flow)


@router.patch("/{session_id}/form", response_model=SessionStateSchema)
def update_form(
    session_id: str,
    req: FormUpdateRequestSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    flow = _get_flow(store, session_id)
    try:
        flow.update_form_data(**req.model_dump(exclude_unset=True, exclude_none=True))
    except BookingInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _snapshot(flow)


@router.post("/{session_id}/step/next", response_model=SessionStateSchema)
def next_step(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _get_flow(store, session_id)
    flow.go_to_next_step()
    return _snapshot(flow)


@router.post("/{session_id}/step/previous", response_model=SessionStateSchema)
def previous_step(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _get_flow(store, session_id)
    flow.go_to_previous_step()
    return _snapshot(flow)


@router.post("/{session_id}/confirmation/open", response_model=SessionStateSchema)
def open_confirmation(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _get_flow(store, session_id)
    flow.open_confirmation()
    return _snapshot(flow)


@router.post("/{session_id}/confirmation/close", response_model=SessionStateSchema)
def close_confirmation(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _get_flow(store, session_id)
    flow.close_confirmation()
    return _snapshot(flow)


@router.post("/{session_id}/reset", response_model=SessionStateSchema)
def reset_booking(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _get_flow(store, session_id)
    try:
        flow.reset_booking()
    except BookingInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _snapshot(flow)


@router.post("/{session_id}/complete", response_model=SessionStateSchema)
async def complete_booking(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _get_flow(store, session_id)
    try:
        await flow.complete_booking()
    except InvalidSelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SubmissionTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except BookingSubmissionError as e:
        logger.warning("Booking submission failed", extra={"session_id": session_id, "error": str(e)})
        raise HTTPException(status_code=502, detail=str(e))
    return _snapshot(flow)
