from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette import status

from apps.api.schemas import (
    CalculatorView,
    EditResult,
    FieldEditReq,
    LeverageReq,
    LockResult,
    TierOut,
)
from apps.api.sessions import CalculatorSessions
from apps.calc.render import render
from apps.calc.store import UnknownFieldError
from apps.calc.tiers import DEFAULT_TABLE

router = APIRouter()


def get_sessions(request: Request) -> CalculatorSessions:
    return request.app.state.calculator_sessions


def _unknown_field(name: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown input field: {name}")


@router.get("/tiers", response_model=List[TierOut])
def list_tiers():
    """Maintenance margin brackets used for the liquidation estimate"""
    return [TierOut(**asdict(t)) for t in DEFAULT_TABLE.tiers]


@router.get("/{session_id}", response_model=CalculatorView)
def get_state(session_id: str, sessions: CalculatorSessions = Depends(get_sessions)):
    with sessions.use(session_id) as calc:
        return render(calc.store)


@router.put("/{session_id}/fields/{name}", response_model=EditResult)
def set_field(
    session_id: str,
    name: str,
    payload: FieldEditReq,
    sessions: CalculatorSessions = Depends(get_sessions),
):
    with sessions.use(session_id) as calc:
        try:
            accepted = calc.set_field(name, payload.value)
        except UnknownFieldError as exc:
            raise _unknown_field(name) from exc
        return EditResult(accepted=accepted, state=render(calc.store))


@router.post("/{session_id}/locks/{name}", response_model=LockResult)
def toggle_lock(session_id: str, name: str, sessions: CalculatorSessions = Depends(get_sessions)):
    with sessions.use(session_id) as calc:
        try:
            locked = calc.toggle_lock(name)
        except UnknownFieldError as exc:
            raise _unknown_field(name) from exc
        return LockResult(locked=locked, state=render(calc.store))


@router.post("/{session_id}/leverage", response_model=EditResult)
def set_leverage(session_id: str, payload: LeverageReq, sessions: CalculatorSessions = Depends(get_sessions)):
    with sessions.use(session_id) as calc:
        accepted = calc.set_leverage(payload.leverage)
        return EditResult(accepted=accepted, state=render(calc.store))


@router.post("/{session_id}/reset", response_model=CalculatorView)
def reset(session_id: str, sessions: CalculatorSessions = Depends(get_sessions)):
    with sessions.use(session_id) as calc:
        calc.reset_all()
        return render(calc.store)
