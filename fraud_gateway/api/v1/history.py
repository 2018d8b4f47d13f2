"""GET /v1/history - Fetch a session's recent verdicts"""

from fastapi import APIRouter, Depends, HTTPException, Query

from fraud_gateway.api.dependencies import get_history_registry
from fraud_gateway.api.v1.schemas import HistoryResponse, VerdictResponse
from fraud_gateway.infrastructure.history import HistoryRegistry

router = APIRouter()


@router.get("/history", response_model=HistoryResponse)
def get_history(
    session_id: str = Query("default", min_length=1, description="Caller session"),
    limit: int = Query(10, ge=1, le=100, description="Maximum number of verdicts"),
    histories: HistoryRegistry = Depends(get_history_registry),
):
    """
    Retrieve recent verdicts for a session.

    Returns:
        Verdicts ordered most recent first
    """
    session = histories.get(session_id)
    verdicts = session.recent(limit) if session is not None else []
    return HistoryResponse(
        session_id=session_id,
        verdicts=[VerdictResponse.from_verdict(v) for v in verdicts],
    )


@router.delete("/history", status_code=204)
def end_session(
    session_id: str = Query(..., min_length=1, description="Caller session"),
    histories: HistoryRegistry = Depends(get_history_registry),
):
    """Drop a session and its history"""
    if not histories.end_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
