"""POST /v1/evaluate - card transaction risk verdict endpoint"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from fraud_gateway.api.dependencies import get_catalog_store, get_history_registry, get_request_id
from fraud_gateway.api.v1.schemas import EvaluationRequest, VerdictResponse
from fraud_gateway.domain.exceptions import MissingRequiredFieldError
from fraud_gateway.domain.intake import transaction_from_input
from fraud_gateway.domain.scoring import evaluate
from fraud_gateway.infrastructure.catalog_store import CatalogProfile, CatalogStore
from fraud_gateway.infrastructure.history import HistoryRegistry
from fraud_gateway.infrastructure.observability.logging import log_verdict
from fraud_gateway.infrastructure.observability.metrics import missing_field_counter, record_verdict

router = APIRouter()


@router.post("/evaluate", response_model=VerdictResponse)
def evaluate_transaction(
    request_body: EvaluationRequest,
    request: Request,
    session_id: str = Query("default", min_length=1, description="Caller session owning the history"),
    profile: CatalogProfile = Query(CatalogProfile.STANDARD, description="Rule catalog to score against"),
    catalogs: CatalogStore = Depends(get_catalog_store),
    histories: HistoryRegistry = Depends(get_history_registry),
):
    """
    Score a card transaction and record the verdict in the session history.

    Flow:
    1. Validate required fields and normalise raw input
    2. Run the selected rule catalog
    3. Append the verdict to the session history
    4. Return verdict with contributing factors
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transaction = transaction_from_input(request_body.model_dump())
    except MissingRequiredFieldError as e:
        missing_field_counter.inc()
        logging.warning(f"Evaluation refused: {e}", extra={"request_id": request_id, "session_id": session_id})
        raise HTTPException(status_code=422, detail=str(e))

    verdict = evaluate(transaction, catalogs.get(profile))
    histories.for_session(session_id).append(verdict)

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    record_verdict(verdict)
    log_verdict(request_id, session_id, verdict, duration_ms)

    return VerdictResponse.from_verdict(verdict)
