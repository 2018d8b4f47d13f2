"""GET/PUT /v1/catalog - inspect and retune the active rule catalog"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from fraud_gateway.api.dependencies import get_catalog_store, get_request_id
from fraud_gateway.api.v1.schemas import CatalogResponse, CatalogUpdateRequest
from fraud_gateway.domain.exceptions import InvalidConfigurationError
from fraud_gateway.domain.rules import STANDARD_RULES, SWEEP_RULES, configure_catalog
from fraud_gateway.infrastructure.catalog_store import CatalogProfile, CatalogStore

PROFILE_RULES = {
    CatalogProfile.STANDARD: STANDARD_RULES,
    CatalogProfile.SWEEP: SWEEP_RULES,
}

router = APIRouter()


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(
    profile: CatalogProfile = Query(CatalogProfile.STANDARD),
    catalogs: CatalogStore = Depends(get_catalog_store),
):
    """Describe the rules and base-risk tables of a catalog profile"""
    return CatalogResponse.from_catalog(catalogs.get(profile))


@router.put("/catalog", response_model=CatalogResponse)
def update_catalog(
    request_body: CatalogUpdateRequest,
    request: Request,
    profile: CatalogProfile = Query(CatalogProfile.STANDARD),
    catalogs: CatalogStore = Depends(get_catalog_store),
):
    """
    Reconfigure a catalog profile.

    Rule names are resolved against the profile's own rule set. The new
    catalog is validated in full before it replaces the active one.
    """
    request_id = get_request_id(request)
    current = catalogs.get(profile)

    try:
        catalog = configure_catalog(
            rules=request_body.rules if request_body.rules is not None else list(current.rule_names),
            merchant_weights=(
                request_body.merchant_weights
                if request_body.merchant_weights is not None
                else current.merchant_weights
            ),
            time_weights=request_body.time_weights if request_body.time_weights is not None else current.time_weights,
            name=profile.value,
            registry=PROFILE_RULES[profile],
        )
    except InvalidConfigurationError as e:
        logging.warning(
            f"Invalid catalog configuration: {e}",
            extra={"request_id": request_id, "profile": profile.value},
        )
        raise HTTPException(status_code=422, detail=str(e))

    catalogs.replace(profile, catalog)
    return CatalogResponse.from_catalog(catalog)
