"""Holds the active rule catalogs so operators can retune without a redeploy"""

import logging
import threading
from enum import Enum
from typing import Dict

from fraud_gateway.domain.rules import RuleCatalog


class CatalogProfile(str, Enum):
    STANDARD = "standard"  # detailed per-transaction form
    SWEEP = "sweep"  # parameter-sweep risk assessment


class CatalogStore:
    """Profile -> active catalog; replacement swaps the whole catalog atomically"""

    def __init__(self, standard: RuleCatalog, sweep: RuleCatalog):
        self._catalogs: Dict[CatalogProfile, RuleCatalog] = {
            CatalogProfile.STANDARD: standard,
            CatalogProfile.SWEEP: sweep,
        }
        self._lock = threading.Lock()

    def get(self, profile: CatalogProfile = CatalogProfile.STANDARD) -> RuleCatalog:
        with self._lock:
            return self._catalogs[profile]

    def replace(self, profile: CatalogProfile, catalog: RuleCatalog) -> None:
        with self._lock:
            self._catalogs[profile] = catalog
        logging.info(
            "Catalog reconfigured",
            extra={"profile": profile.value, "rules": list(catalog.rule_names)},
        )
