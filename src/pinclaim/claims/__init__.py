"""Pin claim lifecycle: status, new claims, renewals and reprocessing."""

from pinclaim.claims.orchestrator import PinClaimOrchestrator
from pinclaim.claims.renewal import RenewalCoordinator
from pinclaim.claims.reprocess import ReprocessingCoordinator
from pinclaim.claims.status import PinStatusResolver
from pinclaim.claims.tokens import TokenSufficiencyChecker

__all__ = [
    "PinClaimOrchestrator",
    "RenewalCoordinator",
    "ReprocessingCoordinator",
    "PinStatusResolver",
    "TokenSufficiencyChecker",
]
