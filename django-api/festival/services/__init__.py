from festival.services.admission_service import AdmissionService
from festival.services.result_service import ResultService
from festival.services.scoring_service import ScoringService

__all__ = ["AdmissionService", "ResultService", "ScoringService"]
