from recruitai.interview.models import InterviewScoreResult, PauseInfo
from recruitai.interview.scoring import compute_all_metrics

__all__ = ["InterviewScoreResult", "PauseInfo", "compute_all_metrics"]
