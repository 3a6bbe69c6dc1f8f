from recruitai.eye_contact.models import EyeContactStats
from recruitai.eye_contact.tracker import EyeContactTracker

__all__ = ["EyeContactStats", "EyeContactTracker"]
