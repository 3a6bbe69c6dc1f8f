from recruitai.scheduling.periodic import PeriodicTask

__all__ = ["PeriodicTask"]
