from .scheduler import STATUS_FAILED, STATUS_SAVED, AutosaveScheduler, SaveResult

__all__ = [
    "AutosaveScheduler",
    "STATUS_FAILED",
    "STATUS_SAVED",
    "SaveResult",
]
