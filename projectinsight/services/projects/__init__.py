from .lifecycle import ProjectLifecycleManager, validate_submission
from .tasks import BackgroundTasks

__all__ = ["ProjectLifecycleManager", "BackgroundTasks", "validate_submission"]
