from ssdnode.pipeline.task import PROGRESS_STEPS, MobileNetSSDTask, ProgressStep

__all__ = ["PROGRESS_STEPS", "MobileNetSSDTask", "ProgressStep"]
