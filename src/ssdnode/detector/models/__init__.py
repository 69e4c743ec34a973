from ssdnode.detector.models.model_spec import ModelSpec, PreprocessConfig

__all__ = ["ModelSpec", "PreprocessConfig"]
