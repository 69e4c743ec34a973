class SSDNodeError(RuntimeError):
    """Base class for failures that abort processing of the current frame."""


class InvalidInput(SSDNodeError):
    """Raised when the image or node parameters are missing or invalid."""


class ModelLoadFailure(SSDNodeError):
    """Raised when the inference engine cannot read the network."""


class ResourceUnavailable(ModelLoadFailure):
    """Raised when model, weights or label files are missing."""


class InferenceFailure(SSDNodeError):
    """Raised when the inference engine fails during a forward pass."""


class InvalidTensorShape(SSDNodeError):
    """Raised when a network output does not have the 1x1xNx7 layout."""
