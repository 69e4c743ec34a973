from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from ssdnode.detector.colors import ColorTable
from ssdnode.detector.download import ensure_weights
from ssdnode.detector.errors import (
    InferenceFailure,
    InvalidInput,
    ModelLoadFailure,
    ResourceUnavailable,
)
from ssdnode.detector.labels import LabelTable
from ssdnode.detector.models.model_spec import ModelSpec, PreprocessConfig

CUDA_SIZE_JITTER = 32


class SessionState(str, Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"


@dataclass(frozen=True)
class NetworkHandle:
    net: Any
    spec: ModelSpec
    output_names: tuple[str, ...]


class InputSizePolicy:
    """Square network input size for each forward pass.

    With jitter enabled the size alternates between ``base + jitter`` and
    ``base - jitter`` on every call. Only used for the CUDA backend.
    """

    def __init__(self, base_size: int, jitter: int = 0) -> None:
        self._base_size = base_size
        self._jitter = jitter
        self._grow = True

    def next_size(self) -> int:
        if self._jitter <= 0:
            return self._base_size
        size = self._base_size + self._jitter if self._grow else self._base_size - self._jitter
        self._grow = not self._grow
        return size


def ensure_color_image(image: Any) -> np.ndarray:
    """Detection networks need 3-channel input."""
    if image is None or getattr(image, "size", 0) == 0:
        raise InvalidInput("Empty image")

    array = np.asarray(image)
    if array.ndim == 2 or (array.ndim == 3 and array.shape[2] == 1):
        return cv2.cvtColor(array, cv2.COLOR_GRAY2BGR)
    if array.ndim == 3 and array.shape[2] == 4:
        return cv2.cvtColor(array, cv2.COLOR_BGRA2BGR)
    if array.ndim == 3 and array.shape[2] == 3:
        return array
    raise InvalidInput(f"Unsupported image shape: {array.shape}")


def _select_device(net: Any, device: str) -> None:
    if device == "cuda":
        net.setPreferableBackend(cv2.dnn.DNN_BACKEND_CUDA)
        net.setPreferableTarget(cv2.dnn.DNN_TARGET_CUDA)
    elif device == "opencl":
        net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
        net.setPreferableTarget(cv2.dnn.DNN_TARGET_OPENCL)
    else:
        net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
        net.setPreferableTarget(cv2.dnn.DNN_TARGET_CPU)


class NetworkSession:
    """Owns the loaded network plus the label and color tables that go with it.

    A session is either unloaded or loaded with exactly one ``ModelSpec``.
    ``reload`` is the only transition that replaces the network, and it
    regenerates the color table from the freshly loaded labels before
    returning.
    """

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng
        self._handle: NetworkHandle | None = None
        self._size_policy: InputSizePolicy | None = None
        self.labels = LabelTable()
        self.colors = ColorTable()
        self._logger = logging.getLogger("ssdnode.network")

    @property
    def state(self) -> SessionState:
        return SessionState.LOADED if self._handle is not None else SessionState.UNLOADED

    @property
    def handle(self) -> NetworkHandle | None:
        return self._handle

    def ensure_loaded(self, spec: ModelSpec) -> NetworkHandle:
        if self._handle is not None and self._handle.spec == spec:
            return self._handle
        return self.reload(spec)

    def reload(self, spec: ModelSpec) -> NetworkHandle:
        self.unload()

        structure_path = Path(spec.structure_path)
        if not structure_path.is_file():
            raise ResourceUnavailable(f"Network structure file missing: {structure_path}")
        weights_path = ensure_weights(spec.weights_path, spec.weights_url)

        try:
            net = cv2.dnn.readNet(str(weights_path), str(structure_path), spec.framework)
        except cv2.error as exc:
            raise ModelLoadFailure(str(exc)) from exc
        if net is None or net.empty():
            raise ModelLoadFailure("Failed to load network")

        try:
            _select_device(net, spec.device)
            output_names = tuple(net.getUnconnectedOutLayersNames())
        except cv2.error as exc:
            raise ModelLoadFailure(str(exc)) from exc

        labels = LabelTable.from_file(spec.labels_path)
        self.labels = labels
        self.colors = ColorTable()
        self.colors.generate(len(labels), rng=self._rng)

        jitter = CUDA_SIZE_JITTER if spec.device == "cuda" and spec.cuda_size_jitter else 0
        self._size_policy = InputSizePolicy(spec.input_size, jitter)
        self._handle = NetworkHandle(net=net, spec=spec, output_names=output_names)
        self._logger.info(
            "network loaded model=%s framework=%s device=%s labels=%d outputs=%s",
            spec.name,
            spec.framework,
            spec.device,
            len(labels),
            ",".join(output_names),
        )
        return self._handle

    def unload(self) -> None:
        if self._handle is not None:
            self._logger.debug("network unloaded model=%s", self._handle.spec.name)
        self._handle = None
        self._size_policy = None

    def forward(self, image: Any, preprocess: PreprocessConfig | None = None) -> list[np.ndarray]:
        if self._handle is None or self._size_policy is None:
            raise ModelLoadFailure("Network not loaded")

        config = preprocess or self._handle.spec.preprocess()
        color_image = ensure_color_image(image)
        size = self._size_policy.next_size() if preprocess is None else config.input_size

        try:
            blob = cv2.dnn.blobFromImage(
                color_image,
                config.scale_factor,
                (size, size),
                (config.mean, config.mean, config.mean),
                config.swap_rb,
                config.crop,
            )
            self._handle.net.setInput(blob)
            outputs = self._handle.net.forward(list(self._handle.output_names))
        except cv2.error as exc:
            raise InferenceFailure(str(exc)) from exc

        return [np.asarray(output) for output in outputs]
