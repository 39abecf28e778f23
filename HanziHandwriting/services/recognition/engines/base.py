"""Backend capability shared by the real and synthetic classifiers."""
from __future__ import annotations

import numpy as np


class RecognitionBackend:
    """A classifier exposing `predict(tensor) -> scores`.

    `predict` receives the float32 batch from `tensor.image_to_tensor` and
    returns anything `numpy.asarray` can flatten into one score per class.
    """
    name = 'base'
    synthetic = False

    def predict(self, tensor: np.ndarray):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
