"""Recognition error taxonomy.

Both failures are recovered inside `RecognitionEngine`; callers of
`recognize()` never see them.
"""
from __future__ import annotations


class HandwritingError(RuntimeError):
    pass


class BackendAcquisitionFailure(HandwritingError):
    """Backend could not be loaded (missing deps, bad file, network, unknown name)."""


class InferenceFailure(HandwritingError):
    """Backend invocation raised or returned malformed output."""
