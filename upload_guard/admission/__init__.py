"""
Upload admission

Checks uploaded images before they reach business logic:
- declared MIME type allow-list
- decodability and minimum resolution
- Laplacian-variance blur detection
- shrinking of oversized images
"""
from .protocol import (
    AdmissionConfig,
    AdmissionReason,
    AdmissionVerdict,
    BatchOutcome,
    BatchRejection,
    UploadSlot,
)
from .evaluator import ImageAdmissionEvaluator
from .batch import BatchAdmissionService, flatten_fields

__all__ = [
    # Protocol
    "AdmissionConfig",
    "AdmissionReason",
    "AdmissionVerdict",
    "BatchOutcome",
    "BatchRejection",
    "UploadSlot",
    # Evaluation
    "ImageAdmissionEvaluator",
    "BatchAdmissionService",
    "flatten_fields",
]
