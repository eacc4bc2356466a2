"""
Admission protocol definitions

Request/response models shared by the single-image evaluator and the
batch orchestrator, plus the tunable gate configuration.
"""
from enum import Enum
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, model_validator


DEFAULT_ALLOWED_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif"]


class AdmissionReason(str, Enum):
    """Outcome codes of a single admission check"""
    ok = "ok"
    wrong_format = "wrong-format"
    too_small = "too-small"
    too_blurry = "too-blurry"
    processing_failed = "processing-failed"


class AdmissionConfig(BaseModel):
    """Thresholds and bounds of the upload gate"""
    blur_threshold: float = Field(1000.0, ge=0, description="Laplacian variance below this is blurry (500-2000 is sensible)")
    min_width: int = Field(0, ge=0)
    min_height: int = Field(0, ge=0)
    max_width: int = Field(2000, ge=1)
    max_height: int = Field(2000, ge=1)
    allowed_types: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TYPES))
    enable_blur_detection: bool = True
    fail_open_on_scoring_error: bool = Field(
        True, description="Treat images whose sharpness cannot be scored as sharp"
    )
    working_size: int = Field(300, ge=1, description="Scoring resolution bound per axis")
    max_workers: int = Field(1, ge=1, description="Threads used to assess a batch")

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_width > self.max_width or self.min_height > self.max_height:
            raise ValueError("minimum dimensions must not exceed maximum dimensions")
        return self

    @classmethod
    def from_settings(cls, config: dict, **overrides) -> "AdmissionConfig":
        """Build from the 'admission' section of a loaded settings dict, overrides win."""
        return cls.model_validate({**(config.get('admission') or {}), **overrides})


class UploadSlot(BaseModel):
    """One uploaded file as handed over by the transport"""
    slot_id: str = Field(..., description="Form field / slot name")
    mime_type: str = Field(..., description="Declared MIME type")
    path: str = Field(..., description="Where the upload is stored")
    original_name: Optional[str] = None
    size: Optional[int] = Field(None, ge=0, description="Size in bytes")
    declared_width: Optional[int] = None
    declared_height: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "slot_id": "productImage",
                "mime_type": "image/jpeg",
                "path": "/uploads/1718000000-shoe.jpg",
                "original_name": "shoe.jpg",
                "size": 482113
            }
        }


class AdmissionVerdict(BaseModel):
    """Verdict for a single image"""
    slot_id: str
    accepted: bool
    reason: AdmissionReason
    message: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    sharpness: Optional[float] = Field(None, description="Laplacian variance, None if not scored")
    normalized_dimensions: Optional[Tuple[int, int]] = Field(
        None, description="(width, height) after a resize was applied"
    )


class BatchRejection(BaseModel):
    """The single rejection reported for a failed batch"""
    slot_id: str
    reason: AdmissionReason
    message: str


class BatchOutcome(BaseModel):
    """Result of evaluating every slot of one request"""
    proceed: bool
    rejection: Optional[BatchRejection] = None
    verdicts: List[AdmissionVerdict] = Field(default_factory=list)
    normalized: Dict[str, Tuple[int, int]] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "proceed": False,
                "rejection": {
                    "slot_id": "gallery",
                    "reason": "too-blurry",
                    "message": "Image is too blurry: gallery. Please upload a clearer, sharper image."
                },
                "verdicts": [],
                "normalized": {}
            }
        }
