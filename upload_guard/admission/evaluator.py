"""
Single-image admission

Decides whether one uploaded image may go on to business logic:
declared type, decodability, minimum size, sharpness, and an
optional shrink of oversized images.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.io.local import LocalProvider, SecurityViolationError
from ..core.io.provider import StorageProvider
from ..core.io.temp_manager import TempFileManager
from ..core.processor import ImageDecodeError, ImageProcessor
from ..core.quality import QualityChecker
from .protocol import AdmissionConfig, AdmissionReason, AdmissionVerdict, UploadSlot

logger = logging.getLogger(__name__)

TYPE_LABELS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WebP",
    "image/gif": "GIF",
}


def describe_types(mime_types: List[str]) -> str:
    """'image/jpeg', 'image/png' -> 'JPEG and PNG'"""
    labels = [TYPE_LABELS.get(t, t) for t in mime_types]
    if len(labels) <= 1:
        return "".join(labels)
    if len(labels) == 2:
        return f"{labels[0]} and {labels[1]}"
    return f"{', '.join(labels[:-1])}, and {labels[-1]}"


@dataclass
class Assessment:
    """Verdict plus the re-encoded bytes to persist, if a resize is due."""
    verdict: AdmissionVerdict
    resized: Optional[bytes] = None


class ImageAdmissionEvaluator:
    def __init__(
        self,
        config: Optional[AdmissionConfig] = None,
        provider: Optional[StorageProvider] = None,
        checker: Optional[QualityChecker] = None
    ):
        self.config = config or AdmissionConfig()
        self.provider = provider or LocalProvider()
        self.checker = checker or QualityChecker(self.config.working_size)

    # --- verdict helpers ---

    def _reject(self, slot: UploadSlot, reason: AdmissionReason, message: str, **extra) -> Assessment:
        logger.info(f"❌ {slot.slot_id} rejected ({reason.value}): {message}")
        return Assessment(AdmissionVerdict(
            slot_id=slot.slot_id, accepted=False, reason=reason, message=message, **extra
        ))

    def _processing_failed(self, slot: UploadSlot, **extra) -> Assessment:
        return self._reject(
            slot, AdmissionReason.processing_failed,
            f"Failed to process image: {slot.slot_id}. File may be corrupted.",
            **extra
        )

    # --- checks ---

    def assess(self, slot: UploadSlot) -> Assessment:
        """
        Run every check for one slot without touching storage beyond
        reading the upload. Safe to call from worker threads.
        """
        cfg = self.config
        logger.info(f"Processing file: {slot.slot_id} - {slot.original_name or slot.path}")

        # 1. Declared type
        if slot.mime_type not in cfg.allowed_types:
            return self._reject(
                slot, AdmissionReason.wrong_format,
                f"Invalid file type for {slot.slot_id}: {slot.mime_type}. "
                f"Only {describe_types(cfg.allowed_types)} allowed."
            )

        try:
            data = self.provider.read_bytes(slot.path)
        except (OSError, SecurityViolationError) as e:
            logger.error(f"Could not read upload {slot.path}: {e}")
            return self._processing_failed(slot)

        try:
            image = ImageProcessor.decode(data)
        except ImageDecodeError as e:
            logger.error(f"Decode error for {slot.slot_id}: {e}")
            return self._processing_failed(slot)

        try:
            with image:
                return self._assess_decoded(slot, image, len(data))
        except Exception:
            logger.exception(f"Error processing file {slot.slot_id}")
            return self._processing_failed(slot)

    def _assess_decoded(self, slot: UploadSlot, image, size: int) -> Assessment:
        cfg = self.config
        width, height = image.size
        fmt = image.format
        details = {"width": width, "height": height, "format": fmt}

        if slot.declared_width and slot.declared_height and (slot.declared_width, slot.declared_height) != (width, height):
            logger.debug(
                f"{slot.slot_id}: declared {slot.declared_width}x{slot.declared_height}, actual {width}x{height}"
            )

        # 2. Minimum resolution
        if width < cfg.min_width or height < cfg.min_height:
            return self._reject(
                slot, AdmissionReason.too_small,
                f"Image resolution too low for {slot.slot_id}. "
                f"Minimum {cfg.min_width}x{cfg.min_height}px required.",
                **details
            )

        # 3. Sharpness
        score = None
        if cfg.enable_blur_detection:
            score = self.checker.score_or_none(image)
            if score is None:
                if not cfg.fail_open_on_scoring_error:
                    return self._processing_failed(slot, **details)
                logger.warning(f"⚠ Blur detection failed for {slot.slot_id}, continuing")
            else:
                is_blurry = not self.checker.is_sharp(score, cfg.blur_threshold)
                logger.info(
                    f"Blur analysis for {slot.slot_id} - Laplacian variance: {score:.2f}, "
                    f"threshold: {cfg.blur_threshold}, blurry: {is_blurry}"
                )
                if is_blurry:
                    return self._reject(
                        slot, AdmissionReason.too_blurry,
                        f"Image is too blurry: {slot.slot_id}. Please upload a clearer, sharper image.",
                        sharpness=score, **details
                    )
        else:
            logger.info(f"Blur detection disabled for: {slot.slot_id}")

        verdict = AdmissionVerdict(
            slot_id=slot.slot_id, accepted=True, reason=AdmissionReason.ok,
            sharpness=score, **details
        )

        # 4. Oversized images get shrunk, failures keep the original
        resized = None
        if width > cfg.max_width or height > cfg.max_height:
            logger.info(f"Resizing large image: {slot.slot_id} from {width}x{height}")
            try:
                resized, new_size = ImageProcessor.resize_to_bounds(image, cfg.max_width, cfg.max_height)
                verdict.normalized_dimensions = new_size
            except Exception as e:
                logger.error(f"Resize error for {slot.slot_id}: {e}")

        logger.info(
            f"✔ Image passed quality checks: {slot.slot_id} "
            f"(width={width}, height={height}, format={fmt}, size={slot.size or size})"
        )
        return Assessment(verdict, resized)

    # --- side effects ---

    def discard(self, path: str):
        """Delete a rejected upload. Never raises; a missing file is fine."""
        try:
            self.provider.delete(path)
        except (OSError, SecurityViolationError) as e:
            logger.warning(f"Failed to delete file {path}: {e}")

    def persist_resized(self, slot: UploadSlot, data: bytes) -> bool:
        """Replace the upload with its resized version via a staging file."""
        with TempFileManager.staging_path(self.provider, slot.path) as staged:
            try:
                self.provider.write_bytes(staged, data)
                self.provider.move(staged, slot.path)
            except (OSError, SecurityViolationError) as e:
                logger.error(f"Could not store resized image for {slot.slot_id}: {e}")
                return False
        logger.info(f"✔ Image resized successfully: {slot.slot_id}")
        return True

    def apply(self, slot: UploadSlot, assessment: Assessment) -> AdmissionVerdict:
        """Carry out what an assessment asks for and return the final verdict."""
        verdict = assessment.verdict
        if not verdict.accepted:
            self.discard(slot.path)
            return verdict

        if assessment.resized is not None and not self.persist_resized(slot, assessment.resized):
            return verdict.model_copy(update={"normalized_dimensions": None})
        return verdict

    def evaluate(self, slot: UploadSlot) -> AdmissionVerdict:
        """Assess one upload and apply the outcome (discard or resize)."""
        return self.apply(slot, self.assess(slot))
