"""
Batch admission

Evaluates every image of one request in order and stops at the first
rejection, which becomes the single rejection reported to the caller.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .evaluator import Assessment, ImageAdmissionEvaluator
from .protocol import BatchOutcome, BatchRejection, UploadSlot

logger = logging.getLogger(__name__)


def flatten_fields(files: Dict[str, List[UploadSlot]]) -> List[UploadSlot]:
    """
    Flatten uploads grouped by form field into one ordered list,
    field order first, then upload order within a field.
    """
    slots: List[UploadSlot] = []
    for field_slots in files.values():
        slots.extend(field_slots)
    return slots


class BatchAdmissionService:
    """Short-circuiting admission over a list of uploads"""

    def __init__(self, evaluator: ImageAdmissionEvaluator, max_workers: Optional[int] = None):
        """
        Args:
            evaluator: single-image evaluator
            max_workers: threads used for assessment; 1 means strictly
                sequential, later slots are not even read after a rejection
        """
        self.evaluator = evaluator
        self.max_workers = max_workers or evaluator.config.max_workers

    def _assessments(self, slots: List[UploadSlot]) -> Iterator[Assessment]:
        if self.max_workers > 1 and len(slots) > 1:
            # map() yields in submission order, so the fold below still
            # sees the first failing slot first
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self.evaluator.assess, slots))
            return iter(results)
        return (self.evaluator.assess(slot) for slot in slots)

    def evaluate(self, slots: Iterable[UploadSlot]) -> BatchOutcome:
        """Evaluate a batch; side effects are applied in input order only."""
        slots = list(slots)
        if not slots:
            logger.info("No files to check, proceeding...")
            return BatchOutcome(proceed=True)

        logger.info(f"Checking {len(slots)} file(s) for quality...")
        outcome = self._fold(zip(slots, self._assessments(slots)))
        if outcome.proceed:
            logger.info("✔ All images passed quality checks")
        return outcome

    def _fold(self, pairs: Iterable[Tuple[UploadSlot, Assessment]]) -> BatchOutcome:
        outcome = BatchOutcome(proceed=True)
        for slot, assessment in pairs:
            verdict = self.evaluator.apply(slot, assessment)
            outcome.verdicts.append(verdict)
            if not verdict.accepted:
                outcome.proceed = False
                outcome.rejection = BatchRejection(
                    slot_id=slot.slot_id,
                    reason=verdict.reason,
                    message=verdict.message or verdict.reason.value
                )
                return outcome
            if verdict.normalized_dimensions:
                outcome.normalized[slot.slot_id] = verdict.normalized_dimensions
        return outcome
