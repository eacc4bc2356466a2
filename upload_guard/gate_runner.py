import sys
import logging
import argparse
import mimetypes
from pathlib import Path

from pydantic import ValidationError

from upload_guard.admission import (
    AdmissionConfig,
    BatchAdmissionService,
    ImageAdmissionEvaluator,
    UploadSlot,
)
from upload_guard.core.io.fs_manager import FileSystemManager
from upload_guard.utils.config_loader import load_config
from upload_guard.utils.env_check import check_image_codecs


class UploadGate:
    """Wires config, storage and evaluators together for one run."""

    def __init__(self, config: dict, blur_detection: bool = None, workers: int = None):
        self.config = config
        overrides = {}
        if blur_detection is not None:
            overrides['enable_blur_detection'] = blur_detection
        if workers is not None:
            overrides['max_workers'] = workers
        self.admission_config = AdmissionConfig.from_settings(config, **overrides)

        self.fs_manager = FileSystemManager.get_instance(config.get('paths') or {})
        self.evaluator = ImageAdmissionEvaluator(
            self.admission_config,
            provider=self.fs_manager.local_provider
        )
        self.batch = BatchAdmissionService(self.evaluator)

    @staticmethod
    def build_slots(files, slot_names=None):
        slots = []
        for i, file_path in enumerate(files):
            p = Path(file_path)
            mime, _ = mimetypes.guess_type(p.name)
            slots.append(UploadSlot(
                slot_id=slot_names[i] if slot_names and i < len(slot_names) else p.name,
                mime_type=mime or "application/octet-stream",
                path=str(p.absolute()),
                original_name=p.name,
                size=p.stat().st_size if p.exists() else None
            ))
        return slots

    def run(self, files, slot_names=None):
        return self.batch.evaluate(self.build_slots(files, slot_names))


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Check uploaded images before they are accepted")
    ap.add_argument("files", nargs="+", help="Image files, evaluated in order")
    ap.add_argument("--config", default="config/settings.yaml", help="Settings YAML")
    ap.add_argument("--slot", action="append", dest="slots", help="Slot name per file (repeatable)")
    ap.add_argument("--no-blur", action="store_true", help="Disable blur detection")
    ap.add_argument("--workers", type=int, default=None, help="Threads used to assess the batch")
    ap.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    config = load_config(args.config, str(Path(args.config).with_name("local.yaml")))
    if not check_image_codecs(config):
        logging.error("System check failed. Please fix the issues above and restart.")
        return 2

    try:
        gate = UploadGate(config, blur_detection=False if args.no_blur else None, workers=args.workers)
    except ValidationError as e:
        logging.error(f"Invalid admission settings: {e}")
        return 2

    outcome = gate.run(args.files, args.slots)

    if args.json:
        print(outcome.model_dump_json(indent=2))
    elif outcome.proceed:
        print("OK: all images accepted")
        for slot_id, (w, h) in outcome.normalized.items():
            print(f"  {slot_id} resized to {w}x{h}")
    else:
        r = outcome.rejection
        print(f"REJECTED [{r.reason.value}] {r.slot_id}: {r.message}")

    return 0 if outcome.proceed else 1


if __name__ == "__main__":
    sys.exit(main())
