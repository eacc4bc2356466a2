import logging
from pathlib import Path
from PIL import features

# Pillow feature name per MIME type; None means always compiled in
CODEC_FEATURES = {
    "image/jpeg": "jpg",
    "image/png": "zlib",
    "image/webp": "webp",
    "image/gif": None,
}

def check_image_codecs(config: dict) -> bool:
    """
    Checks that Pillow can decode every allowed upload type and that
    configured storage roots exist.
    Returns True if all critical checks pass, False otherwise.
    """
    logging.info("Running system health check...")
    all_good = True

    # 1. Check codecs
    allowed = (config.get('admission') or {}).get('allowed_types')
    if allowed is None:
        allowed = list(CODEC_FEATURES)
    for mime in allowed:
        if mime not in CODEC_FEATURES:
            logging.warning(f"⚠ No known decoder for allowed type {mime}")
            continue
        feature = CODEC_FEATURES[mime]
        if feature and not features.check(feature):
            logging.error(f"CRITICAL: Pillow was built without '{feature}' support, {mime} uploads cannot be decoded.")
            all_good = False
        else:
            logging.info(f"✔ Decoder available for {mime}.")

    # 2. Check storage roots (warn only)
    for root in (config.get('paths') or {}).get('allowed_roots', []) or []:
        if not Path(root).exists():
            logging.warning(f"⚠ Allowed root does not exist: {root}")

    return all_good
