from io import BytesIO
from PIL import Image
import logging
from typing import Tuple

class ImageDecodeError(Exception):
    """Raised when upload bytes cannot be decoded into an image."""
    pass

# Formats whose encoder takes a quality setting
LOSSY_FORMATS = {"JPEG", "WEBP"}

class ImageProcessor:
    @staticmethod
    def decode(data: bytes) -> Image.Image:
        """
        Open raw bytes and force a full decode so truncated or corrupt
        files fail here rather than half-way through scoring.
        The caller owns the returned image and should close it.
        """
        try:
            img = Image.open(BytesIO(data))
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(f"Cannot identify image: {e}") from e

        try:
            img.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            img.close()
            raise ImageDecodeError(f"Cannot decode image: {e}") from e
        return img

    @staticmethod
    def fit_inside(img: Image.Image, box: Tuple[int, int]) -> Image.Image:
        """
        Return a copy shrunk to fit inside box, aspect ratio preserved.
        Images already inside the box are copied unchanged (never enlarged).
        """
        fitted = img.copy()
        fitted.thumbnail(box, Image.Resampling.LANCZOS)
        return fitted

    @staticmethod
    def resize_to_bounds(img: Image.Image, max_width: int, max_height: int) -> Tuple[bytes, Tuple[int, int]]:
        """
        Shrink the image into max_width x max_height and encode it in its
        source format. Returns (encoded bytes, (width, height)).
        """
        fmt = img.format or "PNG"
        if fmt == "MPO":
            # multi-picture camera JPEG, keep the primary image as JPEG
            fmt = "JPEG"
        with ImageProcessor.fit_inside(img, (max_width, max_height)) as resized:
            save_kwargs = {}
            if fmt in LOSSY_FORMATS:
                save_kwargs["quality"] = 95
            if fmt in LOSSY_FORMATS and img.info.get("exif"):
                save_kwargs["exif"] = img.info["exif"]

            buf = BytesIO()
            resized.save(buf, format=fmt, **save_kwargs)
            logging.debug(f"Resized {img.size} -> {resized.size} ({fmt})")
            return buf.getvalue(), resized.size
