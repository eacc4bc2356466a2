from io import BytesIO

import pytest
from PIL import Image

from upload_guard.core.processor import ImageDecodeError, ImageProcessor


def encoded(fmt, size=(2400, 1200), **save_kwargs):
    buf = BytesIO()
    Image.new('RGB', size, color=(30, 60, 90)).save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


def test_decode_rejects_garbage():
    with pytest.raises(ImageDecodeError):
        ImageProcessor.decode(b"not an image at all")


def test_resize_keeps_source_format():
    with ImageProcessor.decode(encoded("PNG")) as img:
        data, size = ImageProcessor.resize_to_bounds(img, 2000, 2000)
    assert size == (2000, 1000)
    with Image.open(BytesIO(data)) as out:
        assert out.format == "PNG"
        assert out.size == (2000, 1000)


def test_multi_picture_jpeg_is_saved_as_jpeg_with_exif():
    exif = Image.Exif()
    exif[0x010F] = "CameraMaker"
    with ImageProcessor.decode(encoded("JPEG", exif=exif.tobytes())) as img:
        # camera MPO files decode like this
        img.format = "MPO"
        data, size = ImageProcessor.resize_to_bounds(img, 1200, 1200)

    assert size == (1200, 600)
    with Image.open(BytesIO(data)) as out:
        assert out.format == "JPEG"
        assert out.getexif().get(0x010F) == "CameraMaker"


def test_fit_inside_never_enlarges():
    with ImageProcessor.decode(encoded("PNG", size=(100, 50))) as img:
        with ImageProcessor.fit_inside(img, (2000, 2000)) as fitted:
            assert fitted.size == (100, 50)
