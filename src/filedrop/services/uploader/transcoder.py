"""Image re-encoding for upload compression."""

import io
import logging
from abc import ABC, abstractmethod

from PIL import Image, UnidentifiedImageError

from filedrop.services.uploader.exceptions import TranscodeError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_QUALITY = 70

COMPRESSIBLE_MIME_TYPES = frozenset(["image/jpeg", "image/png", "image/webp"])


def is_compressible(mime_type: str) -> bool:
    return mime_type in COMPRESSIBLE_MIME_TYPES


class ImageTranscoder(ABC):
    """Re-encodes an image, keeping its format."""

    @abstractmethod
    def transcode(self, data: bytes, mime_type: str, quality: int = DEFAULT_IMAGE_QUALITY) -> bytes:
        """Re-encode ``data`` as ``mime_type``.

        Args:
            data: Encoded image
            mime_type: Declared type of ``data``; the output has the same type
            quality: Lossy encoder quality, 1-100

        Returns:
            Re-encoded image bytes

        Raises:
            TranscodeError: If the image cannot be decoded or encoded
        """
        pass


class PillowTranscoder(ImageTranscoder):
    """Pillow-based transcoder for JPEG, PNG and WebP.

    Metadata (EXIF, ICC profile, text chunks) is not carried over: only the
    pixel data is re-encoded. JPEG output is optimized and progressive, PNG
    output stays lossless at the highest zlib level, WebP is lossy at
    ``quality``.
    """

    def transcode(self, data: bytes, mime_type: str, quality: int = DEFAULT_IMAGE_QUALITY) -> bytes:
        if not is_compressible(mime_type):
            raise TranscodeError(f"Unsupported image type for compression: {mime_type}")

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                output = io.BytesIO()

                if mime_type == "image/jpeg":
                    if image.mode not in ("RGB", "L"):
                        image = image.convert("RGB")
                    image.save(output, format="JPEG", quality=quality, optimize=True, progressive=True, icc_profile=None)
                elif mime_type == "image/png":
                    image.save(output, format="PNG", optimize=True, compress_level=9, icc_profile=None)
                else:
                    image.save(output, format="WEBP", quality=quality, method=6, icc_profile=None)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.warning(
                "Image transcoding failed",
                extra={"mime_type": mime_type, "size_bytes": len(data), "error": str(e)},
            )
            raise TranscodeError(f"Failed to transcode {mime_type} image: {e}") from e

        result = output.getvalue()
        if not result:
            raise TranscodeError(f"Transcoding {mime_type} image produced no output")

        logger.debug(
            "Image transcoded",
            extra={"mime_type": mime_type, "input_bytes": len(data), "output_bytes": len(result)},
        )
        return result
