"""
Media encoding for the analysis request.

The provider takes video inline as base64 text, so the whole file is
read and encoded once per attempt. Nothing is cached between attempts.
"""

import base64
import logging

from .errors import EncodingFailed, InvalidSelection
from .models import EncodedPayload, VideoAsset


logger = logging.getLogger(__name__)


def strip_data_uri_prefix(text: str) -> str:
    """
    Drop a ``data:<type>;base64,`` header if one is present.

    Browsers hand back data URLs from FileReader; the provider wants
    the bare base64 body.
    """
    if text.startswith("data:") and "," in text:
        return text.split(",", 1)[1]
    return text


async def encode_video(asset: VideoAsset) -> EncodedPayload:
    """
    Read the asset and return its base64 payload.

    The read is the only suspension point. Any failure to read is
    surfaced as EncodingFailed and not retried.
    """
    if not asset.is_video:
        raise InvalidSelection(f"Not a video file: {asset.media_type or 'unknown type'}")

    try:
        raw = await asset.source.read()
    except Exception as e:
        logger.error(
            "Failed to read video",
            extra={"asset_id": str(asset.id), "video_filename": asset.filename, "error": str(e)},
        )
        raise EncodingFailed(f"Could not read video file: {e}") from e

    if not raw:
        raise EncodingFailed("Video file is empty")

    data = strip_data_uri_prefix(base64.b64encode(raw).decode("ascii"))

    logger.debug(
        "Encoded video",
        extra={
            "asset_id": str(asset.id),
            "size_bytes": len(raw),
            "encoded_length": len(data),
        },
    )

    return EncodedPayload(media_type=asset.media_type, data=data)
