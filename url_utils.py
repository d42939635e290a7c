"""Video reference normalization."""

from typing import Optional

SHORT_ID_PREFIX = "BV"
VIDEO_URL_TEMPLATE = "https://www.bilibili.com/video/{video_id}"


def normalize_video_url(video_ref: Optional[str]) -> str:
    """
    Turn a BV identifier or a full URL into the URL submitted to the tool.

    Anything starting with the short-id prefix is expanded with the video
    path template; everything else is returned trimmed but otherwise as-is.
    ``None`` becomes an empty string.
    """
    if video_ref is None:
        return ""

    trimmed = video_ref.strip()
    if trimmed.startswith(SHORT_ID_PREFIX):
        return VIDEO_URL_TEMPLATE.format(video_id=trimmed)
    return trimmed
