from dataclasses import dataclass
import re

YOUTUBE_EMBED = "https://www.youtube.com/embed/{}"
VIMEO_EMBED = "https://player.vimeo.com/video/{}"

_ID_TERMINATORS = re.compile(r"[?&#/]")


@dataclass(frozen=True)
class VideoSource:
    kind: str  # youtube | vimeo | file
    url: str

    @property
    def is_embed(self) -> bool:
        return self.kind != "file"


def _leading_id(rest: str) -> str:
    return _ID_TERMINATORS.split(rest, 1)[0].strip()


def _vimeo_id(rest: str) -> str:
    path = rest.split("?", 1)[0].split("#", 1)[0]
    segments = [s for s in path.split("/") if s]
    for segment in segments:
        if segment.isdigit():
            return segment
    return segments[0] if segments else ""


def classify_video_url(url: str) -> VideoSource:
    """
    Substring classification of a video URL.

    - youtube.com/watch?v=<id>  → youtube embed
    - youtu.be/<id>             → youtube embed
    - vimeo.com/<id>            → player.vimeo.com embed
    - existing embed URLs       → kept as they are
    - anything else             → native file, URL unchanged

    A recognised host with no usable id falls through to "file".
    """
    url = (url or "").strip()

    if "youtube.com/embed/" in url or "player.vimeo.com/video/" in url:
        kind = "youtube" if "youtube.com" in url else "vimeo"
        return VideoSource(kind, url)

    if "youtube.com/watch?v=" in url:
        video_id = _leading_id(url.split("youtube.com/watch?v=", 1)[1])
        if video_id:
            return VideoSource("youtube", YOUTUBE_EMBED.format(video_id))

    elif "youtu.be/" in url:
        video_id = _leading_id(url.split("youtu.be/", 1)[1])
        if video_id:
            return VideoSource("youtube", YOUTUBE_EMBED.format(video_id))

    elif "vimeo.com/" in url:
        video_id = _vimeo_id(url.split("vimeo.com/", 1)[1])
        if video_id:
            return VideoSource("vimeo", VIMEO_EMBED.format(video_id))

    return VideoSource("file", url)
