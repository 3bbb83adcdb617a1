from typing import Optional

ABSOLUTE_PREFIXES = ("http://", "https://", "//", "data:", "blob:")

VIDEO_MIME_TYPES = {
    'mp4': 'video/mp4',
    'webm': 'video/webm',
    'ogg': 'video/ogg',
    'ogv': 'video/ogg',
    'mov': 'video/quicktime',
}

def file_extension(url):
    path = url.split('?', 1)[0].split('#', 1)[0]
    filename = path.rsplit('/', 1)[-1]
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''

def video_mime_type(url):
    return VIDEO_MIME_TYPES.get(file_extension(url), 'video/mp4')

def is_absolute_url(url):
    return url.lower().startswith(ABSOLUTE_PREFIXES)

def resolve_media_url(url: Optional[str], media_origin: str = "") -> str:
    """
    Prefixes media paths with the configured media origin.

    "/uploads/a.jpg" + "https://cdn.example.com" → "https://cdn.example.com/uploads/a.jpg"
    Absolute URLs (and everything when no origin is configured) pass through.
    """
    if not url:
        return ""

    url = url.strip()
    if not media_origin or is_absolute_url(url):
        return url

    origin = media_origin.rstrip('/')
    if url.startswith('/'):
        return f"{origin}{url}"
    return f"{origin}/{url}"

