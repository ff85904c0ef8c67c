import re
from collections.abc import Iterable

from rawrelay.exceptions import InvalidResourceError

VALID_NAME_RE = re.compile(r"^[a-zA-Z0-9._-]{1,128}$")


def validate_filename(filename: str, allowed_extensions: Iterable[str]) -> str:
    """Check a requested file name before it is turned into an origin URL.

    Raises:
        InvalidResourceError: If the name has disallowed characters or extension
    """
    if not VALID_NAME_RE.fullmatch(filename):
        raise InvalidResourceError("Invalid file name.")
    if not any(filename.endswith(ext) for ext in allowed_extensions):
        raise InvalidResourceError("Extension not allowed.")
    return filename


def build_resource_url(base_url: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}/{filename}"
