"""Fetch template bodies from the github/gitignore repository."""

from __future__ import annotations

import urllib.error
import urllib.parse
import urllib.request

from . import __version__
from .config import GITHUB_RAW_URL
from .core import NetworkError

FETCH_TIMEOUT = 30  # seconds


def template_url(base_url: str, name: str) -> str:
    filename = name if name.endswith(".gitignore") else f"{name}.gitignore"
    return base_url.rstrip("/") + "/" + urllib.parse.quote(filename)


class RemoteSource:
    """Plain HTTP fetch of ``<base_url><name>.gitignore``. No retries."""

    def __init__(self, base_url: str = GITHUB_RAW_URL, timeout: float = FETCH_TIMEOUT) -> None:
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self, name: str) -> str:
        url = template_url(self.base_url, name)
        req = urllib.request.Request(
            url,
            headers={"User-Agent": f"gitignore-tools/{__version__}"},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                status = resp.status
                data = resp.read()
        except urllib.error.HTTPError as exc:
            raise NetworkError(f"Template '{name}' not found on GitHub (HTTP {exc.code})") from exc
        except (urllib.error.URLError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            raise NetworkError(f"Error downloading {name}: {reason}") from exc

        if status != 200:
            raise NetworkError(f"Template '{name}' not found on GitHub (HTTP {status})")
        if not data:
            raise NetworkError(f"Empty response for template '{name}'")
        return data.decode("utf-8", errors="replace")
