"""
Output surfaces for rendered reports.

- ``BrowserPrintSurface`` opens print-ready HTML in a browser window
- ``write_pdf`` converts print-ready HTML to PDF with WeasyPrint (optional)

Failures surface as ``RenderSurfaceError`` rather than being ignored.
"""

from __future__ import annotations

import logging
import tempfile
import webbrowser
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

from .exceptions import RenderSurfaceError
from .paths import get_templates_dir

if TYPE_CHECKING:
    from .renderers import RenderedReport

logger = logging.getLogger(__name__)

PREVIEW_DIR_NAME = "griver_reports"
PREVIEW_PREFIX = "report_print_"
# Previews kept in the preview directory; older ones are removed on each print
DEFAULT_KEEP_PREVIEWS = 10


class PrintSurface(Protocol):
    """Anything that can present a rendered report to the user."""

    def show(self, artifact: "RenderedReport") -> object:
        ...


class BrowserPrintSurface:
    """Opens the rendered HTML in a browser so the user can print it."""

    def __init__(
        self,
        temp_dir: Optional[Path] = None,
        browser: Optional[str] = None,
        keep_previews: int = DEFAULT_KEEP_PREVIEWS,
    ):
        self._temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()) / PREVIEW_DIR_NAME
        self._browser = browser
        self._keep_previews = max(keep_previews, 1)

    def show(self, artifact: "RenderedReport") -> Path:
        """Write the artifact to a temporary file and open it.

        Returns:
            Path to the temporary HTML file

        Raises:
            RenderSurfaceError: If no browser is available or the file cannot be written
        """
        try:
            controller = webbrowser.get(self._browser)
        except webbrowser.Error as exc:
            raise RenderSurfaceError("No browser available to print the report") from exc

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        temp_file = self._temp_dir / f"{PREVIEW_PREFIX}{timestamp}.html"
        try:
            self._temp_dir.mkdir(parents=True, exist_ok=True)
            temp_file.write_text(str(artifact.content), encoding="utf-8")
        except OSError as exc:
            raise RenderSurfaceError(f"Cannot write print preview to {temp_file}") from exc
        self._prune_previews()

        if not controller.open(temp_file.as_uri()):
            raise RenderSurfaceError("The browser refused to open the print window")

        logger.info("Print preview opened in browser: %s", temp_file)
        return temp_file

    def _prune_previews(self) -> None:
        """Remove all but the newest previews (names sort by timestamp)."""
        previews = sorted(self._temp_dir.glob(f"{PREVIEW_PREFIX}*.html"))
        for stale in previews[: -self._keep_previews]:
            try:
                stale.unlink()
            except OSError as exc:
                logger.warning("Could not remove old print preview %s: %s", stale, exc)


def can_generate_pdf() -> bool:
    """Check if WeasyPrint is installed."""
    try:
        import weasyprint  # noqa: F401
    except ImportError:
        return False
    return True


def write_pdf(html_content: str, output_path: Path | str) -> Path:
    """Convert print-ready HTML to a PDF file.

    Raises:
        RenderSurfaceError: If WeasyPrint is not installed or the conversion fails
    """
    try:
        import weasyprint
    except ImportError as exc:
        raise RenderSurfaceError(
            "WeasyPrint is not installed. Please install it with: pip install griver-reports[pdf]"
        ) from exc

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        weasyprint.HTML(string=html_content, base_url=str(get_templates_dir())).write_pdf(str(output_path))
    except Exception as exc:
        logger.error("Failed to generate PDF %s: %s", output_path, exc)
        raise RenderSurfaceError(f"Failed to generate PDF {output_path}") from exc

    logger.info("PDF generated: %s", output_path)
    return output_path
