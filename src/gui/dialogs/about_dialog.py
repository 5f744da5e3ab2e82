"""
About dialog for Heic2JPG.
"""

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QMessageBox, QWidget

from core.codec import CodecToken
from core.config import APP_NAME, APP_VERSION

PROJECT_URL = "https://github.com/MTRNord/heic2jpg"
ISSUES_URL = f"{PROJECT_URL}/issues"


def build_about_text(codec_token: CodecToken | None = None) -> str:
    """
    Build the rich-text body of the About dialog.

    Args:
        codec_token: Initialized codec, used to show library versions

    Returns:
        HTML string
    """
    version = QCoreApplication.applicationVersion() or APP_VERSION
    lines = [
        f"<h3>{APP_NAME} {version}</h3>",
        "<p>Convert folders of HEIC photos to JPG.</p>",
        f'<p><a href="{PROJECT_URL}">Website</a> &middot; <a href="{ISSUES_URL}">Report an issue</a></p>',
        "<p>Licensed under the GNU Affero General Public License v3.0.</p>",
    ]
    if codec_token is not None:
        lines.append(
            f"<p><small>libheif {codec_token.libheif_version}, "
            f"pillow-heif {codec_token.pillow_heif_version}</small></p>"
        )
    return "".join(lines)


def show_about_dialog(parent: QWidget | None = None, codec_token: CodecToken | None = None) -> None:
    """Show the modal About dialog."""
    QMessageBox.about(parent, f"About {APP_NAME}", build_about_text(codec_token))
