from __future__ import annotations

import segno


def render_qr(code: str) -> None:
    """Print a pairing QR code to stdout for scanning from the phone."""
    segno.make_qr(code).terminal(compact=True)
