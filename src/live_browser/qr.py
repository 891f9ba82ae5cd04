from __future__ import annotations

import io

import qrcode


def render_qr(url: str) -> str:
    """Render ``url`` as a terminal QR code so a phone can open the same page."""
    code = qrcode.QRCode(border=1)
    code.add_data(url)
    code.make(fit=True)
    out = io.StringIO()
    code.print_ascii(out=out)
    return out.getvalue()
