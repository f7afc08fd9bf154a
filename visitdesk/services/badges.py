"""Printable visitor badge (credit-card size PDF) rendered with reportlab."""
from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO

from visitdesk.records import VisitorRecord

log = logging.getLogger("uvicorn.error")

BADGE_WIDTH_MM = 85
BADGE_HEIGHT_MM = 54

_PRIMARY_BLUE = (25 / 255, 118 / 255, 210 / 255)
_GRAY_50 = (249 / 255, 250 / 255, 251 / 255)
_GRAY_200 = (229 / 255, 231 / 255, 235 / 255)
_GRAY_500 = (107 / 255, 114 / 255, 128 / 255)
_GRAY_800 = (31 / 255, 41 / 255, 55 / 255)


def decode_photo(photo_data: str | None) -> bytes | None:
    """Bytes of a base64 image, with or without a data: URL prefix."""
    if not photo_data:
        return None
    payload = photo_data.split(",", 1)[1] if photo_data.startswith("data:") else photo_data
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def visitor_badge_pdf(visitor: VisitorRecord) -> bytes:
    from reportlab.lib.units import mm
    from reportlab.lib.utils import ImageReader
    from reportlab.pdfgen import canvas

    width, height = BADGE_WIDTH_MM * mm, BADGE_HEIGHT_MM * mm
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height))
    c.setTitle(f"Visitor badge - {visitor.name}")

    # reportlab's origin is bottom-left; layout below is measured from the top
    def top(y_mm: float) -> float:
        return height - y_mm * mm

    c.setFillColorRGB(*_GRAY_50)
    c.rect(0, 0, width, height, stroke=0, fill=1)

    c.setFillColorRGB(*_PRIMARY_BLUE)
    c.rect(0, top(12), width, 12 * mm, stroke=0, fill=1)
    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 8)
    c.drawCentredString(width / 2, top(7), "VISITOR")

    photo = decode_photo(visitor.photo_data)
    drawn = False
    if photo:
        try:
            c.drawImage(ImageReader(BytesIO(photo)), 5 * mm, top(35), 20 * mm, 20 * mm, preserveAspectRatio=True)
            drawn = True
        except Exception as e:
            # reportlab/PIL raise assorted errors for unreadable images
            log.warning("Could not add photo to badge for visitor %s: %s", visitor.id, e)
    if not drawn:
        c.setFillColorRGB(*_GRAY_200)
        c.rect(5 * mm, top(35), 20 * mm, 20 * mm, stroke=0, fill=1)
        c.setFillColorRGB(*_GRAY_500)
        c.setFont("Helvetica", 6)
        c.drawCentredString(15 * mm, top(26), "PHOTO")

    c.setFillColorRGB(*_GRAY_800)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(30 * mm, top(19), _truncate(visitor.name, 28))
    c.setFont("Helvetica", 7)
    lines = [
        visitor.company or "",
        f"Host: {visitor.host_name}",
        f"Reason: {visitor.visit_reason.capitalize()}",
        f"Signed in: {visitor.sign_in_time.strftime('%Y-%m-%d %H:%M')}",
    ]
    y = 24
    for line in lines:
        if line:
            c.drawString(30 * mm, top(y), _truncate(line, 40))
            y += 4.5

    c.setFillColorRGB(*_GRAY_500)
    c.setFont("Helvetica", 5)
    c.drawCentredString(width / 2, top(50), "Please wear this badge at all times and return it on sign-out")

    c.showPage()
    c.save()
    return buf.getvalue()
