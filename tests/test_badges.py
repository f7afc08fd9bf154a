from datetime import datetime

from visitdesk.records import VisitorRecord
from visitdesk.services.badges import decode_photo, visitor_badge_pdf

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def _visitor(photo_data=None, company="Acme"):
    return VisitorRecord(
        id="v1",
        name="Jane Doe",
        company=company,
        host_name="Sarah Johnson",
        visit_reason="interview",
        photo_data=photo_data,
        sign_in_time=datetime(2026, 10, 17, 9, 5),
    )


def test_decode_photo():
    assert decode_photo(f"data:image/png;base64,{PNG_B64}").startswith(b"\x89PNG")
    assert decode_photo(PNG_B64).startswith(b"\x89PNG")
    assert decode_photo(None) is None
    assert decode_photo("data:image/png;base64,@@not base64@@") is None


def test_badge_without_photo():
    pdf = visitor_badge_pdf(_visitor(company=None))
    assert pdf.startswith(b"%PDF")


def test_badge_with_photo():
    assert visitor_badge_pdf(_visitor(f"data:image/png;base64,{PNG_B64}")).startswith(b"%PDF")


def test_badge_with_unreadable_photo_falls_back_to_placeholder():
    # Valid base64, but not an image
    assert visitor_badge_pdf(_visitor("data:image/jpeg;base64,aGVsbG8gd29ybGQ=")).startswith(b"%PDF")
