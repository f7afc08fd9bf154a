"""VisitDesk: visitor check-in kiosk backend with an admin dashboard API."""
