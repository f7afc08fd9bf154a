"""Visitor sign-in/sign-out rows."""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from visitdesk.database import Base


class Visitor(Base):
    __tablename__ = "visitors"

    # Insertion order; breaks ties between visitors signed in the same instant
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    name = Column(Text, nullable=False)
    company = Column(Text, nullable=True)
    host_name = Column(Text, nullable=False)
    visit_reason = Column(Text, nullable=False)
    photo_data = Column(Text, nullable=True)  # base64 encoded photo

    sign_in_time = Column(DateTime, nullable=False, index=True)
    # Set together with is_signed_out; never cleared once set
    sign_out_time = Column(DateTime, nullable=True)
    is_signed_out = Column(Boolean, nullable=False, default=False, index=True)
    email_sent = Column(Boolean, nullable=False, default=False)
