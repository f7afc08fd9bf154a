"""Dashboard administrators."""
from sqlalchemy import Column, String, Text, DateTime
from visitdesk.database import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True)
    username = Column(Text, unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)  # bcrypt, never plaintext
    created_at = Column(DateTime, nullable=False)
