# guestbook/models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from guestbook.core.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    hashed_password = Column(String(200), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Moderation: hold third-party entries as pending until approved
    require_approval = Column(Boolean, default=False, nullable=False)

    # Presentation (stored as-is, rendering happens elsewhere)
    custom_css = Column(Text, nullable=True)
    custom_html = Column(Text, nullable=True)

    # Personal domain attached at the hosting provider
    custom_domain = Column(String(255), unique=True, nullable=True, index=True)
