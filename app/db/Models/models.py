from sqlalchemy import Column, String, Integer, DateTime, Boolean, Float, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()

class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Empty for non-URL QR payloads; the payload lives in qr_content
    original_url = Column(String(2048), nullable=False, default="")

    # Unique constraint is what makes concurrent creators retry
    short_code = Column(String(10), unique=True, index=True, nullable=False)

    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    click_count = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    qr_type = Column(String(50), nullable=True)
    qr_content = Column(Text, nullable=True)

    qr_style = relationship("QRStyle", back_populates="link", uselist=False,
                            cascade="all, delete-orphan")
    clicks = relationship("Click", back_populates="link",
                          cascade="all, delete-orphan")

class QRStyle(Base):
    __tablename__ = "qr_codes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    link_id = Column(Integer, ForeignKey("links.id", ondelete="CASCADE"), unique=True, nullable=False)
    foreground_color = Column(String(9), default="#000000", nullable=False)
    background_color = Column(String(9), default="#ffffff", nullable=False)
    size = Column(Integer, default=200, nullable=False)
    error_correction_level = Column(String(1), default="M", nullable=False)
    logo_url = Column(Text, nullable=True)
    logo_size = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    link = relationship("Link", back_populates="qr_style")

class Click(Base):
    __tablename__ = "clicks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    link_id = Column(Integer, ForeignKey("links.id", ondelete="CASCADE"), nullable=False, index=True)
    clicked_at = Column(DateTime, default=datetime.utcnow, index=True)
    user_agent = Column(String(512), nullable=True)
    referrer = Column(String(2048), nullable=True)
    ip_address = Column(String(45), nullable=True)

    link = relationship("Link", back_populates="clicks")
