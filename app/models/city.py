import uuid
from sqlalchemy import Column, String, DateTime, func, Float, Uuid
from app.db.session import Base

class City(Base):
    __tablename__ = "cities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    country_code = Column(String(2), nullable=False)
    country = Column(String(100), nullable=True)
    timezone = Column(String(64), nullable=False, default="UTC")
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
