from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from taskcal.database import Base
from taskcal.models.user import utcnow


class SharedCalendar(Base):
    __tablename__ = "shared_calendars"

    id = Column(Integer, primary_key=True, index=True)
    from_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    to_email = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    shared_at = Column(DateTime(timezone=True), default=utcnow)
