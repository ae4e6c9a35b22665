from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from app.core.database import Base


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(String(36), primary_key=True, index=True)

    partner_name = Column(String, nullable=False)
    sender_name = Column(String, nullable=False)
    final_message = Column(Text, nullable=True)
    final_image_url = Column(String, nullable=True)
    questions = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)  # [{ id, question, options, correctIndex, ... }]
    created_at = Column(DateTime, default=datetime.utcnow)
