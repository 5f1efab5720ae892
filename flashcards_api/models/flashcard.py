from sqlalchemy import Column, ForeignKey, Integer, Text
from flashcards_api.core.database import Base

class Flashcard(Base):
    __tablename__ = "flashcards"

    id = Column(Integer, primary_key=True)
    # the database removes a collection's cards along with it
    collection = Column(Integer, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
