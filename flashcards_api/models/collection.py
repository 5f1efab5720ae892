from sqlalchemy import Column, Integer, String

from flashcards_api.core.database import Base

# collections are not bound to the logged in user yet
DEFAULT_OWNER_ID = 1


class Collection(Base):
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
