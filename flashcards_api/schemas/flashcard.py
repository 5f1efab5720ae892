from pydantic import BaseModel, ConfigDict

class FlashcardCreate(BaseModel):
    question: str
    answer: str

class FlashcardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    collection: int
    question: str
    answer: str
