import logging

from fastapi import APIRouter, Depends
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from flashcards_api.core.database import Database, get_db
from flashcards_api.core.errors import NotFoundError
from flashcards_api.core.utils import success
from flashcards_api.models.flashcard import Flashcard
from flashcards_api.schemas.flashcard import FlashcardCreate, FlashcardResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/{collection_id}")
async def create_flashcard(collection_id: int, card: FlashcardCreate, db: Database = Depends(get_db)):
    statement = insert(Flashcard).values(
        collection=collection_id,
        question=card.question,
        answer=card.answer,
    ).returning(Flashcard)
    try:
        created = await db.execute(statement)
    except IntegrityError:
        logger.warning("Flashcard rejected, collection %s does not exist", collection_id)
        raise NotFoundError("Collection not found")
    return success(createdFlashcard=[FlashcardResponse.model_validate(c) for c in created])

@router.get("/{collection_id}/flashcards")
async def get_flashcards_by_collection(collection_id: int, db: Database = Depends(get_db)):
    cards = await db.execute(select(Flashcard).where(Flashcard.collection == collection_id))
    return success(flashcards=[FlashcardResponse.model_validate(c) for c in cards])
