from fastapi import APIRouter, Depends
from sqlalchemy import delete, insert, select, update

from flashcards_api.core.database import Database, get_db
from flashcards_api.core.utils import success
from flashcards_api.models.collection import DEFAULT_OWNER_ID, Collection
from flashcards_api.schemas.collection import CollectionCreate, CollectionResponse, CollectionUpdate

router = APIRouter()


def serialize(rows):
    return [CollectionResponse.model_validate(row) for row in rows]


@router.get("")
async def list_collections(db: Database = Depends(get_db)):
    collections = await db.execute(select(Collection))
    return success(collections=serialize(collections))

@router.get("/{collection_id}")
async def get_collection(collection_id: int, db: Database = Depends(get_db)):
    # an unknown id gives an empty list, not a 404
    collections = await db.execute(select(Collection).where(Collection.id == collection_id))
    return success(collections=serialize(collections))

@router.post("")
async def create_collection(payload: CollectionCreate, db: Database = Depends(get_db)):
    created = await db.execute(
        insert(Collection).values(owner_id=DEFAULT_OWNER_ID, name=payload.name).returning(Collection)
    )
    return success(createdCollection=serialize(created))

@router.put("/{collection_id}")
async def rename_collection(collection_id: int, payload: CollectionUpdate, db: Database = Depends(get_db)):
    updated = await db.execute(
        update(Collection)
        .where(Collection.id == collection_id)
        .values(name=payload.name)
        .returning(Collection)
    )
    return success(updatedCollection=serialize(updated))

@router.delete("/{collection_id}")
async def delete_collection(collection_id: int, db: Database = Depends(get_db)):
    deleted = await db.execute(
        delete(Collection)
        .where(Collection.id == collection_id)
        .returning(Collection)
        .execution_options(synchronize_session=False)
    )
    return success(deletedCollection=serialize(deleted))
