from pydantic import BaseModel, ConfigDict


class CollectionCreate(BaseModel):
    name: str

class CollectionUpdate(BaseModel):
    name: str

class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    name: str
