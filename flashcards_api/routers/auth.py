import logging

from fastapi import APIRouter, Depends
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from flashcards_api.core.database import Database, get_db
from flashcards_api.core.errors import AuthenticationError, ConflictError
from flashcards_api.core.security import hash_password, verify_password
from flashcards_api.models.user import User
from flashcards_api.schemas.user import MessageResponse, UserCreate, UserLogin

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", status_code=201, response_model=MessageResponse)
async def register_user(user: UserCreate, db: Database = Depends(get_db)):
    # bcrypt runs off the event loop
    digest = await run_in_threadpool(hash_password, user.password)
    # uniqueness is left to the users.username constraint
    statement = insert(User).values(username=user.username, password=digest).returning(User)
    try:
        await db.execute(statement)
    except IntegrityError:
        logger.warning("Registration rejected for existing username %r", user.username)
        raise ConflictError("Username already taken")
    logger.info("Registered user %r", user.username)
    return {"message": "User registered successfully"}

@router.post("/login", response_model=MessageResponse)
async def login_user(credentials: UserLogin, db: Database = Depends(get_db)):
    users = await db.execute(select(User).where(User.username == credentials.username))
    if not users:
        raise AuthenticationError("User not found")
    if not await run_in_threadpool(verify_password, credentials.password, users[0].password):
        raise AuthenticationError("Incorrect password")
    return {"message": "Login successful"}
