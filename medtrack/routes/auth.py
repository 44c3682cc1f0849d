"""
Defines all API endpoints related to signup, login and the caller's session.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import schemas, models, auth, database
from ..exceptions import AuthError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/signup", response_model=schemas.SignupResponse)
def signup(user: schemas.UserCreate, db: Session = Depends(database.get_db)):
    """
    Registers a new patient or caretaker account.

    Raises:
        ValidationError: 400 if a field is empty or the username is taken.
    """
    if not user.username or not user.password:
        raise ValidationError("username and password are required")

    db_user = db.query(models.User).filter(models.User.username == user.username).first()
    if db_user:
        raise ValidationError("User already exists")

    # Create a new user instance with a hashed password
    new_user = models.User(
        username=user.username,
        hashed_password=auth.get_password_hash(user.password),
        role=user.role.value,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("User already exists")
    db.refresh(new_user)

    logger.info(f"Registered {new_user.role} account {new_user.id}.")
    return {"message": "Signup successful", "userId": new_user.id}


@router.post("/login", response_model=schemas.LoginResponse)
def login(form_data: schemas.UserLogin, db: Session = Depends(database.get_db)):
    """
    Authenticates a user and returns a session token.

    Raises:
        AuthError: 401 if the username is unknown or the password is wrong.
    """
    user = db.query(models.User).filter(models.User.username == form_data.username).first()

    # Verify user existence and password correctness
    if not user or not auth.verify_password(form_data.password, user.hashed_password):
        logger.info("Rejected login with invalid credentials.")
        raise AuthError("Invalid credentials")

    token = auth.create_access_token(user)
    return {"message": "Login successful", "token": token, "role": user.role, "userId": user.id}


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(session: auth.SessionContext = Depends(auth.get_current_session)):
    """
    Provides a formal endpoint for logging out.

    Tokens are stateless, so the client is responsible for discarding it.
    """
    return {"message": "Logout successful. Please discard the token on the client side."}


@router.get("/me", response_model=schemas.SessionResponse)
def read_session(session: auth.SessionContext = Depends(auth.get_current_session)):
    """Returns the identity and expiry carried by the caller's token."""
    return {
        "id": session.id,
        "username": session.username,
        "role": session.role,
        "expires_at": session.expires_at,
    }
