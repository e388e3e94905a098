import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models.user import User
from app.db.models.subscription import Subscription
from app.core.plans import DEFAULT_PLAN_ID
from app.core.security import hash_password, verify_password, create_access_token
from app.schemas.auth import SignupRequest, SignupResponse, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    existing_user = db.query(User).filter(User.email == payload.email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        full_name=payload.full_name,
        email=payload.email,
        company_name=payload.company_name,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.flush()

    # Every recruiter starts on basico; status flips once a checkout completes
    db.add(Subscription(user_id=user.id, plan_id=DEFAULT_PLAN_ID, status="inactive"))
    db.commit()
    db.refresh(user)

    logger.info(f"Recruiter signed up: user_id={user.id}")
    return SignupResponse(message="User created successfully", user_id=user.id)


@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # OAuth2 form field is "username"; we treat it as email
    user = db.query(User).filter(User.email == form_data.username).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token({"sub": user.email}))
