from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from filebox.database import get_db
from filebox.dependencies.auth import get_current_user
from filebox.models.user import User
from filebox.schemas.auth import TokenResponse, UserLoginRequest, UserRegisterRequest, UserResponse
from filebox.schemas.common import APIResponse
from filebox.services.auth import authenticate_user, register_user
from filebox.services.jwt import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(request: UserRegisterRequest, db: Session = Depends(get_db)):
    user = register_user(db, name=request.name, email=request.email, password=request.password)
    # model_validate copies only the UserResponse fields off the ORM object
    return APIResponse(success=True, data=UserResponse.model_validate(user))


@router.post("/login", response_model=APIResponse[TokenResponse])
def login(request: UserLoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, request.email, request.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "success": False,
                "error": "Unauthorized",
                "message": "Invalid credentials",
            },
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "success": False,
                "error": "Forbidden",
                "message": "User is inactive",
            },
        )

    access_token = create_access_token(user.id)
    return APIResponse(success=True, data=TokenResponse(access_token=access_token))


@router.get("/me", response_model=APIResponse[UserResponse])
def me(current_user: User = Depends(get_current_user)):
    return APIResponse(success=True, data=UserResponse.model_validate(current_user))
