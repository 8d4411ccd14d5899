# parla/api/v1/routers/auth.py
from fastapi import APIRouter, HTTPException, Response, status, Depends
from parla.config import settings
from parla.core.security import verify_password, create_access_token, hash_password
from parla.api.v1.deps import get_current_user
from parla.models.user import User
from parla.schemas.auth import LoginRequest, RegisterRequest, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])

def _user_out(user: User) -> dict:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        skillLevel=user.skill_level,
        personality=user.personality,
        ttsSpeed=user.tts_speed,
    ).model_dump()

@router.post("/register")
async def register(body: RegisterRequest, response: Response):
    """
    Register a new learner account and log it in.

    Returns:
        dict: Success response with user data and access token, or error response:
            - success: bool
            - data: dict with user and accessToken (if success)
            - error: dict with error code and message (if failure)

    Error codes:
        - BAD_REQUEST: Missing email, password or name
        - EMAIL_EXISTS: Email already registered
    """
    email = (body.email or "").strip().lower()
    name = (body.name or "").strip()
    if not email or not body.password or not name:
        return {"success": False, "error": {"code": "BAD_REQUEST", "message": "email/password/name required"}}
    if await User.get_or_none(email=email):
        return {"success": False, "error": {"code": "EMAIL_EXISTS", "message": "Email already registered"}}

    u = await User.create(
        email=email,
        name=name,
        password_hash=hash_password(body.password),
        tts_speed=settings.default_tts_speed,
    )
    token = create_access_token(str(u.id))
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": _user_out(u), "accessToken": token}}

@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate user and create access token.

    The token is returned in the response body and also set as an HttpOnly
    cookie named "accessToken" for browser clients.

    Raises:
        HTTPException (401): If credentials are invalid
    """
    user = await User.get_or_none(email=(payload.email or "").strip().lower())
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail={"code": "AUTH_INVALID_CREDENTIALS", "message": "Incorrect email or password"})
    token = create_access_token(str(user.id))
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": _user_out(user), "accessToken": token}}

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return {"success": True, "data": _user_out(user)}

@router.post("/logout")
async def logout(response: Response):
    """
    Log out the current user by clearing the access token cookie.
    The JWT itself stays valid until it expires.
    """
    response.delete_cookie("accessToken")
    return {"success": True}
