# parla/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration, login and user information.
"""
from pydantic import BaseModel

class RegisterRequest(BaseModel):
    """
    Request model for user registration.
    """
    email: str  # Login identifier (unique)
    password: str  # Plain text password, hashed server-side
    name: str  # Display name the coach uses

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    """
    email: str
    password: str

class UserOut(BaseModel):
    """
    User information returned in authentication responses.
    Contains basic user details without sensitive information.
    """
    id: int
    email: str
    name: str
    skillLevel: str = "beginner"
    personality: str = "maria"
    ttsSpeed: float = 0.85
