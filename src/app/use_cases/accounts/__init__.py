"""Account use cases: registration, login, password reset and tokens."""

from app.use_cases.accounts.register_user import RegisterUserUseCase
from app.use_cases.accounts.sessions import (
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RequestPasswordResetUseCase,
    VerifyEmailUseCase,
)

__all__ = [
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
    "RegisterUserUseCase",
    "RequestPasswordResetUseCase",
    "VerifyEmailUseCase",
]
