"""Account endpoints.

All routes are public; each one delegates to its use case and returns the
use case body unchanged.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from api.dependencies import get_container, read_json_object
from app.bootstrap.container import ServiceContainer
from app.use_cases.accounts import (
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    VerifyEmailUseCase,
)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    use_case = RegisterUserUseCase(
        identity=services.identity,
        store=services.store,
        collections=services.collections,
        notifier=services.notifier,
        side_effects=services.side_effects,
    )
    return await use_case.execute(await read_json_object(request))


@router.post("/login")
async def login(
    request: Request,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    use_case = LoginUseCase(services.identity, services.store, services.collections)
    return await use_case.execute(await read_json_object(request))


@router.post("/forgot-password")
async def forgot_password(
    request: Request,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    use_case = RequestPasswordResetUseCase(
        services.identity,
        services.notifier,
        services.side_effects,
    )
    return await use_case.execute(await read_json_object(request))


@router.post("/verify-email")
async def verify_email(
    request: Request,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    return await VerifyEmailUseCase(services.identity).execute(await read_json_object(request))


@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    return await RefreshTokenUseCase(services.identity).execute(await read_json_object(request))


@router.post("/logout")
async def logout(request: Request) -> dict[str, Any]:
    return await LogoutUseCase().execute(await read_json_object(request))
