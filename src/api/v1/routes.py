"""
API v1 routes.

Defines REST endpoints for account registration, login, verification and
the administrative user-management operations. Every /users endpoint runs
behind the authorization gate.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_account_service, get_current_account
from src.api.models import (
    AccountResponse,
    BulkRequest,
    BulkResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    PurgeResponse,
    RegisterRequest,
    RegisterResponse,
    SessionErrorResponse,
    VerifyResponse,
)
from src.domain.accounts import AccountService
from src.domain.exceptions import (
    AccountBlocked,
    EmailAlreadyInUse,
    InvalidCredentials,
    ValidationFailed,
)
from src.domain.ports import Account, VerifyResult

router = APIRouter()

_gate_responses = {
    401: {"model": SessionErrorResponse, "description": "Missing, invalid or expired session"},
    403: {"model": SessionErrorResponse, "description": "Account deleted or blocked"},
}


@router.post(
    "/auth/register",
    tags=["auth"],
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing name, email or password"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
        422: {"description": "Validation error"},
    },
    summary="Register a new account",
    description="Create an unverified account. A verification link is sent to the email "
    "address in the background; delivery failure does not affect registration.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    try:
        account = service.register(request_data.name, request_data.email, request_data.password)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except EmailAlreadyInUse:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        ) from None
    return RegisterResponse(
        message="Registration successful! Please check your email to verify your account.",
        account=AccountResponse.model_validate(account),
    )


@router.post(
    "/auth/login",
    tags=["auth"],
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        403: {"model": ErrorResponse, "description": "Account is blocked"},
    },
    summary="Log in",
    description="Exchange email and password for a 24-hour bearer token.",
)
def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    try:
        result = service.login(request_data.email, request_data.password)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except InvalidCredentials:
        # Same response for unknown email and wrong password
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        ) from None
    except AccountBlocked:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is blocked. Contact administrator.",
        ) from None
    return LoginResponse(
        message="Login successful",
        token=result.access_token,
        account=AccountResponse.model_validate(result.account),
    )


@router.get(
    "/auth/verify/{token}",
    tags=["auth"],
    response_model=VerifyResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid verification token"}},
    summary="Verify email address",
    description="Redeem the token from the verification email. Only unverified accounts "
    "change status; blocked accounts stay blocked.",
)
def verify(token: str, service: AccountService = Depends(get_account_service)) -> VerifyResponse:
    result = service.verify(token)

    if result == VerifyResult.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid verification token",
        )
    if result == VerifyResult.ACTIVATED:
        return VerifyResponse(
            message="Email verified successfully! Your account is now active.",
            activated=True,
        )
    return VerifyResponse(
        message="Email already verified or account status unchanged.",
        activated=False,
    )


@router.get(
    "/users",
    tags=["users"],
    response_model=list[AccountResponse],
    responses=_gate_responses,
    summary="List accounts",
    description="All accounts, most recent login first; accounts that never logged in last.",
)
def list_users(
    actor: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> list[AccountResponse]:
    return [AccountResponse.model_validate(account) for account in service.list_accounts()]


@router.post(
    "/users/block",
    tags=["users"],
    response_model=BulkResponse,
    responses={400: {"model": ErrorResponse, "description": "No users selected"}, **_gate_responses},
    summary="Block selected accounts",
)
def block_users(
    request_data: BulkRequest,
    actor: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> BulkResponse:
    try:
        result = service.block_accounts(actor, request_data.user_ids)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    return BulkResponse(
        message=f"{result.affected} user(s) blocked successfully",
        requested=result.requested,
        affected=result.affected,
        self_affected=result.self_affected,
    )


@router.post(
    "/users/unblock",
    tags=["users"],
    response_model=BulkResponse,
    responses={400: {"model": ErrorResponse, "description": "No users selected"}, **_gate_responses},
    summary="Unblock selected accounts",
)
def unblock_users(
    request_data: BulkRequest,
    actor: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> BulkResponse:
    try:
        result = service.unblock_accounts(actor, request_data.user_ids)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    return BulkResponse(
        message=f"{result.affected} user(s) unblocked successfully",
        requested=result.requested,
        affected=result.affected,
        self_affected=result.self_affected,
    )


@router.post(
    "/users/delete",
    tags=["users"],
    response_model=BulkResponse,
    responses={400: {"model": ErrorResponse, "description": "No users selected"}, **_gate_responses},
    summary="Delete selected accounts",
    description="Rows are removed permanently; unknown ids are ignored.",
)
def delete_users(
    request_data: BulkRequest,
    actor: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> BulkResponse:
    try:
        result = service.delete_accounts(actor, request_data.user_ids)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    return BulkResponse(
        message=f"{result.affected} user(s) deleted successfully",
        requested=result.requested,
        affected=result.affected,
        self_affected=result.self_affected,
    )


@router.post(
    "/users/delete-unverified",
    tags=["users"],
    response_model=PurgeResponse,
    responses=_gate_responses,
    summary="Delete all unverified accounts",
)
def delete_unverified_users(
    actor: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> PurgeResponse:
    result = service.purge_unverified(actor)
    return PurgeResponse(
        message=f"{result.deleted} unverified user(s) deleted",
        deleted=result.deleted,
        self_affected=result.self_affected,
    )
