"""
FastAPI router for the exchange bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from typing import Callable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from seravat.application.exchange.connect_account import ConnectExchangeAccountUseCase
from seravat.application.exchange.dtos import (
    ConnectAccountCommand,
    FetchBalanceQuery,
    ValidateCredentialsCommand,
)
from seravat.application.exchange.fetch_balance import FetchBalanceUseCase
from seravat.application.exchange.validate_credentials import ValidateCredentialsUseCase
from seravat.core.config import settings
from seravat.domain.exchange.entities import ValidationResult, ValuationResult
from seravat.interfaces.exchange.dependencies import (
    get_connect_account_use_case,
    get_fetch_balance_use_case,
    get_validate_credentials_use_case,
)
from seravat.interfaces.exchange.schemas import (
    BalanceDebug,
    BalanceItem,
    ConnectAccountRequest,
    ConnectAccountResponse,
    ErrorResponse,
    FetchBalanceRequest,
    FetchBalanceResponse,
    ValidateCredentialsFailure,
    ValidateCredentialsRequest,
    ValidateCredentialsSuccess,
    plain_decimal,
)
from seravat.shared.security.rate_limiting import limiter

VALIDATED_MESSAGE = "Credentials validated successfully"


class CredentialRoute(APIRoute):
    """Route class for credential endpoints.

    Every error body produced for these routes, including body parsing
    and rate limiting failures, carries ``valid: false``.
    """

    def get_route_handler(self) -> Callable:
        original_handler = super().get_route_handler()

        async def handler(request: Request) -> Response:
            request.state.error_envelope = {"valid": False}
            return await original_handler(request)

        return handler


router = APIRouter(prefix="/exchange", tags=["exchange"])
credentials_router = APIRouter(
    prefix="/exchange", tags=["exchange"], route_class=CredentialRoute
)


def _failure_response(result: ValidationResult) -> JSONResponse:
    status_code = 500 if result.category is not None and result.category.is_server_side else 400
    body = ValidateCredentialsFailure(error=result.error or "", help=result.help, code=result.code)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _balance_response(result: ValuationResult) -> FetchBalanceResponse:
    total = float(result.total_valuation)
    return FetchBalanceResponse(
        balance=total,
        balances=[
            BalanceItem(
                asset=line.asset,
                free=plain_decimal(line.free),
                locked=plain_decimal(line.locked),
                total=plain_decimal(line.total),
            )
            for line in result.breakdown
        ],
        success=True,
        message=f"Balance updated: ${result.total_valuation:.2f} {result.valuation_currency}",
        debug=BalanceDebug(
            total_assets=result.meta.snapshot_asset_count,
            non_zero_assets=result.meta.asset_count,
            calculated_total=total,
            account_type=result.meta.account_type,
            prices_available=result.meta.prices_available,
        ),
    )


@credentials_router.post(
    "/credentials/validate",
    response_model=ValidateCredentialsSuccess,
    responses={400: {"model": ValidateCredentialsFailure}, 500: {"model": ValidateCredentialsFailure}},
    summary="Validate exchange credentials",
    description="Check an API key / secret key pair against the exchange without storing it.",
)
@limiter.limit(settings.rate_limit_heavy)
async def validate_credentials(
    request: Request,
    payload: ValidateCredentialsRequest,
    use_case: ValidateCredentialsUseCase = Depends(get_validate_credentials_use_case),
) -> Response:
    """Validate a credential pair."""
    result = await use_case.execute(
        ValidateCredentialsCommand(api_key=payload.api_key, secret_key=payload.secret_key)
    )
    if not result.valid:
        return _failure_response(result)

    body = ValidateCredentialsSuccess(
        account_type=result.account_type or "",
        permissions=list(result.permissions),
        can_trade=result.can_trade,
        message=VALIDATED_MESSAGE,
    )
    return JSONResponse(content=body.model_dump(by_alias=True))


@credentials_router.post(
    "/credentials",
    response_model=ConnectAccountResponse,
    status_code=201,
    responses={400: {"model": ValidateCredentialsFailure}, 500: {"model": ValidateCredentialsFailure}},
    summary="Connect an exchange account",
    description="Validate credentials, store them for the user and record the initial balance.",
)
@limiter.limit(settings.rate_limit_heavy)
async def connect_account(
    request: Request,
    payload: ConnectAccountRequest,
    use_case: ConnectExchangeAccountUseCase = Depends(get_connect_account_use_case),
) -> Response:
    """Connect an exchange account to a user."""
    result = await use_case.execute(
        ConnectAccountCommand(
            user_id=payload.user_id,
            api_key=payload.api_key,
            secret_key=payload.secret_key,
        )
    )
    validation = result.validation
    if not validation.valid:
        return _failure_response(validation)

    body = ConnectAccountResponse(
        account_type=validation.account_type or "",
        permissions=list(validation.permissions),
        can_trade=validation.can_trade,
        message=VALIDATED_MESSAGE,
        balance=float(result.valuation.total_valuation) if result.valuation else None,
    )
    return JSONResponse(status_code=201, content=body.model_dump(by_alias=True))


@router.post(
    "/balance",
    response_model=FetchBalanceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Fetch account balance",
    description="Value the user's exchange account in the valuation currency.",
)
async def fetch_balance(
    payload: FetchBalanceRequest,
    use_case: FetchBalanceUseCase = Depends(get_fetch_balance_use_case),
) -> FetchBalanceResponse:
    """Fetch and record the user's account valuation."""
    result = await use_case.execute(FetchBalanceQuery(user_id=payload.user_id))
    return _balance_response(result)
