"""/v1/bank - Tink connection, accounts and transaction sync"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from fingrip_gateway.api.dependencies import get_request_id, get_tink_client
from fingrip_gateway.api.v1.schemas import (
    AccountsResponse,
    AuthorizationUrlResponse,
    BankCallbackRequest,
    BankStatusResponse,
    BankUserResponse,
    SyncResponse,
    TinkAccountSchema,
)
from fingrip_gateway.domain.exceptions import (
    TinkAuthenticationError,
    TinkConfigurationError,
    TinkError,
    TinkNetworkError,
)
from fingrip_gateway.domain.models import TinkAuthState
from fingrip_gateway.infrastructure.clients.tink import TinkClient
from fingrip_gateway.infrastructure.database.repositories import CredentialStore, TransactionRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.infrastructure.observability.logging import log_bank_sync
from fingrip_gateway.infrastructure.observability.metrics import record_tink_failure, synced_transactions_counter

router = APIRouter()

TOKEN_SERVICE = "com.fingrip.tink"
TOKEN_ACCOUNT = "TinkAccessToken"


def _tink_http_error(operation: str, error: TinkError, request_id: str) -> HTTPException:
    """Translate a Tink failure into the HTTP error the client sees"""
    record_tink_failure(operation, error)
    logging.error(f"Tink {operation} failed: {error}", extra={"request_id": request_id, "step": operation})

    if isinstance(error, TinkConfigurationError):
        return HTTPException(status_code=500, detail="Tink is not configured")
    if isinstance(error, TinkAuthenticationError):
        return HTTPException(status_code=401, detail=str(error))
    if isinstance(error, TinkNetworkError):
        return HTTPException(status_code=503, detail="Bank service unavailable")
    return HTTPException(status_code=502, detail=str(error))


def _require_token(db: Session, user_id: str) -> str:
    token = CredentialStore(db).read(user_id, TOKEN_SERVICE, TOKEN_ACCOUNT)
    if not token:
        raise HTTPException(status_code=401, detail="Bank account not connected")
    return token


@router.get("/bank/authorize-url", response_model=AuthorizationUrlResponse)
def authorization_url(
    request: Request,
    user_id: str = Query(..., min_length=1),
    tink: TinkClient = Depends(get_tink_client),
):
    """Tink Link URL; `state` carries the user id back through the redirect"""
    try:
        return AuthorizationUrlResponse(url=tink.build_authorization_url(state=user_id))
    except TinkError as e:
        raise _tink_http_error("authorize_url", e, get_request_id(request))


async def _connect(db: Session, tink: TinkClient, user_id: str, code: str) -> BankStatusResponse:
    token = await tink.exchange_code(code)
    CredentialStore(db).save(user_id, TOKEN_SERVICE, TOKEN_ACCOUNT, token.access_token)
    db.commit()
    return BankStatusResponse(user_id=user_id, state=TinkAuthState.AUTHENTICATED)


@router.post("/bank/callback", response_model=BankStatusResponse)
async def bank_callback(
    body: BankCallbackRequest,
    request: Request,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    tink: TinkClient = Depends(get_tink_client),
):
    """Exchange the authorization code from the Tink redirect and store the access token"""
    request_id = get_request_id(request)
    try:
        if body.callback_url:
            code = TinkClient.parse_callback(body.callback_url)
        elif body.code:
            code = body.code
        else:
            raise HTTPException(status_code=422, detail="callback_url or code is required")
        return await _connect(db, tink, user_id, code)
    except TinkError as e:
        db.rollback()
        raise _tink_http_error("callback", e, request_id)


@router.post("/bank/authenticate", response_model=BankStatusResponse)
async def simulated_authenticate(
    request: Request,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    tink: TinkClient = Depends(get_tink_client),
):
    """Test-mode shortcut: obtain a dummy code and store it as the token"""
    try:
        code = await tink.authenticate()
    except TinkError as e:
        raise _tink_http_error("authenticate", e, get_request_id(request))

    CredentialStore(db).save(user_id, TOKEN_SERVICE, TOKEN_ACCOUNT, code)
    db.commit()
    return BankStatusResponse(user_id=user_id, state=TinkAuthState.AUTHENTICATED)


@router.get("/bank/status", response_model=BankStatusResponse)
def bank_status(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    connected = CredentialStore(db).read(user_id, TOKEN_SERVICE, TOKEN_ACCOUNT) is not None
    state = TinkAuthState.AUTHENTICATED if connected else TinkAuthState.NOT_AUTHENTICATED
    return BankStatusResponse(user_id=user_id, state=state)


@router.delete("/bank/connection", status_code=204)
def disconnect(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    CredentialStore(db).delete(user_id, TOKEN_SERVICE, TOKEN_ACCOUNT)
    db.commit()


@router.get("/bank/accounts", response_model=AccountsResponse)
async def list_accounts(
    request: Request,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    tink: TinkClient = Depends(get_tink_client),
):
    token = _require_token(db, user_id)
    try:
        accounts = await tink.get_accounts(token)
    except TinkError as e:
        raise _tink_http_error("accounts", e, get_request_id(request))

    return AccountsResponse(
        user_id=user_id,
        accounts=[
            TinkAccountSchema(
                id=a.id,
                name=a.name,
                type=a.type,
                balance=a.balance,
                currency_code=a.currency_code,
            )
            for a in accounts
        ],
    )


@router.get("/bank/user", response_model=BankUserResponse)
async def bank_user(
    request: Request,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    tink: TinkClient = Depends(get_tink_client),
):
    token = _require_token(db, user_id)
    try:
        profile = await tink.get_user(token)
    except TinkError as e:
        raise _tink_http_error("user", e, get_request_id(request))

    return BankUserResponse(user_id=user_id, tink_user_id=profile.get("id"), profile=profile)


@router.post("/bank/sync", response_model=SyncResponse)
async def sync_transactions(
    request: Request,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    tink: TinkClient = Depends(get_tink_client),
):
    """Import Tink transactions not seen before"""
    request_id = get_request_id(request)
    token = _require_token(db, user_id)
    try:
        transactions = await tink.get_transactions(token)
    except TinkError as e:
        raise _tink_http_error("sync", e, request_id)

    inserted = TransactionRepository(db).add_synced(user_id, transactions)
    db.commit()

    synced_transactions_counter.inc(inserted)
    log_bank_sync(request_id, user_id, len(transactions), inserted)
    return SyncResponse(user_id=user_id, fetched=len(transactions), imported=inserted)
