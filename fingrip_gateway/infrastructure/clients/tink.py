"""Tink open-banking API client: authorization, token exchange and data fetching"""

import asyncio
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

from fingrip_gateway.config import settings
from fingrip_gateway.domain.exceptions import (
    TinkAuthenticationError,
    TinkConfigurationError,
    TinkNetworkError,
    TinkResponseError,
    TinkServerError,
)
from fingrip_gateway.domain.models import (
    AccountType,
    FinancialCategory,
    TinkAccount,
    TinkToken,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

# Keyword -> category, matched against the Tink PFM category name and the description
CATEGORY_KEYWORDS = [
    ("salary", FinancialCategory.INCOME),
    ("income", FinancialCategory.INCOME),
    ("rent", FinancialCategory.HOUSING),
    ("mortgage", FinancialCategory.HOUSING),
    ("housing", FinancialCategory.HOUSING),
    ("grocer", FinancialCategory.FOOD),
    ("restaurant", FinancialCategory.FOOD),
    ("food", FinancialCategory.FOOD),
    ("fuel", FinancialCategory.TRANSPORTATION),
    ("transport", FinancialCategory.TRANSPORTATION),
    ("taxi", FinancialCategory.TRANSPORTATION),
    ("electric", FinancialCategory.UTILITIES),
    ("utilit", FinancialCategory.UTILITIES),
    ("insurance", FinancialCategory.INSURANCE),
    ("pharmacy", FinancialCategory.HEALTHCARE),
    ("health", FinancialCategory.HEALTHCARE),
    ("loan", FinancialCategory.DEBT),
    ("credit card", FinancialCategory.DEBT),
    ("savings", FinancialCategory.SAVINGS),
    ("invest", FinancialCategory.INVESTMENTS),
    ("subscription", FinancialCategory.SUBSCRIPTIONS),
    ("streaming", FinancialCategory.SUBSCRIPTIONS),
    ("entertainment", FinancialCategory.ENTERTAINMENT),
    ("shopping", FinancialCategory.SHOPPING),
    ("clothing", FinancialCategory.SHOPPING),
    ("education", FinancialCategory.EDUCATION),
]


def parse_amount(amount: Mapping[str, Any]) -> Decimal:
    """Tink encodes money as {"value": {"unscaledValue": "-1234", "scale": "2"}}"""
    value = amount["value"]
    return Decimal(str(value["unscaledValue"])).scaleb(-int(value["scale"]))


def categorize(*texts: Optional[str]) -> FinancialCategory:
    haystack = " ".join(t.lower() for t in texts if t)
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in haystack:
            return category
    return FinancialCategory.OTHER


def map_account(raw: Mapping[str, Any]) -> TinkAccount:
    booked = raw["balances"]["booked"]["amount"]
    try:
        account_type = AccountType(raw.get("type", "OTHER"))
    except ValueError:
        account_type = AccountType.OTHER

    return TinkAccount(
        id=raw["id"],
        name=raw.get("name") or "",
        type=account_type,
        balance=float(parse_amount(booked)),
        currency_code=booked["currencyCode"],
    )


def map_transaction(raw: Mapping[str, Any]) -> Transaction:
    """Negative amounts are expenses; the local amount is always stored positive"""
    amount = parse_amount(raw["amount"])
    descriptions = raw.get("descriptions", {})
    description = descriptions.get("display") or descriptions.get("original") or ""
    merchant = (raw.get("merchantInformation") or {}).get("merchantName")
    pfm_name = ((raw.get("categories") or {}).get("pfm") or {}).get("name")

    txn_type = TransactionType.EXPENSE if amount < 0 else TransactionType.INCOME
    category = categorize(pfm_name, description, merchant)
    if txn_type == TransactionType.INCOME and category == FinancialCategory.OTHER:
        category = FinancialCategory.INCOME

    return Transaction(
        date=date.fromisoformat(raw["dates"]["booked"]),
        amount=float(abs(amount)),
        type=txn_type,
        category=category,
        description=description,
        merchant=merchant,
        external_id=raw["id"],
    )


class TinkClient:
    """Thin async wrapper over the Tink REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.tink_api_base).rstrip("/")
        self.client_id = client_id if client_id is not None else settings.tink_client_id
        self.client_secret = client_secret if client_secret is not None else settings.tink_client_secret
        self.redirect_uri = redirect_uri or settings.tink_redirect_uri
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _require_configuration(self, *, secret: bool = False) -> None:
        if not self.client_id or not self.redirect_uri:
            raise TinkConfigurationError("client id and redirect URI are required")
        if secret and not self.client_secret:
            raise TinkConfigurationError("client secret is required for token exchange")

    def build_authorization_url(self, state: str | None = None) -> str:
        """URL of the Tink Link flow; the user is redirected back with ?code=..."""
        self._require_configuration()
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "market": settings.tink_market,
            "locale": settings.tink_locale,
            "scope": ",".join(settings.tink_scopes),
        }
        if state:
            params["state"] = state
        return f"{settings.tink_link_base}?{urlencode(params)}"

    @staticmethod
    def parse_callback(callback_url: str) -> str:
        """
        Extract the authorization code from a redirect URL.

        Raises:
            TinkAuthenticationError: If Tink reported an error or no code is present
        """
        query = parse_qs(urlparse(callback_url).query)
        if "error" in query:
            reason = query.get("message", query["error"])[0]
            raise TinkAuthenticationError(reason)
        codes = query.get("code")
        if not codes or not codes[0]:
            raise TinkAuthenticationError("callback carried no authorization code")
        return codes[0]

    async def authenticate(self) -> str:
        """Simulated authorization used in test mode"""
        if not settings.tink_test_mode:
            raise TinkConfigurationError("simulated authentication is only available in test mode")
        await asyncio.sleep(settings.tink_simulated_delay_seconds)
        return "dummy-auth-code"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        params: Dict[str, Any] | None = None,
        data: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    params=params,
                    data=data,
                    headers=headers,
                )
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise TinkNetworkError(f"timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status in (401, 403):
                    raise TinkAuthenticationError(f"HTTP {status}") from e
                raise TinkServerError(f"HTTP {status}") from e
            except httpx.RequestError as e:
                raise TinkNetworkError(str(e)) from e
            except ValueError as e:
                raise TinkResponseError("response body is not JSON") from e

    async def exchange_code(self, code: str) -> TinkToken:
        """Exchange an authorization code for an access token"""
        self._require_configuration(secret=True)
        payload = await self._request(
            "POST",
            "/api/v1/oauth/token",
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
            },
        )
        try:
            return TinkToken(
                access_token=payload["access_token"],
                token_type=payload.get("token_type", "bearer"),
                expires_in=int(payload.get("expires_in", 0)),
                refresh_token=payload.get("refresh_token"),
                scope=payload.get("scope"),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise TinkResponseError(f"token payload: {e}") from e

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        return await self._request("GET", "/api/v1/user", access_token=access_token)

    async def _paginate(self, path: str, key: str, access_token: str, page_size: int) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page_token: str | None = None
        while True:
            params: Dict[str, Any] = {"pageSize": page_size}
            if page_token:
                params["pageToken"] = page_token
            payload = await self._request("GET", path, access_token=access_token, params=params)
            if not isinstance(payload.get(key), list):
                raise TinkResponseError(f"missing '{key}' list")
            items.extend(payload[key])
            page_token = payload.get("nextPageToken")
            if not page_token:
                return items

    async def get_accounts(self, access_token: str, page_size: int = 100) -> List[TinkAccount]:
        raw = await self._paginate("/data/v2/accounts", "accounts", access_token, page_size)
        try:
            return [map_account(a) for a in raw]
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise TinkResponseError(f"invalid account data: {e}") from e

    async def get_transactions(self, access_token: str, page_size: int = 100) -> List[Transaction]:
        raw = await self._paginate("/data/v2/transactions", "transactions", access_token, page_size)
        try:
            transactions = [map_transaction(t) for t in raw]
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise TinkResponseError(f"invalid transaction data: {e}") from e

        logger.info("Fetched Tink transactions", extra={"step": "tink_fetch", "count": len(transactions)})
        return transactions
