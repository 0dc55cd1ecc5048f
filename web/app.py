"""Local-first FastAPI shell for transaction fee estimation."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from chain_adapter.starknet.models import Call, normalize_address
from chain_adapter.starknet.simulator import ProviderError
from fee_engine.config import Settings, load_settings
from fee_engine.errors import AccountError, AccountErrorCode, InvocationError
from fee_engine.estimator import TransactionEstimator
from fee_engine.local import build_local_wallet
from fee_engine.models import EstimateRequest
from wallet_core.models import AccountRef

app = FastAPI(title="Fee Estimator", description="Local-first fee estimation shell")

_CONTEXT: Dict[str, Optional[str]] = {"store_path": None}
_SETTINGS: Dict[str, Settings] = {}

_STATUS_BY_CODE = {
    AccountErrorCode.NOT_FOUND: 404,
    AccountErrorCode.MISSING_METHOD: 400,
    AccountErrorCode.CANNOT_ESTIMATE_TRANSACTIONS: 422,
}


def _check_address(value: str) -> str:
    normalize_address(value)
    return value


FeltAddress = Annotated[str, AfterValidator(_check_address)]


class ContextRequest(BaseModel):
    store_path: str


class AccountInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: FeltAddress
    network_id: str = Field(alias="networkId")


class CallInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract_address: FeltAddress = Field(alias="contractAddress")
    entrypoint: str = Field(min_length=1)
    calldata: List[str] = Field(default_factory=list)

    def to_call(self) -> Call:
        return Call.from_dict(self.model_dump(by_alias=True))


class EstimateTransactionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account: AccountInput
    fee_token_address: FeltAddress = Field(alias="feeTokenAddress")
    transactions: Union[Annotated[List[CallInput], Field(min_length=1)], CallInput]


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return _error_response("FORBIDDEN", "Remote access disabled.", 403)
    return await call_next(request)


async def _handle_account_error(request: Request, exc: AccountError):
    return JSONResponse({"error": exc.to_dict()}, status_code=_STATUS_BY_CODE[exc.code])


async def _handle_provider_error(request: Request, exc: ProviderError):
    return _error_response("PROVIDER_ERROR", str(exc), 400)


async def _handle_invalid_input(request: Request, exc: Exception):
    message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
    return _error_response("INVALID_REQUEST", str(message), 400)


async def _handle_validation_error(request: Request, exc: RequestValidationError):
    return _error_response(
        "INVALID_REQUEST",
        "Request validation failed.",
        422,
        details=jsonable_encoder(exc.errors()),
    )


async def _handle_http_error(request: Request, exc: HTTPException):
    return _error_response("HTTP_ERROR", str(exc.detail), exc.status_code)


def _error_response(code: str, message: str, status_code: int, details=None) -> JSONResponse:
    error: Dict[str, object] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse({"error": error}, status_code=status_code)


app.add_exception_handler(AccountError, _handle_account_error)
app.add_exception_handler(ProviderError, _handle_provider_error)
app.add_exception_handler(RequestValidationError, _handle_validation_error)
app.add_exception_handler(HTTPException, _handle_http_error)
for _exc_class in (InvocationError, ValueError, KeyError):
    app.add_exception_handler(_exc_class, _handle_invalid_input)


@app.post("/api/context")
async def set_context(payload: ContextRequest):
    _CONTEXT["store_path"] = payload.store_path
    return {"status": "ok"}


@app.get("/api/accounts")
async def list_accounts():
    wallet = build_local_wallet(_require_store_path(), _get_settings())
    return {
        "accounts": [
            {
                **account.ref.to_dict(),
                "variant": account.variant.value,
                "label": account.label,
                "needsDeploy": account.needs_deploy,
            }
            for account in wallet.list_accounts()
        ]
    }


@app.post("/api/transactions/estimate")
async def estimate_transaction(payload: EstimateTransactionRequest):
    settings = _get_settings()
    wallet = build_local_wallet(_require_store_path(), settings)
    estimator = TransactionEstimator(wallet, settings=settings)

    if isinstance(payload.transactions, list):
        transactions = tuple(item.to_call() for item in payload.transactions)
    else:
        transactions = payload.transactions.to_call()

    request = EstimateRequest(
        account=AccountRef(
            address=payload.account.address,
            network_id=payload.account.network_id,
        ),
        fee_token_address=payload.fee_token_address,
        transactions=transactions,
    )
    response = await estimator.estimate(request)
    return response.to_dict()


def _require_store_path() -> Path:
    store_path = _CONTEXT["store_path"]
    if not store_path:
        raise HTTPException(status_code=400, detail="Account store not selected.")
    return Path(store_path)


def _get_settings() -> Settings:
    if "settings" not in _SETTINGS:
        _SETTINGS["settings"] = load_settings()
    return _SETTINGS["settings"]


def _reset_state() -> None:
    _CONTEXT["store_path"] = None
    _SETTINGS.clear()
