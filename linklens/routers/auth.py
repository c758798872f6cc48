from fastapi import APIRouter, Depends, HTTPException

from linklens.dependencies import get_account_store
from linklens.schemas import AccountSummary, LoginRequest, RegisterRequest
from linklens.services.account_store import AccountStore, AuthFailure, AuthResult

router = APIRouter(prefix="/auth", tags=["auth"])

_FAILURE_STATUS = {
    AuthFailure.ALREADY_EXISTS: 409,
    AuthFailure.WEAK_CREDENTIAL: 400,
    AuthFailure.INVALID_INPUT: 400,
}


def _summary_or_error(result: AuthResult) -> AccountSummary:
    if not result:
        raise HTTPException(status_code=_FAILURE_STATUS[result.failure], detail=result.failure.value)
    return AccountSummary.from_account(result.account)


@router.post("/login", response_model=AccountSummary, response_model_by_alias=True)
def login(payload: LoginRequest, store: AccountStore = Depends(get_account_store)):
    return _summary_or_error(store.login(payload.email, payload.password))


@router.post("/register", response_model=AccountSummary, response_model_by_alias=True)
def register(payload: RegisterRequest, store: AccountStore = Depends(get_account_store)):
    return _summary_or_error(store.register(payload.email, payload.password, payload.name))


@router.post("/logout")
def logout(store: AccountStore = Depends(get_account_store)):
    store.logout()
    return {"status": "signed_out"}


@router.get("/me", response_model=AccountSummary, response_model_by_alias=True)
def current_account(store: AccountStore = Depends(get_account_store)):
    account = store.active_account
    if account is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return AccountSummary.from_account(account)
