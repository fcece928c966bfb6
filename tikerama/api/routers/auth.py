# tikerama/api/routers/auth.py
from fastapi import APIRouter, Depends

from tikerama.api.deps import get_auth_store
from tikerama.domain.schemas import AuthOut, LoginIn, OtpRequestIn, OtpVerifyIn, RegisterIn
from tikerama.services.auth_store import AuthStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, auth: AuthStore = Depends(get_auth_store)):
    """
    Creates the account; the backend then sends an e-mail OTP
    and the session waits for it (otpStep = true).
    """
    auth.register(payload)
    return auth.snapshot()


@router.post("/otp/request", response_model=AuthOut)
def request_otp(payload: OtpRequestIn, auth: AuthStore = Depends(get_auth_store)):
    auth.request_email_otp(payload.email)
    return auth.snapshot()


@router.post("/otp/verify", response_model=AuthOut)
def verify_otp(payload: OtpVerifyIn, auth: AuthStore = Depends(get_auth_store)):
    auth.verify_email_otp(payload.email, payload.otp_code)
    return auth.snapshot()


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, auth: AuthStore = Depends(get_auth_store)):
    auth.login(payload.email, payload.password)
    return auth.snapshot()


@router.post("/logout", response_model=AuthOut)
def logout(auth: AuthStore = Depends(get_auth_store)):
    auth.logout()
    return auth.snapshot()


@router.get("/me", response_model=AuthOut)
def me(auth: AuthStore = Depends(get_auth_store)):
    auth.check_auth()
    return auth.snapshot()
