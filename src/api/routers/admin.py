"""
Admin routes.

Sign-up with OTP verification, sign-in, and order accept/reject.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_order_lifecycle_service, get_registration_service
from src.api.models import (
    ERROR_RESPONSES,
    AcceptOrderRequest,
    AcceptOrderResponse,
    AccountOut,
    AdminSignInRequest,
    AdminSignInResponse,
    AdminSignUpRequest,
    AdminVerificationRequest,
    AdminVerificationResponse,
    CodeSent,
    CodeSentResponse,
    ErrorResponse,
    MessageResponse,
    OrderOut,
    SignInOut,
)
from src.domain.orders import OrderLifecycleService
from src.domain.registration import RegistrationService

router = APIRouter(tags=["admin"])


@router.post(
    "/adminSignUp",
    response_model=CodeSentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Account already exists"},
    },
    summary="Begin admin sign-up",
    description="Submit admin name, email and password. "
    "A 6-digit one-time code is sent to the email address.",
)
async def admin_sign_up(
    request_data: AdminSignUpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> CodeSentResponse:
    started = await service.begin_sign_up(
        request_data.admin_name, request_data.admin_email, request_data.admin_password
    )
    return CodeSentResponse(
        message="Please enter the OTP to complete the signup process",
        response=CodeSent(contact=started.contact, expires_in_seconds=started.expires_in_seconds),
    )


@router.post(
    "/adminVerification",
    response_model=AdminVerificationResponse,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "No pending sign-up (or expired)"},
        409: {"model": ErrorResponse, "description": "Wrong code"},
    },
    summary="Verify admin sign-up code",
)
async def admin_verification(
    request_data: AdminVerificationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> AdminVerificationResponse:
    """
    Confirm the one-time code and create the account.

    ``notified`` is false when the welcome email could not be sent; the
    account is created either way.
    """
    confirmed = await service.confirm_sign_up(request_data.admin_name, request_data.otp)
    return AdminVerificationResponse(
        message="Account sign up successful!",
        response=AccountOut.from_account(confirmed.account),
        verification=f"Verified on {confirmed.confirmed_at.isoformat()}",
        notified=confirmed.notified,
    )


@router.post(
    "/adminSignIn",
    response_model=AdminSignInResponse,
    responses={
        **ERROR_RESPONSES,
        401: {"model": ErrorResponse, "description": "Incorrect password"},
        404: {"model": ErrorResponse, "description": "Account does not exist"},
    },
    summary="Admin sign-in",
)
async def admin_sign_in(
    request_data: AdminSignInRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> AdminSignInResponse:
    signed_in = await service.sign_in(request_data.admin_name, request_data.password)
    return AdminSignInResponse(
        message=f"Signed in successfully, {signed_in.handle}.",
        response=SignInOut(handle=signed_in.handle, signed_in_at=signed_in.signed_in_at),
    )


@router.patch(
    "/acceptOrder",
    response_model=AcceptOrderResponse,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "Order missing or already handled"},
    },
    summary="Accept a placed order",
)
async def accept_order(
    request_data: AcceptOrderRequest,
    service: OrderLifecycleService = Depends(get_order_lifecycle_service),
) -> AcceptOrderResponse:
    accepted = await service.accept(request_data.order_id, request_data.admin)
    return AcceptOrderResponse(
        message="Order has been dispatched!",
        response=OrderOut.from_order(accepted.order),
        dispatch_time=accepted.order.dispatched_at,
        notified=accepted.notified,
    )


@router.delete(
    "/rejectOrder/{order_id}",
    response_model=MessageResponse,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "Order missing or already handled"},
    },
    summary="Reject (delete) a placed order",
)
async def reject_order(
    order_id: str,
    service: OrderLifecycleService = Depends(get_order_lifecycle_service),
) -> MessageResponse:
    return MessageResponse(message=await service.reject(order_id))
