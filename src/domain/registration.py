"""
Registration domain service - OTP-gated admin sign-up.

Flow
====

    begin_sign_up   -> PendingRegistration written (keyed by handle), code emailed
    confirm_sign_up -> code checked, Account created, PendingRegistration deleted
    sign_in         -> bcrypt comparison against the stored hash

All in-flight state lives in the PendingRegistrationRepository, never on
the service instance, so a single RegistrationService may serve any number
of concurrent requests and a confirmation may reach a different process
than the one that started the sign-up.

Ordering guarantees:
- A second begin_sign_up for the same handle replaces the first entry
  (last writer wins); the earlier code stops working.
- confirm_sign_up creates the Account before deleting the pending entry,
  so a crash in between leaves a retryable entry rather than a lost one.
- Expiry is checked lazily at confirmation; expired entries are deleted
  and reported as not found.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import bcrypt

from . import notifications
from .entities import Account, PendingRegistration
from .exceptions import (
    BadRequest,
    Conflict,
    DependencyFailure,
    DuplicateHandle,
    InvalidCode,
    NotFound,
    Unauthorized,
    service_boundary,
)
from .otp import codes_match, generate_code, utcnow
from .ports import AccountRepository, NotificationGateway, PendingRegistrationRepository

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input.
MAX_SECRET_BYTES = 72


@dataclass(frozen=True)
class SignUpStarted:
    contact: str
    expires_in_seconds: int


@dataclass(frozen=True)
class SignUpConfirmed:
    account: Account
    confirmed_at: datetime
    notified: bool


@dataclass(frozen=True)
class SignedIn:
    handle: str
    signed_in_at: datetime


@dataclass
class RegistrationService:
    """
    Domain service for admin registration and sign-in.

    Stateless apart from its collaborators and configuration.
    """

    accounts: AccountRepository
    pending: PendingRegistrationRepository
    notifier: NotificationGateway
    restaurant_name: str = "Innocent Restaurant"
    ttl_seconds: int = 600
    code_digits: int = 6
    bcrypt_cost: int = 10
    clock: Callable[[], datetime] = field(default=utcnow)

    @service_boundary("An unexpected error occurred while signing up")
    async def begin_sign_up(self, handle: str, contact: str, secret: str) -> SignUpStarted:
        """
        Start a sign-up by emailing a one-time code.

        Args:
            handle: Unique admin name
            contact: Email address the code is sent to (will be normalized)
            secret: Plaintext password (hashed before storage)

        Raises:
            BadRequest: If any field is blank or the secret is too long for bcrypt
            Conflict: If an account with ``handle`` already exists
            DependencyFailure: If the code could not be sent
        """
        handle = self._normalize_handle(handle)
        contact = self._normalize_email(contact)
        if not handle or not contact or not secret:
            raise BadRequest("All fields required!")
        if _too_long(secret):
            raise BadRequest(f"Password cannot be longer than {MAX_SECRET_BYTES} bytes")

        if await self.accounts.exists_by_handle(handle):
            raise Conflict("Account already exists!")

        now = self.clock()
        code = generate_code(self.code_digits)
        entry = PendingRegistration(
            handle=handle,
            contact=contact,
            secret_hash=await self._hash_secret(secret),
            code=code,
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        await self.pending.put(entry)

        subject, body = notifications.sign_up_code(self.restaurant_name, code)
        result = await notifications.deliver(self.notifier, contact, subject, body)
        if not result.success:
            # Only roll back our own entry; a newer sign-up may have replaced it.
            await self.pending.discard(handle, code)
            raise DependencyFailure("Could not send the OTP, please try again")

        logger.info("Sign-up code sent for handle %s", handle)
        return SignUpStarted(contact=contact, expires_in_seconds=self.ttl_seconds)

    @service_boundary("An unexpected error occurred while verifying an OTP")
    async def confirm_sign_up(self, handle: str, code: str) -> SignUpConfirmed:
        """
        Confirm a pending sign-up and create the account.

        Raises:
            BadRequest: If handle or code is blank
            NotFound: If there is no live pending sign-up for ``handle``
            InvalidCode: If ``code`` does not match (entry is left unchanged)
            Conflict: If the account was created concurrently
        """
        handle = self._normalize_handle(handle)
        if not handle or not code:
            raise BadRequest("Invalid otp")

        now = self.clock()
        entry = await self.pending.get(handle)
        if entry is not None and entry.is_expired(now):
            await self.pending.discard(handle, entry.code)
            logger.info("Expired sign-up reclaimed for handle %s", handle)
            entry = None
        if entry is None:
            raise NotFound("No pending sign-up found, please sign up again")

        if not codes_match(entry.code, code):
            raise InvalidCode("Wrong otp")

        try:
            account = await self.accounts.create(entry.handle, entry.contact, entry.secret_hash)
        except DuplicateHandle:
            await self.pending.delete(handle)
            raise Conflict("Account already exists!") from None
        await self.pending.delete(handle)
        logger.info("Account created for handle %s", handle)

        subject, body = notifications.welcome(self.restaurant_name, account.handle)
        result = await notifications.deliver(self.notifier, account.contact, subject, body)

        return SignUpConfirmed(account=account, confirmed_at=self.clock(), notified=result.success)

    @service_boundary("An unexpected error occurred while signing in")
    async def sign_in(self, handle: str, secret: str) -> SignedIn:
        """
        Check a handle/secret pair against the stored hash.

        No session token is issued.

        Raises:
            BadRequest: If handle or secret is blank
            NotFound: If no account matches ``handle``
            Unauthorized: If the secret does not match
        """
        handle = self._normalize_handle(handle)
        if not handle or not secret:
            raise BadRequest("All fields required!")

        account = await self.accounts.find_by_handle(handle, include_secret=True)
        if account is None or account.secret_hash is None:
            raise NotFound("Account does not exist!")

        # No stored secret can be longer than the limit, so it cannot match.
        matches = not _too_long(secret) and await asyncio.to_thread(
            bcrypt.checkpw, secret.encode(), account.secret_hash.encode()
        )
        if not matches:
            raise Unauthorized("Incorrect password!")

        logger.info("Handle %s signed in", handle)
        return SignedIn(handle=account.handle, signed_in_at=self.clock())

    def _normalize_handle(self, handle: str) -> str:
        return handle.strip()

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    async def _hash_secret(self, secret: str) -> str:
        """Hash with bcrypt off the event loop."""
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, secret.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)
        )
        return hashed.decode()


def _too_long(secret: str) -> bool:
    return len(secret.encode()) > MAX_SECRET_BYTES
