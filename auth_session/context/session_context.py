"""
Session Context - Process-wide authentication state machine.

UNKNOWN --initialize()--> AUTHENTICATED | UNAUTHENTICATED
UNAUTHENTICATED --sign_in()--> AUTHENTICATED
AUTHENTICATED --sign_out()--> UNAUTHENTICATED

All mutations run on one asyncio event loop and only interleave at await
points, so no locking is needed. Results are applied in the order they
resolve, except that a sign-out supersedes any sign-in or restoration
still in flight when it starts. A superseded session is invalidated on the
backend and dropped from the token store.
"""

import logging
from typing import Callable, List, Optional

from auth_session.domain.credentials import Credentials, UserData
from auth_session.domain.errors import AuthError
from auth_session.domain.session import AuthStatus, SessionState
from auth_session.domain.user import User
from auth_session.ports.auth_repository_port import AuthRepositoryPort
from auth_session.ports.token_store_port import TokenStorePort
from auth_session import use_cases

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class SessionContext:
    """
    Single owner of the session state.

    Example:
        context = SessionContext(repository, token_store)
        await context.initialize()          # restore persisted session

        await context.sign_in(Credentials("alice@example.com", "s3cret"))
        context.is_authenticated            # True

        await context.sign_out()
    """

    def __init__(self, repository: AuthRepositoryPort, token_store: TokenStorePort):
        """
        Initialize context in the UNKNOWN state.

        Args:
            repository: Identity backend
            token_store: Persistence for the session token (shared with
                the repository, which reads it to restore and sign out)
        """
        self._repository = repository
        self._token_store = token_store

        self._user: Optional[User] = None
        self._initialized = False
        self._restore_started = False

        self._in_flight = 0           # restoration / sign-in / sign-out calls running
        self._pending_adoptions = 0   # sign-ins and restoration that may still adopt a user
        self._sign_out_generation = 0

        self._listeners: List[Listener] = []

    # -- read side ---------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Current snapshot."""
        return SessionState(
            user=self._user,
            is_loading=self.is_loading,
            initialized=self._initialized,
        )

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_loading(self) -> bool:
        return not self._initialized or self._in_flight > 0

    @property
    def status(self) -> AuthStatus:
        return self.state.status

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with the new state after every mutation.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- mutation helpers --------------------------------------------------

    def _notify(self):
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener %r failed", listener)

    def _begin(self):
        self._in_flight += 1
        self._notify()

    def _end(self):
        self._in_flight -= 1
        self._notify()

    def _set_user(self, user: Optional[User]):
        self._user = user
        self._notify()

    async def _clear_persisted_token(self):
        try:
            await self._token_store.clear()
        except Exception as exc:
            logger.warning("Could not clear persisted token: %r", exc)

    async def _load_persisted_token(self) -> Optional[str]:
        try:
            return await self._token_store.load()
        except Exception as exc:
            logger.warning("Could not read persisted token: %r", exc)
            return None

    async def _discard_session(self, token: Optional[str]):
        """
        Invalidate a superseded session's token remotely and drop it from
        the store. A token some newer sign-in has since saved is left alone.
        """
        if not token:
            return
        try:
            await use_cases.sign_out_user(self._repository, token)
        except AuthError as exc:
            logger.warning("Could not invalidate superseded session: %s", exc)

        if await self._load_persisted_token() == token:
            await self._clear_persisted_token()

    # -- operations --------------------------------------------------------

    async def initialize(self) -> SessionState:
        """
        Run the startup restoration check (once per context).

        Never raises for a missing or failed session: both end in
        UNAUTHENTICATED. Later calls return the current state untouched.
        """
        if self._restore_started:
            logger.debug("Session restoration already ran")
            return self.state

        self._restore_started = True
        # Restoration belongs to the first generation, so a sign-out issued
        # before initialize() even started supersedes it too
        generation = 0
        self._pending_adoptions += 1
        self._begin()
        try:
            try:
                user = await use_cases.check_auth_status(self._repository)
            except AuthError as exc:
                logger.warning("Session restoration failed, starting signed out: %s", exc)
                user = None

            if generation != self._sign_out_generation:
                logger.info("Sign-out during restoration, not adopting restored session")
                # Nobody adopted a newer session, so the stored token is the restored one
                if user is not None and self._user is None:
                    await self._discard_session(await self._load_persisted_token())
            else:
                self._set_user(user)
                if user is not None:
                    logger.info("Restored session for user %s", user.user_id)
        finally:
            self._pending_adoptions -= 1
            self._initialized = True
            self._end()

        return self.state

    async def sign_in(self, credentials: Credentials) -> Optional[User]:
        """
        Sign in and adopt the user.

        Returns:
            The signed-in user, or None if a sign-out started while this
            sign-in was in flight (its result is discarded)

        Raises:
            HttpError: Credentials rejected (state unchanged)
            NetworkError: Backend unreachable (state unchanged)
        """
        generation = self._sign_out_generation
        self._pending_adoptions += 1
        self._begin()
        try:
            token = await use_cases.login_user(self._repository, credentials)
            user = await use_cases.fetch_current_user(self._repository, token)

            if generation != self._sign_out_generation:
                logger.info("Sign-in for %s superseded by sign-out", credentials.identifier)
                await self._discard_session(token)
                return None

            try:
                await self._token_store.save(token)
            except Exception as exc:
                raise self._repository.handle_error(exc) from exc

            if generation != self._sign_out_generation:
                logger.info("Sign-in for %s superseded by sign-out", credentials.identifier)
                await self._discard_session(token)
                return None

            self._set_user(user)
            logger.info("Signed in user %s", user.user_id)
            return user
        finally:
            self._pending_adoptions -= 1
            self._end()

    async def sign_out(self) -> None:
        """
        Sign out locally, invalidating the session remotely if possible.

        Never raises. Remote failures are logged and the local session is
        dropped anyway. A no-op when nobody is signed in and restoration
        has finished; before that it supersedes the restoration, which then
        invalidates the persisted session instead of adopting it.
        """
        if self._user is None and self._pending_adoptions == 0 and self._initialized:
            logger.debug("Sign-out with no signed-in user, nothing to do")
            return

        self._sign_out_generation += 1
        if self._user is None:
            # Only pending sign-ins/restoration to supersede; they discard
            # and invalidate their own sessions
            logger.debug("Sign-out while signing in, pending result will be discarded")
            return

        self._begin()
        try:
            try:
                await use_cases.sign_out_user(self._repository)
            except AuthError as exc:
                # Local sign-out must succeed even if remote invalidation fails
                logger.warning("Remote sign-out failed, signing out locally: %s", exc)
            await self._clear_persisted_token()
        finally:
            self._set_user(None)
            self._end()
        logger.info("Signed out")

    async def register_user(self, user_data: UserData) -> None:
        """Create an account. Session state is unchanged; call sign_in() next."""
        await use_cases.register_user(self._repository, user_data)

    async def send_reset_password_email(self, email: str) -> bool:
        """Ask the backend to email a reset code."""
        return await use_cases.send_reset_code(self._repository, email)

    async def verify_reset_code(self, email: str, code: str) -> str:
        """Exchange a reset code for a reset token."""
        return await use_cases.verify_reset_code(self._repository, email, code)

    async def reset_password(self, email: str, new_password: str, reset_token: str) -> None:
        """Set a new password using a verified reset token."""
        await use_cases.reset_password(self._repository, email, new_password, reset_token)
