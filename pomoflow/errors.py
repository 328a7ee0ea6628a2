"""Exception types shared across PomoFlow."""


class PomoFlowError(Exception):
    """Base class for every error PomoFlow raises on purpose."""


class AuthError(PomoFlowError):
    """Sign-in / sign-up was rejected (bad input, wrong credentials)."""


class SettingsError(PomoFlowError, ValueError):
    """A settings update would break an invariant (e.g. a zero duration)."""


class PersistenceError(PomoFlowError):
    """The session store could not complete a read or write."""


class SessionNotFound(PersistenceError, LookupError):
    """No session with that id is visible to the current user."""
