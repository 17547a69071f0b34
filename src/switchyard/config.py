"""Dispatcher configuration.

DispatcherConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DispatcherConfig:
    """Dispatcher configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatcherConfig(hard_stop=True, redirect_fallback="/form")
    """

    # Unauthenticated / validation failures raise NotAuthenticated /
    # ValidationFailed instead of returning a 401 / 302 Response
    hard_stop: bool = False

    # Let a False result from route.matched veto the request (403)
    matched_veto: bool = False

    # Reject listener registration once dispatching has started
    freeze_listeners: bool = True

    # Redirect target after failed validation when no referrer is known
    redirect_fallback: str = "/"

    # Messages
    unauthenticated_message: str = "Not Authenticated"
    default_validation_message: str = "Validation error"
