"""Conditional fetch lifecycle state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class FetchState(Enum):
    """Conditional fetch states.

    State transitions:
        START -> CACHE_LOADED: Record loaded and validated
        CACHE_LOADED -> HEADERS_BUILT: Request headers assembled
        HEADERS_BUILT -> REQUEST_SENT: Transport invoked
        REQUEST_SENT -> CONTENT_RECEIVED: New body downloaded
        REQUEST_SENT -> NOT_MODIFIED: Server answered 304
        CONTENT_RECEIVED -> RECORD_PERSISTED: Record updated and saved
        RECORD_PERSISTED/NOT_MODIFIED -> DONE: Result returned

    There is no failed state; errors leave the machine where it was.
    """

    START = auto()
    CACHE_LOADED = auto()
    HEADERS_BUILT = auto()
    REQUEST_SENT = auto()
    CONTENT_RECEIVED = auto()
    RECORD_PERSISTED = auto()
    NOT_MODIFIED = auto()
    DONE = auto()


class FetchStateError(Exception):
    """Raised when an invalid fetch state transition is attempted."""

    def __init__(self, from_state: FetchState, to_state: FetchState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid fetch state transition: {from_state.name} -> {to_state.name}"
        )


class FetchStateMachine:
    """State machine for a single conditional fetch."""

    VALID_TRANSITIONS: ClassVar[dict[FetchState, set[FetchState]]] = {
        FetchState.START: {FetchState.CACHE_LOADED},
        FetchState.CACHE_LOADED: {FetchState.HEADERS_BUILT},
        FetchState.HEADERS_BUILT: {FetchState.REQUEST_SENT},
        FetchState.REQUEST_SENT: {
            FetchState.CONTENT_RECEIVED,
            FetchState.NOT_MODIFIED,
        },
        FetchState.CONTENT_RECEIVED: {FetchState.RECORD_PERSISTED},
        FetchState.RECORD_PERSISTED: {FetchState.DONE},
        FetchState.NOT_MODIFIED: {FetchState.DONE},
        FetchState.DONE: set(),  # Terminal state
    }

    def __init__(self, uri: str) -> None:
        """Initialize the state machine in START state.

        Args:
            uri: Resource URI for logging (credentials redacted).
        """
        self._state = FetchState.START
        self._log = logger.bind(component="remote_file", uri=uri)

    @property
    def state(self) -> FetchState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: FetchState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: FetchState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            FetchStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise FetchStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "fetch_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the fetch has completed."""
        return self._state == FetchState.DONE
