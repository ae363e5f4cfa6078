"""Map lifecycle state machine and parse-time classifications."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class MapState(Enum):
    """Map lifecycle states.

    State transitions:
        MAP_BUILT -> MAP_PARSING: Form submission is being applied
        MAP_BUILT -> MAP_RENDERING: Render-only request
        MAP_PARSING -> MAP_PARSED: Every node parsed
        MAP_PARSED -> MAP_RENDERING: Begin rendering after a submission
        MAP_RENDERING -> MAP_RENDERED: Markup produced
        MAP_PARSING/MAP_RENDERING -> MAP_FAILED: A node raised
    """

    MAP_BUILT = auto()
    MAP_PARSING = auto()
    MAP_PARSED = auto()
    MAP_RENDERING = auto()
    MAP_RENDERED = auto()
    MAP_FAILED = auto()


class SubmissionState(Enum):
    """What the form carries for one value in one section."""

    NO_SUBMISSION = auto()
    EMPTY_SUBMISSION = auto()
    NONEMPTY_SUBMISSION = auto()


class SectionPresence(Enum):
    """Whether a named section exists in the snapshot."""

    ABSENT = auto()
    PRESENT = auto()


def classify_submission(value: str | None, submitted: bool) -> SubmissionState:
    """Classify a form value.

    An empty or missing value only counts as an empty submission when the
    form carries the overall submit indicator.

    Args:
        value: Submitted value, None if the field is missing.
        submitted: Whether the submit indicator is present.

    Returns:
        The submission state.
    """
    if value:
        return SubmissionState.NONEMPTY_SUBMISSION
    if submitted:
        return SubmissionState.EMPTY_SUBMISSION
    return SubmissionState.NO_SUBMISSION


class MapStateError(Exception):
    """Raised when an invalid map state transition is attempted."""

    def __init__(self, from_state: MapState, to_state: MapState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid map state transition: {from_state.name} -> {to_state.name}"
        )


class MapStateMachine:
    """State machine for one map's request lifecycle.

    A map is built, optionally parsed once, and rendered once.
    Logs invariant violations when invalid transitions are attempted.
    """

    VALID_TRANSITIONS: ClassVar[dict[MapState, set[MapState]]] = {
        MapState.MAP_BUILT: {
            MapState.MAP_PARSING,
            MapState.MAP_RENDERING,
        },
        MapState.MAP_PARSING: {
            MapState.MAP_PARSED,
            MapState.MAP_FAILED,
        },
        MapState.MAP_PARSED: {
            MapState.MAP_RENDERING,
        },
        MapState.MAP_RENDERING: {
            MapState.MAP_RENDERED,
            MapState.MAP_FAILED,
        },
        MapState.MAP_RENDERED: set(),  # Terminal state
        MapState.MAP_FAILED: set(),  # Terminal state
    }

    def __init__(self, config: str, request_id: str) -> None:
        """Initialize the state machine in MAP_BUILT state.

        Args:
            config: Configuration namespace of the map.
            request_id: Request identifier for logging.
        """
        self._state = MapState.MAP_BUILT
        self._log = logger.bind(component="cbi", config=config, request_id=request_id)

    @property
    def state(self) -> MapState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: MapState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: MapState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            MapStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise MapStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "map_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (MapState.MAP_RENDERED, MapState.MAP_FAILED)

