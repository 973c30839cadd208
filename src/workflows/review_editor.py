"""
Review Editor Workflow.

Form controller behind the "write a review" screen: tracks field values,
live validation errors, input truncation and the submit lifecycle.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

import config.settings as settings
from src.models.review import ValidationError
from src.models.validation import (
    EXPERIENCE_MAX_LENGTH,
    PLACE_DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    FieldErrorKind,
    sanitize,
    validate_experience,
    validate_place_description,
    validate_rating,
    validate_title,
)
from src.storage.review_store import ReviewStore, StorageError
from src.utils import messages

logger = logging.getLogger(__name__)


class EditorField(Enum):
    """Editable form fields, in submit validation order."""
    RATING = "rating"
    TITLE = "title"
    PLACE_DESCRIPTION = "place_description"
    EXPERIENCE = "experience"


# Raw (untrimmed) input limits; rating has no text length
MAX_RAW_LENGTHS = {
    EditorField.TITLE: TITLE_MAX_LENGTH,
    EditorField.PLACE_DESCRIPTION: PLACE_DESCRIPTION_MAX_LENGTH,
    EditorField.EXPERIENCE: EXPERIENCE_MAX_LENGTH,
}


class SubmitStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class SubmitState:
    status: SubmitStatus
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "SubmitState":
        return cls(SubmitStatus.IDLE)

    @classmethod
    def loading(cls) -> "SubmitState":
        return cls(SubmitStatus.LOADING)

    @classmethod
    def success(cls, message: str) -> "SubmitState":
        return cls(SubmitStatus.SUCCESS, message)

    @classmethod
    def failure(cls, message: str) -> "SubmitState":
        return cls(SubmitStatus.FAILURE, message)


class SubmitResult(Enum):
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    FAILURE = "failure"
    BUSY = "busy"


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of submit(); field is set only for VALIDATION_FAILED."""
    result: SubmitResult
    field: Optional[EditorField] = None

    @classmethod
    def success(cls) -> "SubmitOutcome":
        return cls(SubmitResult.SUCCESS)

    @classmethod
    def validation_failed(cls, editor_field: EditorField) -> "SubmitOutcome":
        return cls(SubmitResult.VALIDATION_FAILED, editor_field)

    @classmethod
    def failure(cls) -> "SubmitOutcome":
        return cls(SubmitResult.FAILURE)

    @classmethod
    def busy(cls) -> "SubmitOutcome":
        return cls(SubmitResult.BUSY)


@dataclass(frozen=True)
class EditorState:
    """Immutable snapshot handed to listeners and UI layers."""
    rating: int
    title: str
    place_description: str
    experience: str
    field_errors: Dict[EditorField, str] = field(default_factory=dict)
    truncated_field: Optional[EditorField] = None
    submit_state: SubmitState = SubmitState.idle()
    last_error_message: Optional[str] = None
    is_submit_disabled: bool = True


class ReviewEditorWorkflow:
    """
    Stateful controller for composing and submitting one review.

    The LOADING submit state doubles as the re-entrancy guard: a submit()
    issued while another is in flight returns BUSY without touching the store.
    """

    def __init__(
        self,
        store: ReviewStore,
        user_name_provider: Callable[[], str] = lambda: settings.DEFAULT_USER_NAME,
        on_review_saved: Optional[Callable[[], None]] = None,
        success_banner_seconds: float = settings.SUCCESS_BANNER_SECONDS
    ):
        """
        Initialize review editor.

        Args:
            store: Review store that receives new reviews
            user_name_provider: Returns the display name of the current user
            on_review_saved: Called after a review is stored
            success_banner_seconds: Delay before a success message auto-dismisses
        """
        self.store = store
        self.user_name_provider = user_name_provider
        self.on_review_saved = on_review_saved
        self.success_banner_seconds = success_banner_seconds

        self.rating = 0
        self.title = ""
        self.place_description = ""
        self.experience = ""
        self.field_errors: Dict[EditorField, str] = {}
        self.truncated_field: Optional[EditorField] = None
        self.submit_state = SubmitState.idle()
        self.last_error_message: Optional[str] = None

        self._listeners: List[Callable[[EditorState], None]] = []
        self._dismiss_task: Optional[asyncio.Task] = None

    # ── Field editing ──────────────────────────────────────────────

    def set_field(self, editor_field: EditorField, raw_value: str) -> None:
        """
        Store a text field value, clipping it to the field's raw maximum.

        Raises:
            ValueError: If called for the rating field (use set_rating)
        """
        if editor_field not in MAX_RAW_LENGTHS:
            raise ValueError(f"{editor_field.value} is not a text field")

        limit = MAX_RAW_LENGTHS[editor_field]
        if len(raw_value) > limit:
            value = raw_value[:limit]
            self.truncated_field = editor_field
            logger.debug(f"Truncated {editor_field.value} from {len(raw_value)} to {limit} characters")
        else:
            value = raw_value
            if self.truncated_field == editor_field:
                self.truncated_field = None

        setattr(self, editor_field.value, value)
        self._validate(editor_field)
        self._clear_failure_on_edit()
        self._notify()

    def set_rating(self, value: int) -> None:
        """Set the star rating, clamped to 0-5 (0 means unset)."""
        clamped = max(0, min(5, value))
        if clamped != self.rating:
            self.rating = clamped
            self._validate(EditorField.RATING)

        self._clear_failure_on_edit()
        self._notify()

    def clear_truncated_field(self) -> None:
        self.truncated_field = None
        self._notify()

    # ── Validation ─────────────────────────────────────────────────

    def _rule_result(self, editor_field: EditorField) -> Optional[FieldErrorKind]:
        if editor_field is EditorField.RATING:
            return validate_rating(self.rating)
        if editor_field is EditorField.TITLE:
            return validate_title(self.title)
        if editor_field is EditorField.PLACE_DESCRIPTION:
            return validate_place_description(self.place_description)
        return validate_experience(self.experience)

    def _validate(self, editor_field: EditorField) -> bool:
        """Re-run one field's rule and update its error entry."""
        kind = self._rule_result(editor_field)
        if kind is None:
            self.field_errors.pop(editor_field, None)
            return True

        self.field_errors[editor_field] = kind.description
        return False

    def validate(self, editor_field: EditorField) -> bool:
        """Validate a single field, publishing its error message if invalid."""
        valid = self._validate(editor_field)
        self._notify()
        return valid

    def is_field_valid(self, editor_field: EditorField) -> bool:
        """Check a field without touching field_errors."""
        return self._rule_result(editor_field) is None

    def error_for(self, editor_field: EditorField) -> Optional[str]:
        return self.field_errors.get(editor_field)

    @property
    def is_submit_disabled(self) -> bool:
        if self.submit_state.status is SubmitStatus.LOADING:
            return True
        return any(not self.is_field_valid(f) for f in EditorField)

    # ── Submit lifecycle ───────────────────────────────────────────

    async def submit(self) -> SubmitOutcome:
        """
        Validate the form and store the review.

        Returns:
            BUSY if a submit is already in flight,
            VALIDATION_FAILED(field) for the first invalid field (no store call),
            SUCCESS once stored (form cleared),
            FAILURE if the store rejected the write (form preserved)
        """
        if self.submit_state.status is SubmitStatus.LOADING:
            logger.warning("Submit ignored: a review is already being saved")
            return SubmitOutcome.busy()

        self._cancel_success_dismiss()

        for editor_field in EditorField:
            if not self._validate(editor_field):
                logger.info(f"Submit blocked by invalid field: {editor_field.value}")
                self._notify()
                return SubmitOutcome.validation_failed(editor_field)

        self.submit_state = SubmitState.loading()
        self._notify()

        try:
            # Yield to the event loop before the write
            await asyncio.sleep(0)

            self.store.create(
                title=sanitize(self.title),
                rating=self.rating,
                place_description=sanitize(self.place_description),
                experience=sanitize(self.experience),
                user_name=sanitize(self.user_name_provider())
            )
        except ValidationError as e:
            return self._handle_rejected_fields(e)
        except StorageError as e:
            logger.error(f"Review could not be saved: {e}")
            self.last_error_message = messages.REVIEW_SAVE_ERROR
            self.submit_state = SubmitState.failure(messages.REVIEW_SAVE_ERROR)
            self._notify()
            return SubmitOutcome.failure()
        except asyncio.CancelledError:
            logger.warning("Submit cancelled before the review was saved")
            self.submit_state = SubmitState.idle()
            self._notify()
            raise
        except Exception as e:
            # Collaborator failures must not leave the form stuck in LOADING
            logger.error(f"Unexpected error while saving review: {e}", exc_info=True)
            self.last_error_message = messages.REVIEW_SAVE_ERROR
            self.submit_state = SubmitState.failure(messages.REVIEW_SAVE_ERROR)
            self._notify()
            raise

        self._reset_form()
        self.submit_state = SubmitState.success(messages.REVIEW_SAVED)
        self._notify()

        if self.on_review_saved:
            self.on_review_saved()

        return SubmitOutcome.success()

    def _handle_rejected_fields(self, error: ValidationError) -> SubmitOutcome:
        """Map a store-side ValidationError back onto the form."""
        try:
            editor_field = EditorField(error.field)
        except ValueError:
            # Not a form field (e.g. empty user name from the identity provider)
            logger.error(f"Review rejected: {error}")
            self.last_error_message = str(error)
            self.submit_state = SubmitState.failure(str(error))
            self._notify()
            return SubmitOutcome.failure()

        self.field_errors[editor_field] = error.kind.description
        self.submit_state = SubmitState.idle()
        self._notify()
        return SubmitOutcome.validation_failed(editor_field)

    def reset_submit_state(self) -> None:
        """Dismiss a success message. No-op in any other state."""
        if self.submit_state.status is SubmitStatus.SUCCESS:
            self.submit_state = SubmitState.idle()
            self._notify()

    def clear_failure_state(self) -> None:
        """Dismiss a failure message. No-op in any other state."""
        if self.submit_state.status is SubmitStatus.FAILURE:
            self.submit_state = SubmitState.idle()
            self.last_error_message = None
            self._notify()

    def schedule_success_dismiss(self, delay: Optional[float] = None) -> asyncio.Task:
        """
        Reset a success message after a delay. Must be called from a running loop.
        A later submit() or close() cancels the pending dismiss.
        """
        self._cancel_success_dismiss()
        delay = self.success_banner_seconds if delay is None else delay

        async def dismiss():
            await asyncio.sleep(delay)
            self.reset_submit_state()

        self._dismiss_task = asyncio.get_running_loop().create_task(dismiss())
        return self._dismiss_task

    def close(self) -> None:
        """Tear down the workflow: cancel timers and drop listeners."""
        self._cancel_success_dismiss()
        self._listeners.clear()

    def _cancel_success_dismiss(self) -> None:
        if self._dismiss_task and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        self._dismiss_task = None

    def _clear_failure_on_edit(self) -> None:
        if self.submit_state.status is SubmitStatus.FAILURE:
            self.submit_state = SubmitState.idle()

    def _reset_form(self) -> None:
        self.rating = 0
        self.title = ""
        self.place_description = ""
        self.experience = ""
        self.field_errors = {}
        self.truncated_field = None
        self.last_error_message = None

    # ── Observation ────────────────────────────────────────────────

    @property
    def state(self) -> EditorState:
        return EditorState(
            rating=self.rating,
            title=self.title,
            place_description=self.place_description,
            experience=self.experience,
            field_errors=dict(self.field_errors),
            truncated_field=self.truncated_field,
            submit_state=self.submit_state,
            last_error_message=self.last_error_message,
            is_submit_disabled=self.is_submit_disabled
        )

    def subscribe(self, listener: Callable[[EditorState], None]) -> Callable[[], None]:
        """
        Register a listener called with a fresh EditorState after every change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)
