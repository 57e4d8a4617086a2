"""
Protofolio — Catalog Controller
=================================

What:  Display state for the prototype catalog: the last fetched list, the
       filter inputs, the edit/detail modal state machine, the busy flag and
       the notification queue.
Why:   The browser page is a thin renderer over this object; all decisions
       about when to fetch, what to show and which modal is open live here.
How:   Every store call goes through RecordsClient. The item list is only
       ever replaced wholesale after a successful list call.

Modal state machine:
    CLOSED ──open_add()──────────▶ EDIT (editing_id=None, "create")
    CLOSED/DETAIL ──open_edit(id)─▶ EDIT (editing_id=id)
    any ──open_detail(id)────────▶ DETAIL (editing_id=id)
    EDIT ──close_modal()─────────▶ CLOSED
    DETAIL ──close_detail()──────▶ CLOSED
    any ──Escape─────────────────▶ CLOSED
    Only one modal is open at a time.

Known inconsistency:
    Overlapping refreshes are not de-duplicated or cancelled. If an earlier,
    slower list request finishes after a later one, its (stale) result wins.
"""

import inspect
import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Union

from protofolio.client.api import ApiError, RecordId, RecordsClient
from protofolio.links import is_valid_external_url, to_embed_url
from protofolio.schemas.record import CATEGORY_DISPLAY_NAMES, Category, RecordResponse

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = (
    "Are you sure you want to delete this prototype? This action cannot be undone."
)
NO_DESCRIPTION = "No description provided."

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]


class ModalState(str, Enum):
    CLOSED = "closed"
    EDIT = "edit"
    DETAIL = "detail"


class EmptyState(str, Enum):
    NONE = "none"
    NO_RECORDS = "no_records"
    NO_MATCHES = "no_matches"


EMPTY_STATE_MESSAGES: Dict[EmptyState, tuple] = {
    EmptyState.NO_RECORDS: (
        "No prototypes yet",
        "Start building your design portfolio by adding your first Figma prototype!",
    ),
    EmptyState.NO_MATCHES: (
        "No matching prototypes",
        "Try adjusting your search or filter criteria.",
    ),
}


@dataclass
class RecordForm:
    """Values of the add/edit form, as typed."""

    title: str = ""
    description: str = ""
    external_url: str = ""
    category: str = Category.OTHER.value
    tags: str = ""

    @classmethod
    def from_record(cls, record: RecordResponse) -> "RecordForm":
        return cls(
            title=record.title,
            description=record.description or "",
            external_url=record.external_url,
            category=record.category.value,
            tags=", ".join(record.tags),
        )

    def to_payload(self) -> Dict[str, str]:
        return {
            "title": self.title.strip(),
            "description": self.description.strip(),
            "externalUrl": self.external_url.strip(),
            "category": self.category,
            "tags": self.tags,
        }


@dataclass(frozen=True)
class RecordCard:
    """Render-ready view of one record (grid card or detail view)."""

    id: str
    title: str
    description: str
    category_label: str
    created_on: str
    tags: List[str]
    embed_url: str

    @classmethod
    def from_record(cls, record: RecordResponse) -> "RecordCard":
        return cls(
            id=str(record.id),
            title=record.title,
            description=record.description or NO_DESCRIPTION,
            category_label=CATEGORY_DISPLAY_NAMES.get(record.category, str(record.category)),
            created_on=record.created_at.date().isoformat(),
            tags=list(record.tags),
            embed_url=to_embed_url(record.external_url),
        )


@dataclass
class Notification:
    id: int
    message: str
    kind: str  # "error" | "success" | "info"
    created_at: float


@dataclass
class CatalogController:
    """
    One instance per open catalog page; owns no connection itself.

    Args:
        api:      RecordsClient (or any object with the same coroutine methods)
        confirm:  Asked before deleting; returns (or resolves to) True to proceed
        notification_ttl:  Seconds a notification stays visible
        clock:    Time source for notification expiry
    """

    api: RecordsClient
    confirm: ConfirmCallback
    notification_ttl: float = 5.0
    clock: Callable[[], float] = time.monotonic

    items: List[RecordResponse] = field(default_factory=list)
    cards: List[RecordCard] = field(default_factory=list)
    empty_state: EmptyState = EmptyState.NO_RECORDS

    search: str = ""
    category: str = ""
    sort_by: str = "newest"

    modal: ModalState = ModalState.CLOSED
    editing_id: Optional[str] = None
    form: RecordForm = field(default_factory=RecordForm)
    detail: Optional[RecordCard] = None

    busy: bool = False
    notifications: List[Notification] = field(default_factory=list)
    _notification_ids: itertools.count = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    # ── Store interaction ─────────────────────────────────────────────────

    async def start(self) -> None:
        """Initial load."""
        await self.refresh()

    async def refresh(self) -> bool:
        """
        Fetch the list for the current filter values and replace `items`.

        On failure the previous list stays on screen and an error notification
        is queued. Returns True if the list was replaced.
        """
        try:
            items = await self.api.list_records(
                search=self.search or None,
                category=self.category or None,
                sort_by=self.sort_by or None,
            )
        except ApiError as e:
            logger.error("Error loading prototypes: %s", e.message)
            self.notify(e.message, "error")
            return False

        self.items = items
        self.cards = [RecordCard.from_record(item) for item in items]
        self.empty_state = await self._compute_empty_state()
        return True

    async def set_filters(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> bool:
        """Update any of the filter inputs, then refresh."""
        if search is not None:
            self.search = search
        if category is not None:
            self.category = category
        if sort_by is not None:
            self.sort_by = sort_by
        return await self.refresh()

    async def submit(self, form: Optional[RecordForm] = None) -> bool:
        """
        Create (no editing_id) or update (editing_id set) from the form.
        Does nothing unless the edit form is open.

        Required fields and the link shape are checked locally first, so an
        obviously bad form never reaches the server. Server rejections are
        shown verbatim and keep the form open.
        """
        if self.modal is not ModalState.EDIT:
            return False
        if form is not None:
            self.form = form
        payload = self.form.to_payload()

        if not payload["title"] or not payload["externalUrl"]:
            self.notify("Please fill in all required fields.", "error")
            return False
        if not is_valid_external_url(payload["externalUrl"]):
            self.notify("Please enter a valid Figma URL.", "error")
            return False

        editing_id = self.editing_id
        self.busy = True
        try:
            if editing_id:
                await self.api.update_record(editing_id, payload)
            else:
                await self.api.create_record(payload)
        except ApiError as e:
            logger.error("Error saving prototype: %s", e.message)
            self.notify(e.message, "error")
            return False
        finally:
            self.busy = False

        await self.refresh()
        self.notify(
            "Prototype updated successfully!" if editing_id else "Prototype added successfully!",
            "success",
        )
        self.close_modal()
        return True

    async def request_delete(self, record_id: RecordId) -> bool:
        """
        Delete after interactive confirmation.

        Declining is silent. On success the list is reloaded and a detail view
        showing the deleted record is closed.
        """
        record_id = str(record_id)
        answer = self.confirm(DELETE_CONFIRMATION)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            return False

        self.busy = True
        try:
            await self.api.delete_record(record_id)
        except ApiError as e:
            logger.error("Error deleting prototype: %s", e.message)
            self.notify(e.message, "error")
            return False
        finally:
            self.busy = False

        await self.refresh()
        if self.modal is ModalState.DETAIL and self.editing_id == record_id:
            self.close_detail()
        self.notify("Prototype deleted successfully!", "success")
        return True

    # ── Modal state machine ───────────────────────────────────────────────

    def open_add(self) -> None:
        self.editing_id = None
        self.detail = None
        self.form = RecordForm()
        self.modal = ModalState.EDIT

    def open_edit(self, record_id: RecordId) -> bool:
        """Prefill the form from `items` (no fetch). Not allowed while editing."""
        if self.modal is ModalState.EDIT:
            return False
        record = self._find(record_id)
        if record is None:
            return False
        self.editing_id = str(record.id)
        self.detail = None
        self.form = RecordForm.from_record(record)
        self.modal = ModalState.EDIT
        return True

    def close_modal(self) -> None:
        if self.modal is ModalState.EDIT:
            self.modal = ModalState.CLOSED
            self.editing_id = None

    def open_detail(self, record_id: RecordId) -> bool:
        record = self._find(record_id)
        if record is None:
            return False
        self.editing_id = str(record.id)
        self.detail = RecordCard.from_record(record)
        self.modal = ModalState.DETAIL
        return True

    def close_detail(self) -> None:
        if self.modal is ModalState.DETAIL:
            self.modal = ModalState.CLOSED
            self.editing_id = None
            self.detail = None

    def close_all(self) -> None:
        self.modal = ModalState.CLOSED
        self.editing_id = None
        self.detail = None

    def handle_key(self, key: str) -> None:
        if key == "Escape":
            self.close_all()

    def edit_current(self) -> bool:
        """Detail view's "Edit" button: switch to the form for the same record."""
        if self.modal is not ModalState.DETAIL or not self.editing_id:
            return False
        record_id = self.editing_id
        self.close_detail()
        return self.open_edit(record_id)

    async def delete_current(self) -> bool:
        """Detail view's "Delete" button."""
        if not self.editing_id:
            return False
        return await self.request_delete(self.editing_id)

    # ── Notifications ─────────────────────────────────────────────────────

    def notify(self, message: str, kind: str = "info") -> Notification:
        notification = Notification(
            id=next(self._notification_ids),
            message=message,
            kind=kind,
            created_at=self.clock(),
        )
        self.notifications.append(notification)
        return notification

    def dismiss(self, notification_id: int) -> None:
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    def visible_notifications(self) -> List[Notification]:
        """Drop expired notifications and return the rest, oldest first."""
        now = self.clock()
        self.notifications = [
            n for n in self.notifications if now - n.created_at < self.notification_ttl
        ]
        return list(self.notifications)

    # ── Helpers ───────────────────────────────────────────────────────────

    @property
    def empty_state_message(self) -> Optional[tuple]:
        return EMPTY_STATE_MESSAGES.get(self.empty_state)

    def _find(self, record_id: RecordId) -> Optional[RecordResponse]:
        wanted = str(record_id)
        return next((item for item in self.items if str(item.id) == wanted), None)

    async def _compute_empty_state(self) -> EmptyState:
        if self.items:
            return EmptyState.NONE
        # Only filters that narrow the result set can hide existing records
        if not (self.search or self.category):
            return EmptyState.NO_RECORDS
        try:
            unfiltered = await self.api.list_records()
        except ApiError as e:
            logger.warning("Could not check for unfiltered records: %s", e.message)
            return EmptyState.NO_MATCHES
        return EmptyState.NO_MATCHES if unfiltered else EmptyState.NO_RECORDS
