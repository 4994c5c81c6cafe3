"""
Test doubles for the booking automation.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.application.ports.scheduling_automation import SchedulingAutomationPort
from app.application.utils.form_details import validate_notes
from app.application.utils.slot_time import build_selected_slot
from app.domain.entities.booking import BookingRecord, BookingStatus
from app.domain.entities.form_details import FormDetails
from app.domain.entities.selected_slot import SelectedSlot
from app.infrastructure.store.memory_store import MemoryBookingStore


class RecordingStore(MemoryBookingStore):
    """Memory store that remembers every status each booking passed through."""

    def __init__(self) -> None:
        super().__init__()
        self.history: dict[int, list[BookingStatus]] = {}

    def create(self, email: str) -> BookingRecord:
        record = super().create(email)
        self.history[record.id] = [record.status]
        return record

    def update_status(self, booking_id: int, status: BookingStatus) -> BookingRecord:
        record = super().update_status(booking_id, status)
        self.history[booking_id].append(status)
        return record


class FakeSession:
    def __init__(self) -> None:
        self.closed = False


class FakeAutomation(SchedulingAutomationPort):
    """Scripted automation: each step records its call and may raise a configured error."""

    def __init__(
        self,
        *,
        date_label: str = "January 4",
        start_time: str = "2:30pm",
        failures: dict[str, Exception] | None = None,
        open_error: Exception | None = None,
    ) -> None:
        self.date_label = date_label
        self.start_time = start_time
        self.failures = failures or {}
        self.open_error = open_error
        self.calls: list[str] = []
        self.sessions: list[FakeSession] = []

    @asynccontextmanager
    async def _session(self):
        if self.open_error is not None:
            raise self.open_error
        session = FakeSession()
        self.sessions.append(session)
        try:
            yield session
        finally:
            session.closed = True

    def open_session(self):
        return self._session()

    def _step(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    async def navigate(self, session: FakeSession, url: str) -> None:
        self._step("navigate")

    async def select_date(self, session: FakeSession) -> str:
        self._step("select_date")
        return self.date_label

    async def select_time_slot(self, session: FakeSession, date_label: str) -> SelectedSlot:
        self._step("select_time_slot")
        return build_selected_slot(
            date_label, self.start_time, tz=timezone.utc, now=datetime(2030, 1, 1, tzinfo=timezone.utc)
        )

    async def fill_form(self, session: FakeSession, details: FormDetails) -> None:
        self.calls.append("fill_form")
        validate_notes(details.notes)
        self._step("type_fields")

    async def submit(self, session: FakeSession) -> None:
        self._step("submit")


class FakeBrowserSession:
    def __init__(self, page: "FakePage") -> None:
        self.page = page


class FakeLocator:
    """Minimal stand-in for a Playwright locator over a fixed list of elements."""

    def __init__(self, page: "FakePage", selector: str, elements: list[dict[str, str]]) -> None:
        self._page = page
        self._selector = selector
        self._elements = elements

    @property
    def first(self) -> "FakeElement":
        return FakeElement(self._page, self._selector, self._elements[0] if self._elements else None)

    async def count(self) -> int:
        return len(self._elements)

    async def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        await self.first.wait_for(state=state, timeout=timeout)

    async def click(self) -> None:
        await self.first.click()

    async def fill(self, value: str) -> None:
        self._page.actions.append(("fill", self._selector))
        self._page.values[self._selector] = value

    async def focus(self) -> None:
        self._page.actions.append(("focus", self._selector))

    async def press_sequentially(self, text: str) -> None:
        self._page.actions.append(("type", text))

    async def press(self, key: str) -> None:
        self._page.actions.append(("press", key))


class FakeElement:
    def __init__(self, page: "FakePage", selector: str, attrs: dict[str, str] | None) -> None:
        self._page = page
        self._selector = selector
        self._attrs = attrs

    async def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        if self._attrs is None:
            raise PlaywrightTimeoutError(f"Timeout waiting for {self._selector}")

    async def get_attribute(self, name: str) -> str | None:
        return (self._attrs or {}).get(name)

    async def inner_text(self) -> str:
        return (self._attrs or {}).get("text", "")

    async def click(self) -> None:
        self._page.actions.append(("click", self._selector))


class FakePage:
    """
    Page whose locators resolve from a selector -> elements mapping; records every action.

    Role lookups resolve under ``"role:<role>"``, ``has_text`` lookups under
    ``"<selector>:text"`` and text lookups under ``"text"``. ``confirm_url`` is the
    address the page moves to after submitting, if any. ``guest_failures`` makes the
    next N guest acceptance waits time out.
    """

    def __init__(
        self,
        elements: dict[str, list[dict[str, str]]] | None = None,
        *,
        confirm_url: str | None = None,
        guest_failures: int = 0,
    ) -> None:
        self.elements = elements or {}
        self.actions: list[tuple[str, str]] = []
        self.values: dict[str, str] = {}
        self.url = "https://calendly.com/acme/intro"
        self.confirm_url = confirm_url
        self.guest_failures = guest_failures

    def locator(self, selector: str, has_text=None) -> FakeLocator:
        key = f"{selector}:text" if has_text is not None else selector
        return FakeLocator(self, key, self.elements.get(key, []))

    def get_by_role(self, role: str, name=None) -> FakeLocator:
        key = f"role:{role}"
        return FakeLocator(self, key, self.elements.get(key, []))

    def get_by_text(self, text) -> FakeLocator:
        return FakeLocator(self, "text", self.elements.get("text", []))

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> None:
        self.actions.append(("wait_for_selector", selector))

    async def fill(self, selector: str, value: str) -> None:
        self.actions.append(("fill", selector))
        self.values[selector] = value

    async def wait_for_url(self, url, timeout: float | None = None) -> None:
        if self.confirm_url is None:
            raise PlaywrightTimeoutError("Timeout waiting for navigation")
        self.url = self.confirm_url

    async def wait_for_function(self, expression: str, arg=None, timeout: float | None = None) -> None:
        self.actions.append(("wait_for_function", arg[-1]))
        if self.guest_failures > 0:
            self.guest_failures -= 1
            raise PlaywrightTimeoutError("Guest was not accepted")
