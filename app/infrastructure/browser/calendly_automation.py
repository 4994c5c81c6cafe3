from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Awaitable, Callable, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.application.exceptions import (
    BookingNotConfirmedError,
    ElementNotFoundError,
    NoSlotsAvailableError,
)
from app.application.ports.scheduling_automation import SchedulingAutomationPort
from app.application.utils.form_details import validate_notes
from app.application.utils.retry import retry_async
from app.application.utils.slot_time import build_selected_slot, extract_date_fragment
from app.domain.entities.form_details import FormDetails
from app.domain.entities.selected_slot import SelectedSlot
from app.infrastructure.browser import selectors
from app.infrastructure.browser.session import BrowserSession

T = TypeVar("T")

TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    PlaywrightTimeoutError,
    PlaywrightError,
    ElementNotFoundError,
)


class CalendlyAutomation(SchedulingAutomationPort):
    def __init__(
        self,
        *,
        headless: bool = True,
        timeout: float = 30.0,
        viewport: tuple[int, int] = (1280, 800),
        retries: int = 3,
        retry_delay: float = 1.0,
        confirmation_timeout: float = 10.0,
        require_confirmation: bool = True,
        timezone: tzinfo | None = None,
    ) -> None:
        self._headless = headless
        self._timeout = timeout
        self._viewport = viewport
        self._retries = retries
        self._retry_delay = retry_delay
        self._confirmation_timeout = confirmation_timeout
        self._require_confirmation = require_confirmation
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def open_session(self) -> BrowserSession:
        return BrowserSession(headless=self._headless, timeout=self._timeout, viewport=self._viewport)

    async def navigate(self, session: BrowserSession, url: str) -> None:
        page = session.page
        self._logger.info("Navigating to scheduling page", extra={"url": url})
        await page.goto(url, wait_until="commit")
        await page.wait_for_load_state("networkidle")

    async def select_date(self, session: BrowserSession) -> str:
        page = session.page
        self._logger.info("Looking for first available date", extra={"step": "select_date"})
        first_date = await self._first_or_no_slots(page.locator(selectors.AVAILABLE_DATE), "date")

        date_label = extract_date_fragment(await first_date.get_attribute("aria-label") or "")
        await self._retry(first_date.click, "click_date")
        return date_label

    async def select_time_slot(self, session: BrowserSession, date_label: str) -> SelectedSlot:
        page = session.page
        self._logger.info("Looking for first available time", extra={"step": "select_time_slot"})
        first_slot = await self._first_or_no_slots(page.locator(selectors.TIME_SLOT), "time slot")

        # The button's attributes change once clicked.
        start_time = await first_slot.get_attribute(selectors.TIME_SLOT_START_ATTR)
        if not start_time:
            start_time = (await first_slot.inner_text()).strip()
        slot = build_selected_slot(date_label, start_time, tz=self._timezone)

        await self._retry(first_slot.click, "click_time_slot")
        await self._retry(lambda: self._click(page.locator(selectors.NEXT_BUTTON).first), "click_next")
        return slot

    async def fill_form(self, session: BrowserSession, details: FormDetails) -> None:
        validate_notes(details.notes)

        page = session.page
        self._logger.info("Filling booking form", extra={"step": "fill_form"})
        await page.wait_for_selector(selectors.FORM)
        await page.fill(selectors.NAME_INPUT, details.name)
        await page.fill(selectors.EMAIL_INPUT, details.email)

        if details.guest_emails:
            self._logger.info("Adding guests", extra={"step": "add_guests"})
            await self._retry(lambda: self._click_add_guests(page), "click_add_guests")
            for guest_email in details.guest_emails:
                await self._retry(lambda email=guest_email: self._add_guest(page, email), "add_guest")

        if details.notes and details.notes.strip():
            notes = details.notes
            self._logger.info("Adding notes", extra={"step": "add_notes"})
            await self._retry(lambda: self._fill_notes(page, notes), "fill_notes")

    async def submit(self, session: BrowserSession) -> None:
        page = session.page
        self._logger.info("Submitting booking form", extra={"step": "submit"})
        await self._retry(lambda: self._click(page.locator(selectors.SUBMIT_BUTTON).first), "click_submit")
        await self._await_confirmation(page)

    async def _await_confirmation(self, page: Page) -> None:
        timeout_ms = self._confirmation_timeout * 1000
        try:
            await page.wait_for_url(selectors.CONFIRMATION_URL, timeout=timeout_ms)
            self._logger.info("Confirmation page reached", extra={"url": page.url})
            return
        except PlaywrightTimeoutError:
            self._logger.info("No post-submit navigation, checking the page for a confirmation")

        try:
            await page.get_by_text(selectors.CONFIRMATION_TEXT).first.wait_for(
                state="visible", timeout=timeout_ms
            )
            self._logger.info("In-page confirmation found")
        except PlaywrightTimeoutError as e:
            if self._require_confirmation:
                raise BookingNotConfirmedError(
                    "Form was submitted but no confirmation appeared"
                ) from e
            self._logger.warning("Form submitted without a visible confirmation")

    async def _first_or_no_slots(self, candidates: Locator, kind: str) -> Locator:
        try:
            await candidates.first.wait_for(state="visible")
        except PlaywrightTimeoutError as e:
            raise NoSlotsAvailableError(f"No available {kind} found") from e
        if await candidates.count() == 0:
            raise NoSlotsAvailableError(f"No available {kind} found")
        return candidates.first

    async def _click(self, target: Locator) -> None:
        await target.wait_for(state="visible")
        await target.click()

    async def _click_add_guests(self, page: Page) -> None:
        button = page.get_by_role("button", name=selectors.ADD_GUESTS_TEXT)
        if await button.count() == 0:
            button = page.locator("button", has_text=selectors.ADD_GUESTS_TEXT)
            if await button.count() == 0:
                raise ElementNotFoundError("Add Guests button not found")
        await button.first.click()

    async def _add_guest(self, page: Page, email: str) -> None:
        guest_input = page.locator(selectors.GUEST_INPUT)
        await guest_input.wait_for(state="visible")
        await guest_input.fill("")
        await guest_input.focus()
        await guest_input.press_sequentially(email)
        await guest_input.press("Enter")
        await page.wait_for_function(
            selectors.GUEST_ACCEPTED_JS,
            arg=[selectors.GUEST_INPUT, selectors.ADDED_GUEST, email],
            timeout=self._confirmation_timeout * 1000,
        )

    async def _fill_notes(self, page: Page, notes: str) -> None:
        notes_input = page.locator(selectors.NOTES_TEXTAREA)
        await notes_input.wait_for(state="visible")
        await notes_input.fill(notes)

    async def _retry(self, action: Callable[[], Awaitable[T]], label: str) -> T:
        return await retry_async(
            action,
            retries=self._retries,
            delay=self._retry_delay,
            retry_on=TRANSIENT_EXCEPTIONS,
            label=label,
        )
