from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any

from app.domain.entities.form_details import FormDetails
from app.domain.entities.selected_slot import SelectedSlot


class SchedulingAutomationPort(ABC):
    """
    The only boundary that knows the scheduling site's markup.

    Every step receives the session yielded by ``open_session`` explicitly;
    implementations keep no per-booking state of their own.
    """

    @abstractmethod
    def open_session(self) -> AbstractAsyncContextManager[Any]:
        """Return a context manager owning a fresh, isolated browser session."""
        raise NotImplementedError

    @abstractmethod
    async def navigate(self, session: Any, url: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def select_date(self, session: Any) -> str:
        """Click the first available date. Returns its date fragment, e.g. "January 4"."""
        raise NotImplementedError

    @abstractmethod
    async def select_time_slot(self, session: Any, date_label: str) -> SelectedSlot:
        """Click the first available time on the selected date and move on to the form."""
        raise NotImplementedError

    @abstractmethod
    async def fill_form(self, session: Any, details: FormDetails) -> None:
        raise NotImplementedError

    @abstractmethod
    async def submit(self, session: Any) -> None:
        """Submit the form and wait for the booking to be confirmed."""
        raise NotImplementedError
