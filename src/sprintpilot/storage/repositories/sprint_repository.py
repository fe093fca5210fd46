from contextlib import contextmanager
from typing import Iterator, List, Optional
import logging
import threading

from pydantic import TypeAdapter

from sprintpilot.domain.models import MasterHoliday, SprintData
from sprintpilot.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

CURRENT_SPRINT_KEY = "current_sprint"
MASTER_HOLIDAYS_KEY = "master_holidays"
SPRINT_HISTORY_KEY = "sprint_history"

_holiday_list = TypeAdapter(List[MasterHoliday])
_sprint_list = TypeAdapter(List[SprintData])

# Shared by every repository instance; services are built per request
_write_lock = threading.RLock()


class SprintRepository:
    """Typed access to the sprint documents held in a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @contextmanager
    def locked(self) -> Iterator[None]:
        """
        Serialize a load-modify-save sequence against other writers in this process.
        """
        with _write_lock:
            yield

    # --- Current sprint ---

    def get_current_sprint(self) -> Optional[SprintData]:
        raw = self.store.load(CURRENT_SPRINT_KEY)
        if raw is None:
            return None
        return SprintData.model_validate(raw)

    def save_current_sprint(self, sprint: Optional[SprintData]) -> None:
        if sprint is None:
            self.store.delete(CURRENT_SPRINT_KEY)
            return
        self.store.save(CURRENT_SPRINT_KEY, sprint.model_dump(mode="json"))

    # --- Master holidays ---

    def get_master_holidays(self) -> Optional[List[MasterHoliday]]:
        """Stored master list, or None if it has never been saved."""
        raw = self.store.load(MASTER_HOLIDAYS_KEY)
        if raw is None:
            return None
        return _holiday_list.validate_python(raw)

    def save_master_holidays(self, holidays: List[MasterHoliday]) -> None:
        self.store.save(MASTER_HOLIDAYS_KEY, _holiday_list.dump_python(holidays, mode="json"))

    # --- History ---

    def get_history(self) -> List[SprintData]:
        raw = self.store.load(SPRINT_HISTORY_KEY)
        if raw is None:
            return []
        return _sprint_list.validate_python(raw)

    def save_history(self, history: List[SprintData]) -> None:
        self.store.save(SPRINT_HISTORY_KEY, _sprint_list.dump_python(history, mode="json"))

    def get_archived_sprint(self, sprint_id: str) -> Optional[SprintData]:
        return next((s for s in self.get_history() if s.id == sprint_id), None)

    def archive_sprint(self, sprint: SprintData) -> List[SprintData]:
        with self.locked():
            history = self.get_history()
            history.append(sprint)
            self.save_history(history)
        logger.info(f"Archived sprint {sprint.id} ({len(history)} in history)")
        return history
