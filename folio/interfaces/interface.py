"""
Main interface for Folio users.
"""
import logging
from pathlib import Path
from typing import Callable, Optional

from ..auth.gate import AuthGate
from ..editing.session import CommitPolicy, EditSession
from ..personal.models import PortfolioModel
from ..storage.backends import JsonFileStorage, KeyValueStorage, MemoryStorage
from ..storage.json_store import PortfolioStore
from ..storage.preferences import Theme, ThemePreference
from ..utils.config import Config

logger = logging.getLogger(__name__)


class EditingNotAuthorizedError(PermissionError):
    """The content manager was opened without signing in."""


class Folio:
    """Wires the portfolio store, auth gate and theme preference together."""

    def __init__(
        self,
        storage_path: Optional[str] = None,
        config: Optional[Config] = None,
        commit_policy: Optional[CommitPolicy] = None,
        session_storage: Optional[KeyValueStorage] = None
    ):
        """Initialize Folio and load the saved portfolio.

        Args:
            storage_path: Optional directory for persisted data. Defaults to the configured storage_dir
            config: Optional configuration; a default Config is used if omitted
            commit_policy: Optional override of the configured commit policy
            session_storage: Optional session-scoped storage for the sign-in marker
        """
        self.config = config or Config()
        if storage_path is None:
            storage_path = self.config.storage_dir

        self._local = JsonFileStorage(storage_path)
        self._session = session_storage or MemoryStorage()
        self.commit_policy = CommitPolicy(commit_policy or self.config.commit_policy)

        self.store = PortfolioStore(self._local)
        self.auth = AuthGate(self._local, self._session)
        self.theme = ThemePreference(self._local, default=Theme(self.config.default_theme))

        self.store.load()
        logger.info("Portfolio loaded from %s (%s)", Path(storage_path), self.store.load_status.value)

    @property
    def data(self) -> PortfolioModel:
        """The committed portfolio, for rendering."""
        return self.store.current

    def subscribe(self, listener: Callable[[PortfolioModel], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def open_editor(self, policy: Optional[CommitPolicy] = None) -> EditSession:
        """Open an edit session on the committed portfolio.

        Raises:
            EditingNotAuthorizedError: if no admin is signed in
        """
        if not self.auth.is_authenticated:
            raise EditingNotAuthorizedError("Sign in to edit the portfolio")
        return EditSession(self.store, policy=policy or self.commit_policy)

    def backup(self, backup_dir: Optional[str] = None) -> Path:
        return self.store.backup(backup_dir or self.config.backup_dir, self.config.max_backups)

    def restore_from_backup(self, backup_dir: str) -> PortfolioModel:
        return self.store.restore_from_backup(backup_dir)
