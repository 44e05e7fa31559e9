"""
Learning Locker progress client.

    client = LockerClient.from_files("config/locker.yaml", "config/modules.json")
    summaries = client.progress("alice")     # one learner
    reports = client.mentor()                # every learner seen in the store

Each call owns its accumulators; nothing is carried between calls, and any
error discards whatever had been gathered so far.
"""

from pathlib import Path
from typing import Dict, List, Optional

from .aggregate import summarize
from .catalog import ModuleCatalog
from .config import LockerConfig, load_config
from .errors import LLProgressError
from .logger import StructuredLogger, get_logger
from .paginator import Fetch, iter_pages
from .parser import parse_mentor, parse_progress
from .schema import LearnerReport, ProgressFact, ProgressSummary
from .transport import Transport, auth_headers


class LockerClient:

    def __init__(
        self,
        config: LockerConfig,
        catalog: ModuleCatalog,
        fetch: Optional[Fetch] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            config: Connection settings and credentials
            catalog: Known modules, used to back-fill zero progress
            fetch: Transport callable (default: a requests-backed Transport)
            logger: Logger for messages and metrics (default: global logger)
        """
        self.config = config
        self.catalog = catalog
        self.logger = logger or get_logger()
        self._transport: Optional[Transport] = None
        if fetch is None:
            self._transport = Transport(timeout=config.timeout, logger=self.logger)
            fetch = self._transport.get
        self.fetch = fetch

    @classmethod
    def from_files(cls, config_path: Path, modules_path: Path, **kwargs) -> "LockerClient":
        """Build a client from a YAML config file and a module catalog file.

        Raises:
            ConfigError: Config unreadable/invalid or credentials missing
            CatalogError: Catalog unreadable/invalid
        """
        config = load_config(Path(config_path))
        catalog = ModuleCatalog.load(Path(modules_path))
        return cls(config, catalog, **kwargs)

    def __enter__(self) -> "LockerClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()

    def progress_url(self, username: str) -> str:
        return self.config.progress_url(username)

    def mentor_url(self) -> str:
        return self.config.mentor_url()

    def _headers(self) -> Dict[str, str]:
        return auth_headers(self.config.api_key, self.config.api_secret, self.config.api_version)

    def _pages(self, start_url: str):
        return iter_pages(self.fetch, start_url, self._headers(), self.config.cursor_url, self.logger)

    def progress(self, username: str) -> List[ProgressSummary]:
        """Return one learner's per-module progress, including untouched modules."""
        facts: List[ProgressFact] = []
        self.logger.info(f"Fetching progress for {username}")
        try:
            for page in self._pages(self.progress_url(username)):
                facts = parse_progress(page.statements, facts, self.logger)
        except LLProgressError as e:
            self.logger.record_error(type(e).__name__)
            self.logger.error("Progress request failed", username=username, error=str(e))
            raise

        summaries = summarize(facts, self.catalog)
        self.logger.info(f"Progress for {username}: {len(facts)} facts, {len(summaries)} modules")
        return summaries

    def mentor(self) -> Dict[str, LearnerReport]:
        """Return a report for every learner that appears in the statement store."""
        learners: Dict[str, List[ProgressFact]] = {}
        self.logger.info("Fetching progress for all learners")
        try:
            for page in self._pages(self.mentor_url()):
                learners = parse_mentor(page.statements, learners, self.logger)
        except LLProgressError as e:
            self.logger.record_error(type(e).__name__)
            self.logger.error("Mentor request failed", error=str(e))
            raise

        reports = {
            username: LearnerReport(username=username, progress=summarize(facts, self.catalog))
            for username, facts in learners.items()
        }
        self.logger.info(f"Mentor report: {len(reports)} learners")
        return reports
