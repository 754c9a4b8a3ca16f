import logging

from leave_sheets.services.sheets_client import TabularStore


class BaseService:
    """
    Common plumbing for the sheet-backed services.
    Services keep no entity cache: each call re-reads the sheets it needs.
    """

    def __init__(self, store: TabularStore):
        self.store = store
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_info(self, message: str) -> None:
        self._logger.info(message)

    def log_warning(self, message: str) -> None:
        self._logger.warning(message)
