"""Pagination and history defaults shared by the service and the controller."""

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
DEFAULT_HISTORY_DAYS = 30
END_OF_DAY_MICROSECOND = 999000
