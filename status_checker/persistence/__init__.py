"""Persistence helpers for check results."""

from status_checker.persistence.status_file import save_results, write_status_file

__all__ = ["save_results", "write_status_file"]
