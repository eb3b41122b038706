"""Audit trail of real deletions, sent to the system log."""

from __future__ import annotations

import getpass
import logging
import logging.handlers
import os
from enum import Enum

AUDIT_LOGGER_NAME = "better_rm.audit"
SYSLOG_SOCKET = "/dev/log"


class AuditAction(str, Enum):
    """Kind of mutation being audited."""

    DELETE = "DELETE"
    DELETE_DIR = "DELETE_DIR"
    TRASH = "TRASH"
    TRASH_DIR = "TRASH_DIR"

    @classmethod
    def for_entry(cls, use_trash: bool, directory: bool) -> AuditAction:
        if use_trash:
            return cls.TRASH_DIR if directory else cls.TRASH
        return cls.DELETE_DIR if directory else cls.DELETE


def _acting_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class AuditLog:
    """
    One-way notifications for every real deletion or trash move.

    Records are plain log messages on the ``better_rm.audit`` logger so the
    destination (syslog, a file, a test capture) is decided by handler setup.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)
        self.user = _acting_user()
        self.uid = os.getuid() if hasattr(os, "getuid") else -1

    def record(
        self,
        action: AuditAction,
        path: str,
        success: bool,
        error: str | None = None,
    ) -> None:
        if success:
            self.logger.info(
                "%s: %s (user: %s, uid: %d)", action.value, path, self.user, self.uid
            )
        else:
            self.logger.warning(
                "%s FAILED: %s (user: %s, uid: %d, error: %s)",
                action.value,
                path,
                self.user,
                self.uid,
                error or "unknown error",
            )


def configure_audit_logging(address: str = SYSLOG_SOCKET) -> logging.Logger:
    """
    Attach a syslog handler to the audit logger.

    Without a syslog socket the records are dropped by a NullHandler.
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    if logger.handlers:
        return logger

    handler: logging.Handler
    if os.path.exists(address):
        try:
            handler = logging.handlers.SysLogHandler(
                address=address,
                facility=logging.handlers.SysLogHandler.LOG_USER,
            )
            handler.ident = "better-rm: "
            handler.setFormatter(logging.Formatter("[%(process)d] %(message)s"))
        except OSError:
            handler = logging.NullHandler()
    else:
        handler = logging.NullHandler()

    logger.addHandler(handler)
    return logger
