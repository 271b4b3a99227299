# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Presentation hook for fatal configuration errors."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    """Anything able to show an alert to the user."""

    def alert(self, message: str, title: str) -> None: ...


class LogPresenter:
    """Default presenter: alerts go to the log at ERROR level."""

    def alert(self, message: str, title: str) -> None:
        logger.error("%s: %s", title, message)


__all__ = ["Presenter", "LogPresenter"]
