"""Transient-versus-fatal failure classification."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from live_element.core.errors import TransientNotReadyError


class Failure(str, Enum):
    TRANSIENT = "transient"
    FATAL = "fatal"


class FailureClassifier(Protocol):
    """Decides whether an error means "not ready yet" or "abort now"."""

    def classify(self, exc: BaseException) -> Failure: ...


class TypeClassifier:
    """Classify by exception type.

    *transient* types are retried; *fatal* types win over *transient* ones
    so a narrow fatal subclass can be carved out of a broad transient base.
    """

    def __init__(
        self,
        transient: tuple[type[BaseException], ...] = (),
        fatal: tuple[type[BaseException], ...] = (),
    ):
        self.transient = (TransientNotReadyError, IndexError, *transient)
        self.fatal = tuple(fatal)

    def classify(self, exc: BaseException) -> Failure:
        if self.fatal and isinstance(exc, self.fatal):
            return Failure.FATAL
        if isinstance(exc, self.transient):
            return Failure.TRANSIENT
        return Failure.FATAL


def is_transient(classifier: FailureClassifier, exc: BaseException) -> bool:
    return classifier.classify(exc) is Failure.TRANSIENT
