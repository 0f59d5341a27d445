"""Base query interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..checker import Checker

T = TypeVar("T")


class Query(ABC, Generic[T]):
    """Base query interface.

    All queries take a checker and execute against it.
    """

    def __init__(self, checker: Checker):
        self.checker = checker

    @abstractmethod
    def execute(self, **params) -> T:
        """Execute the query and return typed result."""
        pass
