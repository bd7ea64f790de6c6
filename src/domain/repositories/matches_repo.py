from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Match


class MatchesRepo(ABC):
    @abstractmethod
    def list_all(self) -> list[Match]:
        """
        Return every match in the store, newest first.

        Example:
            >>> repo.list_all()
            [Match(id="m2", ...), Match(id="m1", ...)]

        :return: List of Match entities.
        """

    @abstractmethod
    def get_by_id(self, match_id: str) -> Optional[Match]:
        """
        Fetch a match by its unique ID.

        Example:
            >>> repo.get_by_id("m1")
            Match(id="m1", home="Arkonia", away="Polonia", ...)

        :param match_id: Unique identifier of the match.
        :return: Match object if found, otherwise None.
        """
