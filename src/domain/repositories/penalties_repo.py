from abc import ABC, abstractmethod

from src.domain.entities import Penalty


class PenaltiesRepo(ABC):
    @abstractmethod
    def list_all(self) -> list[Penalty]:
        """
        Return every penalty in the store, most recently created first.

        Example:
            >>> repo.list_all()
            [Penalty(id="p1", match_id="m1", club_name="Arkonia", games=2, ...)]

        :return: List of Penalty entities.
        """

    @abstractmethod
    def list_for_match(self, match_id: str) -> list[Penalty]:
        """
        Penalties issued during one match.

        :param match_id: Identifier of the trigger match.
        :return: List of Penalty entities, possibly empty.
        """
