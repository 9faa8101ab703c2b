# sqlitekit/acceptance_tests/drivers/database_driver.py
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Sequence
import logging

logger = logging.getLogger(__name__)

class DatabaseDriver(ABC):
    @abstractmethod
    def create_table(self, table_name: str, contents: str):
        pass

    @abstractmethod
    def create(self, table_name: str, data: List[Dict[str, Any]]) -> List[int]:
        pass

    @abstractmethod
    def read(self, table_name: str, wheres: Sequence[Sequence[Any]] = (), orders: Sequence[Sequence[Any]] = ()) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def update(self, table_name: str, id: int, data: Dict[str, Any]) -> int:
        pass

    @abstractmethod
    def delete(self, table_name: str, id: int) -> int:
        pass
