"""Base collector class and interfaces"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class BaseCollector(ABC):
    """Base class for metric collectors served on a scrape endpoint"""

    def __init__(self, config=None, name: str = "", help_text: str = ""):
        self.config = config
        self._name = name
        self._help_text = help_text

    @abstractmethod
    def collect(self) -> bytes:
        """Run one collection cycle and return the rendered exposition"""
        pass

    @property
    def name(self) -> str:
        """Collector name for identification"""
        return self._name

    @property
    def help_text(self) -> str:
        """Help text describing what this collector does"""
        return self._help_text or f"{self.name} metrics collector"

    def get_status(self) -> Dict[str, Any]:
        """Status information for the landing page and health endpoint"""
        return {
            "name": self.name,
            "class": self.__class__.__name__,
            "help": self.help_text,
        }

    def cleanup(self):
        """Cleanup resources"""
        pass
