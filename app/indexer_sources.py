"""
Indexer mirror sets for the console
Fetches the installed indexers with their primary and legacy links from the backend
"""

import logging
from typing import Dict, List, Optional

import requests

from constants import LOCAL_INDEXERS_ENDPOINT
from exceptions import IndexerCatalogException
from mirrors import MirrorOption, resolve

logger = logging.getLogger("main")


class IndexerMirrorSet:
    """Primary and legacy links of a single indexer"""

    def __init__(self, indexer_id: str, primary_links: List[str] = None, legacy_links: List[str] = None, name: str = None):
        self.indexer_id = indexer_id
        self.name = name or indexer_id
        self.primary_links = list(primary_links or [])
        self.legacy_links = list(legacy_links or [])

    def options(self) -> List[MirrorOption]:
        return resolve(self.primary_links, self.legacy_links)

    def base_url(self, global_index: int = 0) -> Optional[str]:
        """URL of the chosen mirror, the default one when the index does not fit"""
        options = self.options()
        if not options:
            return None
        if not 0 <= global_index < len(options):
            logger.debug(f"Mirror {global_index} unknown for {self.indexer_id}, using default")
            global_index = 0
        return options[global_index].url

    def to_dict(self) -> Dict:
        return {
            "id": self.indexer_id,
            "name": self.name,
            "links": list(self.primary_links),
            "legacylinks": list(self.legacy_links),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "IndexerMirrorSet":
        """Create from the backend's indexer entry"""
        return cls(
            indexer_id=data["id"],
            name=data.get("name"),
            primary_links=data.get("links") or [],
            legacy_links=data.get("legacylinks") or [],
        )

    def __repr__(self):
        return f"IndexerMirrorSet({self.indexer_id!r}, links={len(self.primary_links)}, legacy={len(self.legacy_links)})"


class IndexerCatalog:
    """Installed indexers as reported by the backend"""

    def __init__(self, base_url: str, timeout: int = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.indexers: List[IndexerMirrorSet] = []

    def fetch(self) -> List[IndexerMirrorSet]:
        """
        Fetch the local indexer list

        Returns:
            List of mirror sets, in the order the backend reports them
        """
        url = f"{self.base_url}{LOCAL_INDEXERS_ENDPOINT}"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise IndexerCatalogException(f"Failed to fetch indexers from {url}: {e}")
        except ValueError as e:
            raise IndexerCatalogException(f"Invalid JSON from {url}: {e}")

        entries = data.get("indexers") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise IndexerCatalogException(f"Unexpected indexer payload from {url}")

        try:
            self.indexers = [IndexerMirrorSet.from_dict(entry) for entry in entries]
        except (KeyError, TypeError) as e:
            raise IndexerCatalogException(f"Malformed indexer entry from {url}: {e}")

        logger.info(f"Loaded {len(self.indexers)} indexers from {self.base_url}")
        return self.indexers

    def get(self, indexer_id: str) -> Optional[IndexerMirrorSet]:
        return next((i for i in self.indexers if i.indexer_id == indexer_id), None)
