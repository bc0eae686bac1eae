"""
Mirror resolution for indexers
Merges an indexer's primary and legacy links into one globally addressed option list
and keeps the per-indexer mirror selection
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlsplit

from constants import DEFAULT_LABEL_SUFFIX, LEGACY_LABEL_SUFFIX, MIRROR_SETTING_KEY
from exceptions import ValidationException

logger = logging.getLogger(__name__)


class MirrorSource:
    PRIMARY = "primary"
    LEGACY = "legacy"


@dataclass(frozen=True)
class MirrorOption:
    """One selectable mirror, addressed by its position in the merged list"""

    global_index: int
    url: str
    is_legacy: bool
    source: str = MirrorSource.PRIMARY
    original_index: int = 0

    def to_dict(self) -> Dict:
        return {
            "global_index": self.global_index,
            "url": self.url,
            "is_legacy": self.is_legacy,
            "source": self.source,
            "original_index": self.original_index,
        }


def resolve(primary_links: Optional[Sequence[str]], legacy_links: Optional[Sequence[str]]) -> List[MirrorOption]:
    """
    Merge primary and legacy links into a single option list.

    Primary links keep indices 0..len(primary)-1 in their original order,
    legacy link i gets index len(primary) + i.
    """
    primary_links = list(primary_links or [])
    legacy_links = list(legacy_links or [])

    options = [
        MirrorOption(global_index=idx, url=url, is_legacy=False, source=MirrorSource.PRIMARY, original_index=idx)
        for idx, url in enumerate(primary_links)
    ]
    offset = len(primary_links)
    options.extend(
        MirrorOption(
            global_index=offset + idx, url=url, is_legacy=True, source=MirrorSource.LEGACY, original_index=idx
        )
        for idx, url in enumerate(legacy_links)
    )
    return options


def should_offer(options: Sequence[MirrorOption]) -> bool:
    """A single mirror (or none) needs no chooser"""
    return len(options) > 1


def format_hostname(url) -> str:
    """Hostname of the URL, or the raw value when it does not parse as one"""
    if not isinstance(url, str):
        return str(url)
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        # e.g. unbalanced IPv6 brackets
        return url
    return hostname or url


def format_label(option: MirrorOption) -> str:
    label = format_hostname(option.url)
    if option.is_legacy:
        label += LEGACY_LABEL_SUFFIX
    # Index 0 is always the default, even when it is a legacy link
    if option.global_index == 0:
        label += DEFAULT_LABEL_SUFFIX
    return label


class MirrorSelectionStore:
    """Currently chosen mirror per indexer, keyed by indexer id"""

    def __init__(self):
        self._selections: Dict[str, int] = {}

    def __getitem__(self, indexer_id) -> int:
        return self.selected_index(indexer_id)

    def __contains__(self, indexer_id) -> bool:
        return indexer_id in self._selections

    def __len__(self) -> int:
        return len(self._selections)

    def selected_index(self, indexer_id) -> int:
        return self._selections.get(indexer_id, 0)

    def select_mirror(self, indexer_id, global_index, options: Sequence[MirrorOption]) -> bool:
        """
        Select a mirror by global index.

        The index must address one of the options it was derived from;
        anything else is ignored and the current selection is kept.

        Returns:
            True if the selection was stored
        """
        if isinstance(global_index, bool) or not isinstance(global_index, int):
            logger.warning(f"Ignoring non-integer mirror index {global_index!r} for indexer {indexer_id}")
            return False
        if not 0 <= global_index < len(options):
            logger.warning(
                f"Ignoring mirror index {global_index} for indexer {indexer_id}: only {len(options)} mirrors known"
            )
            return False

        self._selections[indexer_id] = global_index
        logger.debug(f"Indexer {indexer_id} now uses mirror {global_index} ({options[global_index].url})")
        return True

    def select_option(self, indexer_id, option: MirrorOption, options: Sequence[MirrorOption]) -> bool:
        """Select a mirror by the option value itself"""
        if option not in options:
            logger.warning(f"Ignoring mirror {option.url} for indexer {indexer_id}: not one of its options")
            return False
        return self.select_mirror(indexer_id, option.global_index, options)

    def selected_option(self, indexer_id, options: Sequence[MirrorOption]) -> Optional[MirrorOption]:
        if not options:
            return None
        index = self.selected_index(indexer_id)
        if index >= len(options):
            # Lists shrank since the selection was made
            return options[0]
        return options[index]

    def to_dict(self) -> Dict:
        return dict(self._selections)


def settings_mirror_options(links: Optional[Sequence[str]]) -> List[MirrorOption]:
    """Options for the settings form, which only offers the primary links"""
    return resolve(links, [])


def mirror_index_from_settings(settings: Optional[Dict], links: Optional[Sequence[str]]) -> int:
    raw = (settings or {}).get(MIRROR_SETTING_KEY, "0")
    try:
        index = int(raw)
    except (TypeError, ValueError):
        logger.debug(f"Invalid {MIRROR_SETTING_KEY} setting {raw!r}, using default mirror")
        return 0
    if not 0 <= index < len(links or []):
        return 0
    return index


def apply_mirror_setting(settings: Optional[Dict], index: int, links: Optional[Sequence[str]]) -> Dict:
    """Return a copy of the indexer settings with the chosen mirror stored as a string"""
    links = list(links or [])
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(links):
        raise ValidationException(f"Mirror index {index} out of range for {len(links)} links")
    updated = dict(settings or {})
    updated[MIRROR_SETTING_KEY] = str(index)
    return updated
