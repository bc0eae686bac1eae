"""
View models consumed by the host templates
"""

from typing import Dict, Optional, Sequence

from cache_clear import CacheClearController, CacheClearStatus
from indexer_sources import IndexerMirrorSet
from mirrors import (
    MirrorSelectionStore,
    format_label,
    mirror_index_from_settings,
    settings_mirror_options,
    should_offer,
)


def _option_rows(options, selected: int):
    return [
        {
            "value": option.global_index,
            "label": format_label(option),
            "is_legacy": option.is_legacy,
            "selected": option.global_index == selected,
        }
        for option in options
    ]


def mirror_selector_view(indexer: IndexerMirrorSet, store: MirrorSelectionStore) -> Optional[Dict]:
    """Mirror chooser for an indexer card, None when there is nothing to choose"""
    options = indexer.options()
    if not should_offer(options):
        return None
    selected = store.selected_option(indexer.indexer_id, options).global_index
    return {
        "indexer_id": indexer.indexer_id,
        "selected": selected,
        "options": _option_rows(options, selected),
    }


def settings_mirror_view(links: Optional[Sequence[str]], settings: Optional[Dict]) -> Optional[Dict]:
    """Mirror / Domain field of the indexer settings form"""
    options = settings_mirror_options(links)
    if not should_offer(options):
        return None
    selected = mirror_index_from_settings(settings, links)
    return {
        "selected": selected,
        "options": _option_rows(options, selected),
    }


def cache_settings_view(controller: CacheClearController) -> Dict:
    state = controller.state
    feedback = None
    if state.status == CacheClearStatus.SUCCEEDED:
        feedback = {"kind": "success", "message": controller.success_message}
    elif state.status == CacheClearStatus.FAILED:
        feedback = {"kind": "error", "message": controller.error_message}

    return {
        "button_label": "Clearing..." if controller.is_busy else "Clear Search Cache",
        "disabled": controller.is_busy,
        "feedback": feedback,
    }
