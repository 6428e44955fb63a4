from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from .models import Filter, Page, SortKey, Theme
from .workflows import IDLE, NOT_EDITING, DeletionState, EditState


@dataclass(frozen=True)
class UiState:
    """
    Process-local application state. Only ``theme`` is ever persisted.

    Handlers never mutate an instance; each returns a new one.
    """

    filter: Filter = Filter.ALL
    search: str = ""
    sort: SortKey = SortKey.DUE_DATE
    page: Page = Page.LIST
    theme: Theme = Theme.LIGHT
    deletion: DeletionState = IDLE
    editing: EditState = NOT_EDITING


def set_filter(state: UiState, value: Union[Filter, str]) -> UiState:
    return replace(state, filter=Filter(value))


def set_search(state: UiState, query: str) -> UiState:
    return replace(state, search=query or "")


def set_sort(state: UiState, value: Union[SortKey, str]) -> UiState:
    return replace(state, sort=SortKey(value))


def set_page(state: UiState, value: Union[Page, str]) -> UiState:
    return replace(state, page=Page(value))


def set_theme(state: UiState, value: Union[Theme, str]) -> UiState:
    return replace(state, theme=Theme(value))


def toggle_theme(state: UiState) -> UiState:
    return set_theme(state, Theme.DARK if state.theme is Theme.LIGHT else Theme.LIGHT)
