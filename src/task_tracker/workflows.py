"""
Two small state machines used by the presentation layer.

Deletion confirmation:
    Idle --request(id)--> PendingConfirmation(id)
    PendingConfirmation --confirm--> Idle   (task removed)
    PendingConfirmation --cancel---> Idle   (nothing changes)
A request while already pending replaces the pending id.

Edit in place:
    NotEditing --begin(id)--> Editing(id, buffer)
    Editing --change(text)--> Editing(id, text)
    Editing --commit/cancel--> NotEditing
Only one task is edited at a time; beginning a new edit discards the old one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from .store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PendingConfirmation:
    task_id: int


DeletionState = Union[Idle, PendingConfirmation]


@dataclass(frozen=True)
class NotEditing:
    pass


@dataclass(frozen=True)
class Editing:
    task_id: int
    buffer: str


EditState = Union[NotEditing, Editing]

IDLE = Idle()
NOT_EDITING = NotEditing()


# -------------------- deletion confirmation --------------------
def request_delete(state: DeletionState, task_id: int) -> DeletionState:
    if isinstance(state, PendingConfirmation) and state.task_id != task_id:
        logger.debug("Replacing pending delete id=%s with id=%s", state.task_id, task_id)
    return PendingConfirmation(task_id)


def confirm_delete(state: DeletionState, store: TaskStore) -> DeletionState:
    if isinstance(state, PendingConfirmation):
        store.remove(state.task_id)
    return IDLE


def cancel_delete(state: DeletionState) -> DeletionState:
    return IDLE


# -------------------- edit in place --------------------
def begin_edit(state: EditState, store: TaskStore, task_id: int) -> EditState:
    task = store.get(task_id)
    if task is None:
        return state
    return Editing(task_id=task.id, buffer=task.text)


def change_edit_buffer(state: EditState, text: str) -> EditState:
    if not isinstance(state, Editing):
        return state
    return Editing(task_id=state.task_id, buffer=text)


def commit_edit(state: EditState, store: TaskStore, task_id: int) -> Tuple[EditState, bool]:
    """
    Save the buffer into the task if it is not blank.

    Edit mode ends either way. Returns the new state and whether the store
    was updated.
    """
    if not isinstance(state, Editing):
        return state, False
    if state.task_id != task_id:
        logger.debug("Commit for id=%s ends edit of id=%s without saving", task_id, state.task_id)
        return NOT_EDITING, False
    text = state.buffer.strip()
    if not text:
        logger.debug("Discarding blank edit for id=%s", task_id)
        return NOT_EDITING, False
    updated = store.update(task_id, {"text": text})
    return NOT_EDITING, updated is not None


def cancel_edit(state: EditState) -> EditState:
    return NOT_EDITING
