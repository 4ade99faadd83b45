"""Progressive unlock state machine.

Pure functions over rows that are already loaded. Lock and completion state
is derived from the current progress rows on every read and never stored, so
completing a video unlocks its successor on the very next read.

Rules inside one topic:

* every video at the lowest position is unlocked for everyone;
* without a student every other video is locked;
* for a student a video is unlocked iff its immediate predecessor (the
  greatest smaller position, lowest ``course_video_id`` on a tie) has a
  progress row with ``is_completed`` set.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol


class LockState(str, enum.Enum):
    LOCKED = "LOCKED"
    UNLOCKED = "UNLOCKED"


class CompletionState(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class PositionedVideo(Protocol):
    course_video_id: int
    position: int


class ProgressLike(Protocol):
    completion_percentage: int
    is_completed: bool


@dataclass(frozen=True)
class VideoProjection:
    course_video_id: int
    lock_state: LockState
    completion_state: CompletionState

    @property
    def is_locked(self) -> bool:
        return self.lock_state is LockState.LOCKED


def classify_completion(progress: ProgressLike | None) -> CompletionState:
    if progress is None or progress.completion_percentage <= 0:
        return CompletionState.PENDING
    if progress.completion_percentage >= 100:
        return CompletionState.COMPLETED
    return CompletionState.IN_PROGRESS


def immediate_predecessor[V: PositionedVideo](video: V, siblings: Sequence[V]) -> V | None:
    earlier = [s for s in siblings if s.position < video.position]
    if not earlier:
        return None
    return min(earlier, key=lambda s: (-s.position, s.course_video_id))


def resolve_lock(
    *,
    is_first: bool,
    student_id: int | None,
    predecessor_progress: ProgressLike | None,
) -> LockState:
    if is_first:
        return LockState.UNLOCKED
    if student_id is None:
        return LockState.LOCKED
    if predecessor_progress is not None and predecessor_progress.is_completed:
        return LockState.UNLOCKED
    return LockState.LOCKED


def project_topic(
    videos: Sequence[PositionedVideo],
    progress_by_video: Mapping[int, ProgressLike],
    student_id: int | None,
) -> dict[int, VideoProjection]:
    """Lock and completion state for every video of one topic, keyed by id."""
    if not videos:
        return {}
    if student_id is None:
        progress_by_video = {}
    first_position = min(v.position for v in videos)

    projections: dict[int, VideoProjection] = {}
    for video in videos:
        predecessor = immediate_predecessor(video, videos)
        lock_state = resolve_lock(
            is_first=video.position == first_position,
            student_id=student_id,
            predecessor_progress=(
                progress_by_video.get(predecessor.course_video_id) if predecessor else None
            ),
        )
        projections[video.course_video_id] = VideoProjection(
            course_video_id=video.course_video_id,
            lock_state=lock_state,
            completion_state=classify_completion(progress_by_video.get(video.course_video_id)),
        )
    return projections
