from types import SimpleNamespace

from app.catalog.unlock import (
    CompletionState,
    LockState,
    classify_completion,
    immediate_predecessor,
    project_topic,
    resolve_lock,
)


def _video(video_id: int, position: int) -> SimpleNamespace:
    return SimpleNamespace(course_video_id=video_id, position=position)


def _progress(percentage: int, completed: bool) -> SimpleNamespace:
    return SimpleNamespace(completion_percentage=percentage, is_completed=completed)


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


def test_no_progress_is_pending() -> None:
    assert classify_completion(None) is CompletionState.PENDING


def test_zero_or_negative_percentage_is_pending() -> None:
    assert classify_completion(_progress(0, False)) is CompletionState.PENDING
    assert classify_completion(_progress(-3, False)) is CompletionState.PENDING


def test_partial_percentage_is_in_progress() -> None:
    assert classify_completion(_progress(1, False)) is CompletionState.IN_PROGRESS
    assert classify_completion(_progress(99, False)) is CompletionState.IN_PROGRESS


def test_full_percentage_is_completed() -> None:
    assert classify_completion(_progress(100, True)) is CompletionState.COMPLETED
    assert classify_completion(_progress(130, True)) is CompletionState.COMPLETED


# ---------------------------------------------------------------------------
# Predecessor
# ---------------------------------------------------------------------------


def test_first_video_has_no_predecessor() -> None:
    a, b = _video(1, 1), _video(2, 2)
    assert immediate_predecessor(a, [a, b]) is None


def test_predecessor_skips_position_gaps() -> None:
    a, b, c = _video(1, 10), _video(2, 20), _video(3, 40)
    assert immediate_predecessor(c, [c, a, b]) is b


def test_predecessor_tie_picks_lowest_id() -> None:
    a, b1, b2, c = _video(1, 1), _video(7, 2), _video(5, 2), _video(9, 3)
    assert immediate_predecessor(c, [a, b1, b2, c]) is b2


def test_same_position_siblings_are_not_predecessors_of_each_other() -> None:
    a, b1, b2 = _video(1, 1), _video(2, 2), _video(3, 2)
    assert immediate_predecessor(b2, [a, b1, b2]) is a


# ---------------------------------------------------------------------------
# Lock resolution
# ---------------------------------------------------------------------------


def test_first_is_unlocked_even_without_student() -> None:
    assert resolve_lock(is_first=True, student_id=None, predecessor_progress=None) is LockState.UNLOCKED


def test_non_first_is_locked_without_student() -> None:
    done = _progress(100, True)
    assert resolve_lock(is_first=False, student_id=None, predecessor_progress=done) is LockState.LOCKED


def test_unlock_keys_off_is_completed_flag() -> None:
    # 100% watched but not flagged completed keeps the successor locked
    watched = _progress(100, False)
    assert resolve_lock(is_first=False, student_id=4, predecessor_progress=watched) is LockState.LOCKED
    flagged = _progress(80, True)
    assert resolve_lock(is_first=False, student_id=4, predecessor_progress=flagged) is LockState.UNLOCKED


# ---------------------------------------------------------------------------
# Topic projection
# ---------------------------------------------------------------------------


def test_sequential_unlock_for_student() -> None:
    a, b, c = _video(1, 1), _video(2, 2), _video(3, 3)
    progress = {1: _progress(100, True)}

    states = project_topic([a, b, c], progress, student_id=42)

    assert states[1].lock_state is LockState.UNLOCKED
    assert states[1].completion_state is CompletionState.COMPLETED
    assert states[2].lock_state is LockState.UNLOCKED
    assert states[2].completion_state is CompletionState.PENDING
    assert states[3].lock_state is LockState.LOCKED


def test_completing_predecessor_unlocks_successor_on_next_projection() -> None:
    a, b, c = _video(1, 1), _video(2, 2), _video(3, 3)
    progress = {1: _progress(100, True), 2: _progress(40, False)}
    assert project_topic([a, b, c], progress, 42)[3].is_locked

    progress[2] = _progress(100, True)
    after = project_topic([a, b, c], progress, 42)
    assert after[3].lock_state is LockState.UNLOCKED
    assert after[3].completion_state is CompletionState.PENDING


def test_anonymous_sees_only_first_unlocked() -> None:
    videos = [_video(1, 1), _video(2, 2), _video(3, 3)]
    states = project_topic(videos, {}, student_id=None)
    assert [states[v.course_video_id].lock_state for v in videos] == [
        LockState.UNLOCKED,
        LockState.LOCKED,
        LockState.LOCKED,
    ]


def test_progress_ignored_without_student() -> None:
    videos = [_video(1, 1), _video(2, 2)]
    states = project_topic(videos, {1: _progress(100, True)}, student_id=None)
    assert states[1].completion_state is CompletionState.PENDING
    assert states[2].is_locked


def test_every_video_at_lowest_position_is_unlocked() -> None:
    videos = [_video(4, 3), _video(2, 3), _video(8, 5)]
    states = project_topic(videos, {}, student_id=1)
    assert not states[4].is_locked
    assert not states[2].is_locked
    assert states[8].is_locked


def test_empty_topic() -> None:
    assert project_topic([], {}, student_id=1) == {}
