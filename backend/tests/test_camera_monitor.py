import pytest

from recruitai.proctoring import CameraPreviewMonitor, FaceCheckStatus
from recruitai.proctoring import rules
from recruitai.proctoring.camera import classify_detections


def _monitor(**kwargs):
    events: list[dict] = []
    monitor = CameraPreviewMonitor(on_violation=events.append, **kwargs)
    return monitor, events


@pytest.mark.parametrize(
    "detections, expected",
    [
        ([], FaceCheckStatus.NO_FACE),
        ([{"score": 0.9}], FaceCheckStatus.OK),
        ([{}, {}], FaceCheckStatus.MULTI_FACE),
        ([{}, {}, {}], FaceCheckStatus.MULTI_FACE),
    ],
)
def test_classify_detections(detections, expected):
    assert classify_detections(detections) is expected


def test_callback_fires_on_every_increment_past_max():
    monitor, events = _monitor(max_violations=2)
    for _ in range(3):
        assert monitor.on_check_result([]) is FaceCheckStatus.NO_FACE

    assert [event["count"] for event in events] == [1, 2, 3]
    assert all(event["max"] == 2 for event in events)
    assert all(event["type"] == rules.CAMERA_VIOLATION_TYPE for event in events)
    assert events[0]["reason"] == rules.NO_FACE_REASON


def test_no_face_and_multi_face_share_one_counter():
    monitor, events = _monitor()
    monitor.on_check_result([])
    monitor.on_check_result([{}, {}])

    assert monitor.violation_count == 2
    assert events[1] == {
        "reason": rules.MULTI_FACE_REASON,
        "type": rules.CAMERA_VIOLATION_TYPE,
        "count": 2,
        "max": 5,
    }
    assert monitor.status == rules.MULTI_FACE_STATUS


def test_ok_result_updates_status_without_violation():
    monitor, events = _monitor()
    assert monitor.status == rules.INITIAL_STATUS
    monitor.on_check_result([{}])
    assert monitor.status == rules.OK_STATUS
    assert events == []


def test_grace_frames_require_consecutive_results():
    monitor, events = _monitor(grace_frames=3)
    monitor.on_check_result([])
    monitor.on_check_result([])
    monitor.on_check_result([{}])
    monitor.on_check_result([])
    monitor.on_check_result([])
    assert events == []

    monitor.on_check_result([])
    assert monitor.violation_count == 1
    assert len(events) == 1


def test_detector_failure_leaves_counters_unchanged():
    monitor, events = _monitor()
    assert monitor.on_check_result(None) is None
    assert monitor.violation_count == 0
    assert monitor.status == rules.INITIAL_STATUS
    assert events == []


def test_reset_and_snapshot():
    monitor, _ = _monitor(max_violations=4)
    monitor.on_check_result([])
    snapshot = monitor.snapshot()
    assert snapshot["violation_count"] == 1
    assert snapshot["last_result"] == "no-face"
    assert snapshot["max_violations"] == 4

    monitor.reset()
    assert monitor.violation_count == 0
    assert monitor.snapshot()["last_result"] is None
