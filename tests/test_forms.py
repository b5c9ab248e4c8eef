import pytest

from conftest import FakeClient
from forms import (
    MSG_CODE_REQUIRED, MSG_PRICE_NEGATIVE, MSG_QTY_NEGATIVE,
    storage_path, submit_item, validate_submission,
)


def _clock():
    return 1700000000000


@pytest.mark.parametrize("code, available, pricing, expected", [
    ("", 1, 1, MSG_CODE_REQUIRED),
    ("", -1, -1, MSG_CODE_REQUIRED),
    ("X", -1, -1, MSG_PRICE_NEGATIVE),
    ("X", -1, 0, MSG_QTY_NEGATIVE),
    ("X", 0, 0, None),
    ("X", "", "", None),
])
def test_validation_order(code, available, pricing, expected):
    assert validate_submission(code, available, pricing) == expected


def test_storage_path_normalizes_whitespace():
    assert storage_path("photos", "my  cool\tpic.jpg", 42) == "photos/42-my-cool-pic.jpg"


@pytest.mark.parametrize("submission, message", [
    ({"inventory_code": "", "available": 1, "pricing": 1}, "Please enter an inventory code"),
    ({"inventory_code": "A", "available": 1, "pricing": -0.01}, "Price cannot be negative"),
    ({"inventory_code": "A", "available": -2, "pricing": 1}, "Available quantity cannot be negative"),
])
def test_invalid_submission_never_hits_network(submission, message, cfg):
    client = FakeClient()
    submission = dict(submission, photo=("p.jpg", b"img"), video=("v.mp4", b"vid"))
    assert submit_item(client, submission, cfg=cfg, clock=_clock) == (False, message)
    assert client.calls == []


def test_submit_uploads_video_then_photo_then_inserts(cfg):
    client = FakeClient()
    ok, msg = submit_item(client, {
        "inventory_code": "AB-3",
        "strain_name": "",
        "available": 4,
        "pricing": 2.5,
        "video": ("clip one.mp4", b"vid", "video/mp4"),
        "photo": ("front view.jpg", b"img", "image/jpeg"),
    }, cfg=cfg, clock=_clock)
    assert ok, msg
    assert [c[:2] for c in client.calls] == [
        ("inventory-videos", "upload"),
        ("inventory-videos", "get_public_url"),
        ("inventory-photo", "upload"),
        ("inventory-photo", "get_public_url"),
        ("inventory", "insert"),
    ]
    row = client.calls[-1][2][0]
    assert row["inventory_code"] == "AB-3"
    assert row["available"] == 4.0
    assert row["pricing"] == 2.5
    assert row["strain_name"] is None
    assert row["video_path"].endswith("inventory-videos/videos/1700000000000-clip-one.mp4")
    assert row["photo_url"].endswith("inventory-photo/photos/1700000000000-front-view.jpg")


def test_submit_without_media_inserts_null_references(cfg):
    client = FakeClient()
    ok, _ = submit_item(client, {"inventory_code": "AB-4", "strain_name": "Blue"}, cfg=cfg, clock=_clock)
    assert ok
    assert len(client.calls) == 1
    row = client.calls[0][2][0]
    assert row == {"inventory_code": "AB-4", "available": 0.0, "pricing": 0.0,
                   "strain_name": "Blue", "video_path": None, "photo_url": None}


def test_video_upload_failure_stops_before_insert(cfg):
    client = FakeClient(fail={"upload:inventory-videos": "Bucket not found"})
    ok, msg = submit_item(client, {"inventory_code": "A", "video": ("v.mp4", b"v"),
                                   "photo": ("p.jpg", b"p")}, cfg=cfg, clock=_clock)
    assert (ok, msg) == (False, "Video upload failed: Bucket not found")
    assert all(c[1] != "insert" for c in client.calls)
    assert all(c[0] != "inventory-photo" for c in client.calls)


def test_photo_upload_failure_message(cfg):
    client = FakeClient(fail={"upload:inventory-photo": "too large"})
    ok, msg = submit_item(client, {"inventory_code": "A", "photo": ("p.jpg", b"p")}, cfg=cfg, clock=_clock)
    assert (ok, msg) == (False, "Image upload failed: too large")


def test_insert_failure_leaves_upload_by_default(cfg):
    client = FakeClient(fail={"insert": "duplicate key"})
    ok, msg = submit_item(client, {"inventory_code": "A", "photo": ("p.jpg", b"p")}, cfg=cfg, clock=_clock)
    assert (ok, msg) == (False, "Database insert failed: duplicate key")
    assert ("inventory-photo", "photos/1700000000000-p.jpg") in client.objects


def test_insert_failure_cleans_up_when_enabled(cfg):
    cfg = dict(cfg, cleanup_orphans=True)
    client = FakeClient(fail={"insert": "duplicate key"})
    ok, _ = submit_item(client, {"inventory_code": "A", "photo": ("p.jpg", b"p"),
                                 "video": ("v.mp4", b"v")}, cfg=cfg, clock=_clock)
    assert not ok
    assert client.objects == {}
    assert ("inventory-videos", "remove", ("videos/1700000000000-v.mp4",)) in client.calls
