import json
import os
import shutil
import socket
import tempfile
import threading

import pytest

from homehelper.binds import Bind, BindTrigger, bind_from_json, binds, parse_binds


def raw_bind(**overrides):
    data = {
        "locked": False,
        "mouse": False,
        "release": False,
        "repeat": True,
        "longPress": False,
        "non_consuming": False,
        "has_description": True,
        "modmask": 64,
        "submap": "resize",
        "key": "H",
        "keycode": 0,
        "catch_all": False,
        "description": "Shrink left",
        "dispatcher": "resizeactive",
        "arg": "-10 0",
    }
    data.update(overrides)
    return data


def test_bind_fields_carried_over():
    bind = bind_from_json(raw_bind())
    assert bind == Bind(
        locked=False,
        repeat=True,
        non_consuming=False,
        trigger=BindTrigger.PRESS,
        modmask=64,
        submap="resize",
        key="H",
        keycode=0,
        description="Shrink left",
        action=("resizeactive", "-10 0"),
    )


@pytest.mark.parametrize(
    "flags, expected",
    [
        ({}, BindTrigger.PRESS),
        ({"release": True}, BindTrigger.RELEASE),
        ({"longPress": True, "release": True}, BindTrigger.LONG_PRESS),
        ({"catch_all": True, "longPress": True}, BindTrigger.CATCH_ALL),
        ({"mouse": True, "catch_all": True, "release": True}, BindTrigger.MOUSE),
    ],
)
def test_trigger_priority(flags, expected):
    assert bind_from_json(raw_bind(**flags)).trigger is expected


def test_empty_submap_is_none():
    assert bind_from_json(raw_bind(submap="")).submap is None


def test_description_requires_flag():
    bind = bind_from_json(raw_bind(has_description=False, description="hidden"))
    assert bind.description is None


def test_parse_binds_list():
    text = json.dumps([raw_bind(key="H"), raw_bind(key="L", submap="")])
    parsed = parse_binds(text)
    assert [b.key for b in parsed] == ["H", "L"]
    assert [b.submap for b in parsed] == ["resize", None]


def test_missing_field_rejected():
    data = raw_bind()
    del data["dispatcher"]
    with pytest.raises(ValueError, match="dispatcher"):
        bind_from_json(data)


@pytest.mark.parametrize(
    "overrides",
    [{"locked": "no"}, {"modmask": -1}, {"keycode": True}, {"key": 5}],
)
def test_wrong_types_rejected(overrides):
    with pytest.raises(ValueError):
        bind_from_json(raw_bind(**overrides))


def test_parse_binds_requires_list():
    with pytest.raises(ValueError):
        parse_binds(json.dumps(raw_bind()))


def test_parse_binds_invalid_json():
    with pytest.raises(ValueError):
        parse_binds("not json")


@pytest.fixture
def instance_dir(monkeypatch):
    runtime = tempfile.mkdtemp(prefix="hh", dir="/tmp")
    os.makedirs(f"{runtime}/hypr/sig")
    monkeypatch.setenv("XDG_RUNTIME_DIR", runtime)
    monkeypatch.setenv("HYPRLAND_INSTANCE_SIGNATURE", "sig")
    yield f"{runtime}/hypr/sig"
    shutil.rmtree(runtime, ignore_errors=True)


def test_binds_queries_hyprland(instance_dir):
    reply = json.dumps([raw_bind()]).encode()
    received = []
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    server.settimeout(5)
    server.bind(f"{instance_dir}/.socket.sock")
    server.listen(1)

    def serve():
        conn, _ = server.accept()
        with conn:
            received.append(conn.recv(4096))
            conn.sendall(reply)

    thread = threading.Thread(target=serve)
    thread.start()
    try:
        result = binds()
    finally:
        thread.join(5)
        server.close()
    assert received == [b"j/binds"]
    assert result == [bind_from_json(raw_bind())]