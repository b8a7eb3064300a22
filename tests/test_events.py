import socket
import time

import pytest

from homehelper.events import (
    ActiveSpecialChanged,
    ActiveSpecialChangedV2,
    ActiveWindowChanged,
    ActiveWindowChangedV2,
    ChangeFloatingMode,
    CloseWindow,
    ConfigReloaded,
    Custom,
    EventParseError,
    EventSocket,
    FocusedMon,
    FocusedMonV2,
    Fullscreen,
    MonitorAddedV2,
    MoveWindowV2,
    MoveWorkspaceV2,
    OpenWindow,
    ScreenCast,
    ScreenCastOwner,
    SpecialWorkspace,
    Submap,
    ToggleGroup,
    WindowInfo,
    WorkspaceChanged,
    WorkspaceChangedV2,
    read_event,
)


def test_workspace_keeps_commas():
    assert read_event("workspace>>a,b") == WorkspaceChanged("a,b")


def test_workspace_v2():
    assert read_event("workspacev2>>-98,special:term") == WorkspaceChangedV2(
        -98, "special:term"
    )


def test_focusedmon_order():
    event = read_event("focusedmon>>DP-1,code")
    assert event == FocusedMon(workspace_name="code", monitor_name="DP-1")


def test_focusedmon_v2():
    assert read_event("focusedmonv2>>DP-1,3") == FocusedMonV2(3, "DP-1")


def test_activewindow_title_keeps_commas():
    event = read_event("activewindow>>kitty,a, b")
    assert event == ActiveWindowChanged(WindowInfo("kitty", "a, b"))


def test_activewindow_empty():
    assert read_event("activewindow>>,") == ActiveWindowChanged(None)


def test_activewindow_v2():
    assert read_event("activewindowv2>>ff") == ActiveWindowChangedV2(0xFF)
    assert read_event("activewindowv2>>") == ActiveWindowChangedV2(None)


def test_fullscreen_flag():
    assert read_event("fullscreen>>1") == Fullscreen(True)
    assert read_event("fullscreen>>0") == Fullscreen(False)


def test_monitor_added_v2_description_keeps_commas():
    event = read_event("monitoraddedv2>>1,HDMI-A-1,Some, Monitor")
    assert event == MonitorAddedV2(1, "HDMI-A-1", "Some, Monitor")


def test_moveworkspace_v2():
    assert read_event("moveworkspacev2>>2,two,DP-2") == MoveWorkspaceV2(2, "two", "DP-2")


def test_activespecial():
    assert read_event("activespecial>>,DP-1") == ActiveSpecialChanged(None, "DP-1")
    assert read_event("activespecial>>special:x,DP-1") == ActiveSpecialChanged(
        "special:x", "DP-1"
    )


def test_activespecial_v2():
    assert read_event("activespecialv2>>,,DP-1") == ActiveSpecialChangedV2(None, "DP-1")
    event = read_event("activespecialv2>>-99,special:x,DP-1")
    assert event == ActiveSpecialChangedV2(SpecialWorkspace(-99, "special:x"), "DP-1")


def test_openwindow():
    event = read_event("openwindow>>abc,1,kitty,hello, world")
    assert event == OpenWindow(0xABC, "1", "kitty", "hello, world")


def test_movewindow_v2():
    assert read_event("movewindowv2>>10,4,four") == MoveWindowV2(0x10, 4, "four")


def test_submap():
    assert read_event("submap>>resize") == Submap("resize")
    assert read_event("submap>>") == Submap(None)


def test_changefloatingmode():
    assert read_event("changefloatingmode>>a,1") == ChangeFloatingMode(0xA, True)


def test_screencast_owner():
    assert read_event("screencast>>1,1") == ScreenCast(True, ScreenCastOwner.WINDOW)
    assert read_event("screencast>>0,0") == ScreenCast(False, ScreenCastOwner.MONITOR)


def test_togglegroup_addresses():
    event = read_event("togglegroup>>1,a,b,c")
    assert event == ToggleGroup(True, (0xA, 0xB, 0xC))


def test_configreloaded():
    assert read_event("configreloaded>>") == ConfigReloaded()


def test_custom_event():
    assert read_event("myevent>>x,y") == Custom("myevent", ("x", "y"))
    assert read_event("myevent>>") == Custom("myevent", ("",))


def test_missing_separator():
    with pytest.raises(EventParseError, match="separator"):
        read_event("nothing here")


def test_not_enough_params():
    with pytest.raises(EventParseError, match="Not enough params"):
        read_event("workspacev2>>5")
    with pytest.raises(EventParseError, match="Not enough params"):
        read_event("openwindow>>a,1,kitty")


@pytest.mark.parametrize(
    "line",
    [
        "workspacev2>>x,name",
        "workspacev2>> 5,name",
        "workspacev2>>99999999999,name",
        "closewindow>>xyz",
        "closewindow>>0xff",
        "closewindow>>-1",
        "closewindow>>",
        "closewindow>>" + "f" * 17,
        "togglegroup>>1,a,,b",
    ],
)
def test_invalid_numbers(line):
    with pytest.raises(EventParseError):
        read_event(line)


def test_number_signs_accepted():
    assert read_event("workspacev2>>+7,s") == WorkspaceChangedV2(7, "s")
    assert read_event("closewindow>>+a") == CloseWindow(0xA)


@pytest.fixture
def server(tmp_path):
    path = str(tmp_path / "s")
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    listener.bind(path)
    listener.listen(1)
    yield listener, path
    listener.close()


def _poll_until(events, count, timeout=2.0):
    results = []
    deadline = time.monotonic() + timeout
    while len(results) < count and time.monotonic() < deadline:
        results.extend(events.poll())
        time.sleep(0.01)
    return results


def test_socket_reads_events(server):
    listener, path = server
    with EventSocket(path) as events:
        conn, _ = listener.accept()
        with conn:
            conn.sendall(b"workspace>>1\nsubmap>>\n")
            results = _poll_until(events, 2)
    assert results == [WorkspaceChanged("1"), Submap(None)]


def test_socket_partial_line(server):
    listener, path = server
    with EventSocket(path) as events:
        conn, _ = listener.accept()
        with conn:
            conn.sendall(b"workspace>>a")
            time.sleep(0.05)
            assert events.poll() == []
            conn.sendall(b"b\n")
            results = _poll_until(events, 1)
    assert results == [WorkspaceChanged("ab")]


def test_socket_bad_line_reported_in_place(server):
    listener, path = server
    with EventSocket(path) as events:
        conn, _ = listener.accept()
        with conn:
            conn.sendall(b"garbage\nworkspace>>2\n")
            results = _poll_until(events, 2)
    assert isinstance(results[0], EventParseError)
    assert results[1] == WorkspaceChanged("2")


def test_socket_eof_raises(server):
    listener, path = server
    with EventSocket(path) as events:
        conn, _ = listener.accept()
        conn.sendall(b"workspace>>3\n")
        conn.close()
        results = _poll_until(events, 1)
        assert results == [WorkspaceChanged("3")]
        with pytest.raises(ConnectionError):
            for _ in range(200):
                events.poll()
                time.sleep(0.01)


def test_poll_after_close(server):
    listener, path = server
    events = EventSocket(path)
    events.close()
    with pytest.raises(ValueError):
        events.poll()