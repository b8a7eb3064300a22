# homehelper

A small helper daemon for the Hyprland compositor. It reads Hyprland's event
socket and does two things:

- When a submap becomes active, it opens a centred kitty panel that lists the
  binds of that submap that have descriptions. The panel is killed when the
  submap is left or another one is entered.
- It answers requests from clients on its own Unix socket. One of these
  requests streams workspace updates as JSON lines, ready for an eww bar.

## Requirements

- Linux with Hyprland running. `XDG_RUNTIME_DIR` and
  `HYPRLAND_INSTANCE_SIGNATURE` must be set.
- `kitty` on `PATH` for the submap panel.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

Start the daemon:

```
homehelper daemon
```

It listens on `$XDG_RUNTIME_DIR/homehelper.sock`. Ctrl-C stops it; it then
closes the socket, removes the socket file and kills any open panel. To run
it without the submap panel:

```
homehelper daemon --submap false
```

`--submap` (`-s`) takes `true` or `false` and defaults to `true`.

Query the running daemon from another terminal or from a bar:

```
homehelper remote workspaces    # prints Hyprland's workspaces as one JSON array
homehelper remote monitors      # prints Hyprland's monitors as one JSON array
homehelper remote listen-eww    # prints a JSON array on every workspace change
```

If the daemon is not running, `remote` fails with
"Socket file not found. Is the daemon running?". Errors are printed to
stderr and the command exits with status 1.

`homehelper --version` prints the version.

### Output of `workspaces` and `monitors`

`workspaces` uses Hyprland's own key names (`id`, `name`, `monitor`,
`monitorID`, `windows`, `hasfullscreen`, `lastwindow`, `lastwindowtitle`,
`ispersistent`).

`monitors` uses camelCase keys. It differs from Hyprland's own output in a few
places: `disabled` becomes `enabled`, `vrr` becomes `variableRefreshRate`,
and `specialWorkspace` and `mirrorOf` are `null` when Hyprland reports them
empty.

### eww workspaces

`listen-eww` prints nothing until the first relevant event. After that it
prints an array of workspace objects whenever Hyprland reports a change of
focused monitor, a workspace switch, a workspace being created, destroyed or
renamed, or a special workspace being toggled. Each object has:

| field          | meaning                                                          |
|----------------|------------------------------------------------------------------|
| `index`        | label to show, or `null`                                         |
| `icon`         | icon to show, or `null`                                          |
| `name`         | name to show, or `null`                                          |
| `active_on`    | monitor the workspace is shown on, or `null`                     |
| `is_special`   | whether it is a special workspace (negative id)                  |
| `special_name` | name without the `special:` prefix, for `togglespecialworkspace` |
| `id`           | workspace id, for `hyprctl dispatch workspace`                   |

A normal workspace named with a JSON array of three strings, such as
`["#","","web"]`, is split into index, icon and name; empty strings become
`null`, and `#` as the index stands for the workspace id. Any other normal
workspace uses its name as the index. Special workspaces get no index or
name; a few names (`special:guide`, `special:term`, `special:other`,
`special:music`, `special:notes`, `special:testing`) have built-in icons,
and the others use the workspace name as the icon.

If the daemon sends an error message on the stream, the command exits with
that error.

Errors inside the daemon are printed to its stderr and also shown as a
Hyprland notification.

## Python use

The modules can also be used on their own:

- `homehelper.hyprctl`: `send_command`, `reload`, and `notify` with
  `NotifyIcon` and `Color`.
- `homehelper.binds.binds()`, `homehelper.monitors.monitors()` and
  `homehelper.workspaces.workspaces()` return Hyprland's binds, monitors and
  workspaces as dataclasses; `parse_binds`, `parse_monitors` and
  `parse_workspaces` do the same from JSON text.
- `homehelper.events.read_event(line)` parses one line of the event socket
  into an event dataclass (unknown events become `Custom`), and
  `EventSocket` reads the socket without blocking.

## What it does not do

The daemon serves only the three requests above; it cannot change workspaces,
monitors or binds. The submap panel needs kitty and has no other display
backend.