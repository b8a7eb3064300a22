"""Helper daemon for Hyprland: submap bind panels and workspace feeds for eww."""

__version__ = "0.1.0"