"""User interface: display window and HUD rendering."""

from data_portrait.ui.display import DisplayWindow, KeyAction
from data_portrait.ui.hud import HUDRenderer

__all__ = ["DisplayWindow", "HUDRenderer", "KeyAction"]
