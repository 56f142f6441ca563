"""
Interactive demo for tilewave.
Display a window of the field and edit or generate it with keyboard commands.
"""

import logging
import random
import sys
import time
from dataclasses import dataclass

import readchar
from pyrsistent import pmap
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_field
from demo import TILESETS, load_tileset
from history import History
from tile_types import Coordinate, Direction, RuleSet, TileSet, TileState, WaveField
from wavefield import (
    collapse,
    collapse_one,
    delete_tile,
    find_contradictions,
    get_tile,
    is_resolved,
    set_tile_state,
    tile_type_weight,
)

MOVES = {
    "w": Direction.TOP,
    "a": Direction.LEFT,
    "s": Direction.BOTTOM,
    "d": Direction.RIGHT,
}


@dataclass(frozen=True)
class DemoConfig:
    """Settings for the interactive demo."""

    autogen_fps: int = 60
    autogen_steps: int = 200  # Collapses per 'g' burst
    view_width: int = 24
    view_height: int = 12


class InteractiveDemo:
    """Interactive demo for placing, collapsing and generating tiles."""

    def __init__(
        self,
        tileset: TileSet,
        config: DemoConfig = DemoConfig(),
        rules: RuleSet = RuleSet(),
        seed: int | None = None,
    ) -> None:
        self.tileset = tileset
        self.config = config
        self.rules = rules
        self.rng = random.Random(seed)
        self.history = History(pmap())
        self.cursor = Coordinate(0, 0)
        self.selected_type = next(iter(tileset), None)
        self.selected_rotation = 0
        self.console = Console()
        self.status_message = "Ready"

    @property
    def field(self) -> WaveField:
        return self.history.current

    def view_bounds(self) -> tuple[int, int, int, int]:
        """Window centred on the cursor."""
        half_w = self.config.view_width // 2
        half_h = self.config.view_height // 2
        return (
            self.cursor.x - half_w,
            self.cursor.y - half_h,
            self.cursor.x - half_w + self.config.view_width - 1,
            self.cursor.y - half_h + self.config.view_height - 1,
        )

    def generate_display(self) -> Panel:
        """Generate the current display with field and status."""
        field_text = render_field(self.field, self.view_bounds(), highlight_pos=self.cursor)

        status = Text()
        status.append("Cursor: ", style="bold")
        status.append(f"({self.cursor.x}, {self.cursor.y})  ")

        tile = get_tile(self.field, self.cursor, self.tileset)
        assert tile is not None
        status.append("Options: ", style="bold")
        status.append(f"{len(tile.superstate)}\n")

        status.append("Placing: ", style="bold")
        if self.selected_type is None:
            status.append("(empty tileset)\n\n")
        else:
            status.append(f"{self.selected_type} rotation {self.selected_rotation}\n\n")

        # Convert ANSI-colored field text to Rich Text properly
        status.append(Text.from_ansi(field_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  WASD  - Move cursor\n")
        status.append("  1-9   - Select tile type    R - Rotate selection\n")
        status.append("  Enter - Place selection     C - Collapse cursor cell\n")
        status.append("  X     - Delete cursor cell  Space - Step\n")
        status.append("  G     - Generate burst      U/Y - Undo/Redo\n")
        status.append("  N     - Clear               Q - Quit\n\n")

        # Status line at the bottom
        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Tilewave Interactive Demo", border_style="green", width=80)

    def select_type(self, index: int) -> None:
        type_ids = list(self.tileset)
        if index >= len(type_ids):
            self.status_message = f"No tile type #{index + 1}"
            return
        self.selected_type = type_ids[index]
        self.selected_rotation = 0
        self.status_message = f"Selected {self.selected_type}"

    def rotate_selection(self) -> None:
        if self.selected_type is None or not self.tileset[self.selected_type].can_be_rotated:
            self.status_message = "Selected tile cannot be rotated"
            return
        self.selected_rotation = (self.selected_rotation + 1) % 4

    def place(self) -> None:
        if self.selected_type is None:
            self.status_message = "Nothing to place"
            return
        state = TileState(self.tileset[self.selected_type], self.selected_rotation)
        self.history.record(set_tile_state(self.field, self.cursor, state, self.tileset, self.rules))
        self.report(f"Placed {self.selected_type}")

    def collapse_cursor(self) -> None:
        field = collapse(self.field, self.cursor, self.tileset, self.rules, tile_type_weight, self.rng)
        if field is self.field:
            self.status_message = "Nothing to collapse here"
            return
        self.history.record(field)
        self.report("Collapsed cursor cell")

    def delete_cursor(self) -> None:
        self.history.record(delete_tile(self.field, self.cursor))
        self.report("Deleted cursor cell")

    def step(self) -> bool:
        """Collapse one cell. Returns False when no cell can be collapsed."""
        field = collapse_one(self.field, self.tileset, self.rules, tile_type_weight, self.rng)
        if field is self.field:
            self.status_message = "No collapsible cells"
            return False
        self.history.record(field)
        self.report("Stepped")
        return True

    def generate(self, live: Live) -> None:
        """Collapse repeatedly, redrawing at the configured frame rate."""
        delay = 1 / self.config.autogen_fps
        for _ in range(self.config.autogen_steps):
            if not self.step():
                break
            live.update(self.generate_display())
            time.sleep(delay)

    def report(self, action: str) -> None:
        contradictions = find_contradictions(self.field)
        if contradictions:
            self.status_message = f"✗ {action}, {len(contradictions)} contradictions"
        elif self.field and is_resolved(self.field):
            self.status_message = f"✓ {action}, all materialized cells resolved"
        else:
            self.status_message = f"✓ {action}"

    def run(self) -> None:
        """Run the interactive demo."""
        if not self.tileset:
            print("ERROR: Tileset is empty!")
            return

        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    # Update display
                    live.update(self.generate_display())

                    # Get single key press
                    key = readchar.readkey()

                    # Handle key press
                    if key.lower() == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key.lower() in MOVES:
                        self.cursor = self.cursor.neighbor(MOVES[key.lower()])
                    elif key.isdigit() and key != "0":
                        self.select_type(int(key) - 1)
                    elif key.lower() == "r":
                        self.rotate_selection()
                    elif key in (readchar.key.ENTER, readchar.key.CR, readchar.key.LF):
                        self.place()
                    elif key.lower() == "c":
                        self.collapse_cursor()
                    elif key.lower() == "x":
                        self.delete_cursor()
                    elif key == " ":
                        self.step()
                    elif key.lower() == "g":
                        self.generate(live)
                    elif key.lower() == "u":
                        self.history.undo()
                        self.status_message = "Undone"
                    elif key.lower() == "y":
                        self.history.redo()
                        self.status_message = "Redone"
                    elif key.lower() == "n":
                        self.history.record(pmap())
                        self.status_message = "Cleared"
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


if __name__ == "__main__":
    logging.basicConfig(level=logging.ERROR, format="%(levelname)s: %(message)s")

    tileset_name = sys.argv[1] if len(sys.argv) > 1 else "coast"
    if tileset_name not in TILESETS:
        print(f"Unknown tileset '{tileset_name}'. Available: {', '.join(TILESETS)}")
        sys.exit(1)

    seed = int(sys.argv[2]) if len(sys.argv) > 2 else None
    InteractiveDemo(load_tileset(tileset_name), seed=seed).run()
