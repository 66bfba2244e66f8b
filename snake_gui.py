# Spelling Snake player GUI: draws StepResult snapshots and forwards input.
from __future__ import annotations

import tkinter as tk
from tkinter import messagebox

# Support both package imports and running this file directly.
try:
    from .controller import GameController
    from .controls import DIRECTION_BUTTONS, SwipeTracker, direction_for_key
    from .game_logic import MAX_CELL_SIZE, MAX_SPEED_MS, MIN_CELL_SIZE, MIN_SPEED_MS, SpellingConfig
    from .session import GameOverCause, GameStateMachine, RoundPhase, StepResult, TickEvent
except ImportError:
    from controller import GameController
    from controls import DIRECTION_BUTTONS, SwipeTracker, direction_for_key
    from game_logic import MAX_CELL_SIZE, MAX_SPEED_MS, MIN_CELL_SIZE, MIN_SPEED_MS, SpellingConfig
    from session import GameOverCause, GameStateMachine, RoundPhase, StepResult, TickEvent


CAUSE_TEXT = {
    GameOverCause.WALL: "You hit the wall!",
    GameOverCause.SELF_COLLISION: "You bit your own tail!",
    GameOverCause.STRIKES: "Too many wrong letters!",
    GameOverCause.CONFIGURATION: "No word to spell.",
}


class SpellingSnakeApp:
    """Tkinter presentation layer; never mutates game state directly."""
    BG = "#101418"
    BOARD_BG = "#16213e"
    SIDEBAR_BG = "#0f1720"
    GRID_COLOR = "#1a2744"
    SNAKE_HEAD = "#4ade80"
    SNAKE_BODY = "#22c55e"
    SNAKE_OUTLINE = "#166534"
    LETTER_BG = "#fbbf24"  # every letter looks the same: no hints
    LETTER_TEXT = "#1a1a2e"
    LIFE_COLOR = "#ff5c74"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"

    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("Spelling Snake")
        self.root.configure(bg=self.BG)

        self.config = SpellingConfig()
        self.machine = GameStateMachine(self.config)
        # The Tk root doubles as the scheduler: after()/after_cancel().
        self.controller = GameController(self.machine, self.root, self.draw)
        self.swipe = SwipeTracker()

        self._build_layout()
        self._bind_input()
        self._apply_canvas_size()
        self.draw(self.machine.snapshot())

    def _build_layout(self) -> None:
        """Create game canvas + right sidebar panels."""
        container = tk.Frame(self.root, bg=self.BG)
        container.pack(fill="both", expand=True, padx=16, pady=16)

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.pack(side="left", padx=(0, 16))

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG, width=320)
        self.sidebar.pack(side="left", fill="y")

        self.glyph_var = tk.StringVar(value="")
        self.word_var = tk.StringVar(value="")
        self.score_var = tk.StringVar(value="Score: 0")
        self.level_var = tk.StringVar(value="Level: 1")
        self.strikes_var = tk.StringVar(value="")
        self.state_var = tk.StringVar(value="Press Start")

        tk.Label(self.sidebar, textvariable=self.glyph_var, bg=self.SIDEBAR_BG,
                 fg=self.TEXT_PRIMARY, font=("Helvetica", 40)).pack(pady=(16, 4))
        tk.Label(self.sidebar, textvariable=self.word_var, bg=self.SIDEBAR_BG,
                 fg=self.TEXT_PRIMARY, font=("Courier", 22, "bold")).pack(pady=(0, 12))
        for var in (self.score_var, self.level_var, self.strikes_var, self.state_var):
            tk.Label(self.sidebar, textvariable=var, bg=self.SIDEBAR_BG, fg=self.TEXT_PRIMARY,
                     font=("Helvetica", 12), anchor="w").pack(fill="x", padx=16, pady=2)

        self.wrap_var = tk.BooleanVar(value=self.config.wrap_walls)
        tk.Checkbutton(
            self.sidebar, text="Wrap around edges", variable=self.wrap_var,
            command=self.toggle_wrap, bg=self.SIDEBAR_BG, fg=self.TEXT_MUTED,
            selectcolor=self.SIDEBAR_BG, activebackground=self.SIDEBAR_BG,
        ).pack(anchor="w", padx=16, pady=(12, 4))

        speed_row = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        speed_row.pack(fill="x", padx=16, pady=4)
        tk.Label(speed_row, text="Start speed (ms)", bg=self.SIDEBAR_BG, fg=self.TEXT_MUTED).pack(side="left")
        self.speed_var = tk.StringVar(value=str(self.config.speed_ms))
        tk.Spinbox(speed_row, from_=MIN_SPEED_MS, to=MAX_SPEED_MS, textvariable=self.speed_var,
                   width=6, justify="center").pack(side="right")

        cell_row = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        cell_row.pack(fill="x", padx=16, pady=4)
        tk.Label(cell_row, text="Cell size", bg=self.SIDEBAR_BG, fg=self.TEXT_MUTED).pack(side="left")
        self.cell_size_var = tk.StringVar(value=str(self.config.cell_size))
        tk.Spinbox(cell_row, from_=MIN_CELL_SIZE, to=MAX_CELL_SIZE, textvariable=self.cell_size_var,
                   width=6, justify="center").pack(side="right")

        for text, command in (
            ("Start", self.start_game),
            ("Pause", self.toggle_pause),
            ("Restart", self.start_game),
            ("Menu", self.return_to_menu),
        ):
            tk.Button(self.sidebar, text=text, command=command, fg="#09141f", bg=self.ACCENT,
                      activebackground="#74d8ff", bd=0, relief="flat",
                      font=("Helvetica", 11, "bold"), pady=6).pack(fill="x", padx=16, pady=4)

        tk.Label(self.sidebar, text="Move: Arrow keys / WASD / swipe / pad", bg=self.SIDEBAR_BG,
                 fg=self.TEXT_MUTED).pack(anchor="w", padx=16, pady=(8, 4))

        pad = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        pad.pack(pady=(4, 16))
        for label, direction, row, col in DIRECTION_BUTTONS:
            tk.Button(pad, text=label, width=3, command=lambda d=direction: self.controller.push_direction(d),
                      fg=self.TEXT_PRIMARY, bg=self.GRID_COLOR, activebackground=self.ACCENT,
                      bd=0, relief="flat", font=("Helvetica", 14)).grid(row=row, column=col, padx=2, pady=2)

    def _bind_input(self) -> None:
        """Keys and pointer swipes only enqueue directions."""
        self.root.bind("<Key>", self._on_key)
        self.root.bind("<space>", lambda _e: self.toggle_pause())
        self.canvas.bind("<ButtonPress-1>", lambda e: self.swipe.press(e.x, e.y))
        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", lambda _e: self.swipe.release())

    def _on_key(self, event: tk.Event) -> None:
        direction = direction_for_key(event.keysym)
        if direction is not None:
            self.controller.push_direction(direction)

    def _on_drag(self, event: tk.Event) -> None:
        direction = self.swipe.drag(event.x, event.y)
        if direction is not None:
            self.controller.push_direction(direction)

    def _parse_int(self, raw: str, low: int, high: int, label: str) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{label} must be an integer.")
        if not (low <= value <= high):
            raise ValueError(f"{label} must be between {low} and {high}.")
        return value

    def _apply_canvas_size(self) -> None:
        self.canvas.configure(
            width=self.config.grid_width * self.config.cell_size,
            height=self.config.grid_height * self.config.cell_size,
        )

    def start_game(self) -> None:
        try:
            self.config.speed_ms = self._parse_int(self.speed_var.get(), MIN_SPEED_MS, MAX_SPEED_MS, "Speed")
            self.config.cell_size = self._parse_int(
                self.cell_size_var.get(), MIN_CELL_SIZE, MAX_CELL_SIZE, "Cell size"
            )
            self.config.validate()
        except ValueError as exc:
            messagebox.showerror("Invalid Setting", str(exc))
            return
        self._apply_canvas_size()
        self.controller.start()

    def return_to_menu(self) -> None:
        self.controller.return_to_menu()
        self.draw(self.machine.snapshot())
        self.state_var.set("Press Start")

    def toggle_pause(self) -> None:
        """Pause/resume without losing current board state."""
        self.controller.toggle_pause()
        if self.machine.is_active:
            self.state_var.set("Paused" if self.controller.paused else "Running")

    def toggle_wrap(self) -> None:
        self.controller.set_wrap_mode(self.wrap_var.get())

    def draw(self, result: StepResult) -> None:
        """Render board, letters, snake, and sidebar readouts for one snapshot."""
        self.canvas.delete("all")
        cell = self.config.cell_size
        width, height = result.width * cell, result.height * cell

        if self.config.show_grid:
            for x in range(result.width + 1):
                self.canvas.create_line(x * cell, 0, x * cell, height, fill=self.GRID_COLOR)
            for y in range(result.height + 1):
                self.canvas.create_line(0, y * cell, width, y * cell, fill=self.GRID_COLOR)

        for letter in result.letters:
            x1, y1 = letter.cell.x * cell + 2, letter.cell.y * cell + 2
            x2, y2 = x1 + cell - 4, y1 + cell - 4
            if letter.is_life_token:
                self.canvas.create_oval(x1, y1, x2, y2, fill=self.LIFE_COLOR, outline="")
                self.canvas.create_text((x1 + x2) // 2, (y1 + y2) // 2, text="♥", fill="#ffffff")
                continue
            self.canvas.create_oval(x1, y1, x2, y2, fill=self.LETTER_BG, outline="")
            self.canvas.create_text((x1 + x2) // 2, (y1 + y2) // 2, text=letter.char,
                                    fill=self.LETTER_TEXT, font=("Helvetica", cell // 2, "bold"))

        for idx, (x, y) in enumerate(result.snake):
            color = self.SNAKE_HEAD if idx == 0 else self.SNAKE_BODY
            self.canvas.create_rectangle(x * cell + 2, y * cell + 2, (x + 1) * cell - 2, (y + 1) * cell - 2,
                                         fill=color, outline=self.SNAKE_OUTLINE)

        self._update_sidebar(result)

        if result.is_game_over:
            self.canvas.create_rectangle(0, 0, width, height, fill="#000000", stipple="gray50", outline="")
            self.canvas.create_text(width // 2, height // 2 - 24, text="Game Over",
                                    fill=self.TEXT_PRIMARY, font=("Helvetica", 22, "bold"))
            self.canvas.create_text(width // 2, height // 2 + 8, text=CAUSE_TEXT.get(result.cause, ""),
                                    fill=self.TEXT_MUTED, font=("Helvetica", 12))
            self.canvas.create_text(width // 2, height // 2 + 32,
                                    text=f"Score {result.score} • Animals spelled {result.words_completed}",
                                    fill=self.TEXT_MUTED, font=("Helvetica", 12))

    def _update_sidebar(self, result: StepResult) -> None:
        word = result.word
        if word is None:
            self.glyph_var.set("")
            self.word_var.set("")
        elif result.phase is RoundPhase.WORD_COMPLETE:
            self.glyph_var.set(word.glyph)
            self.word_var.set(" ".join(word.text))
        else:
            self.glyph_var.set(word.glyph)
            # Uncollected letters stay hidden.
            shown = [c if i < result.letter_index else "?" for i, c in enumerate(word.text)]
            self.word_var.set(" ".join(shown))

        self.score_var.set(f"Score: {result.score}")
        self.level_var.set(f"Level: {result.level}")
        self.strikes_var.set("Lives: " + "♥" * (result.max_strikes - result.strikes))

        if result.is_game_over:
            self.state_var.set("Game Over - press Restart")
        elif result.event is TickEvent.WORD_COMPLETE:
            self.state_var.set("Great spelling! Finding next animal...")
        elif result.event is TickEvent.ROUND_STARTED:
            self.state_var.set("Spell the animal!")
        else:
            self.state_var.set("Running")


def run_player_gui() -> None:
    """Launch the Spelling Snake player interface."""
    root = tk.Tk()
    SpellingSnakeApp(root)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
