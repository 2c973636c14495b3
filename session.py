"""
Screen controller for one visit to the game screen.

GameSession owns the single mutable GameState value and the screen flags
around it (countdown, pause, high score). The front end feeds it timer and
input events; every change replaces the state wholesale and then calls the
optional on_update callback so the caller can redraw.
"""

import logging
import random

from game_state import GRID_HEIGHT, GRID_WIDTH, START_LENGTH, is_valid_turn, new_game
from preferences import HIGH_SCORE_KEY

logger = logging.getLogger(__name__)

COUNTDOWN_FROM = 3


class GameSession:
    def __init__(
        self,
        prefs,
        on_back_to_menu,
        on_update=None,
        width=GRID_WIDTH,
        height=GRID_HEIGHT,
        start_length=START_LENGTH,
        rng=None,
    ):
        self.prefs = prefs
        self.on_back_to_menu = on_back_to_menu
        self.on_update = on_update
        self.width = width
        self.height = height
        self.start_length = start_length
        self.rng = rng if rng is not None else random.Random()
        self.high_score = prefs.get_int(HIGH_SCORE_KEY, 0)
        self._reset()

    def _reset(self):
        self.state = new_game(self.width, self.height, self.start_length, self.rng)
        self.countdown = COUNTDOWN_FROM
        self.started = False
        self.paused = False
        self.pending_direction = None

    def _changed(self):
        if self.on_update is not None:
            self.on_update(self)

    # Derived flags for drawing.

    @property
    def counting_down(self):
        return not self.started

    @property
    def running(self):
        return self.started and not self.paused and not self.state.game_over

    @property
    def show_pause_dialog(self):
        return self.paused and not self.state.game_over

    @property
    def show_game_over_dialog(self):
        return self.state.game_over

    @property
    def heading(self):
        """Heading to draw: the accepted pending turn, else the current one."""
        return self.pending_direction or self.state.direction

    # Timer events.

    def countdown_tick(self):
        """One step of the 3-2-1 countdown; the game starts when it runs out."""
        if self.started:
            return
        self.countdown = max(0, self.countdown - 1)
        if self.countdown == 0:
            self.started = True
            logger.info("Game started on a %dx%d grid", self.width, self.height)
        self._changed()

    def tick(self):
        """Advance the snake one cell if the game is active."""
        if not self.running:
            return
        self.state = self.state.move(self.pending_direction, self.rng)
        self.pending_direction = None
        if self.state.game_over:
            logger.info(
                "Game over (%s) with score %d, length %d",
                self.state.game_over_reason,
                self.state.score,
                self.state.length,
            )
            self.update_high_score()
        self._changed()

    # Input events.

    def request_direction(self, direction):
        """Queue a turn for the next tick; reversing the snake is ignored."""
        if not self.running:
            return
        # Checked against the heading the snake last moved in, not an
        # earlier request in the same tick.
        if not is_valid_turn(self.state.direction, direction):
            return
        self.pending_direction = direction
        self._changed()

    def back(self):
        """Back action: pause a game in progress, otherwise leave the screen."""
        if self.started and not self.state.game_over:
            self.paused = True
            self._changed()
        else:
            self.on_back_to_menu()

    def resume(self):
        self.paused = False
        self._changed()

    def quit(self):
        self.on_back_to_menu()

    def menu(self):
        self.on_back_to_menu()

    def restart(self):
        """Start over with a fresh board and a new countdown."""
        self._reset()
        logger.debug("Game restarted")
        self._changed()

    def update_high_score(self):
        if self.state.score > self.high_score:
            self.high_score = self.state.score
            self.prefs.put_int(HIGH_SCORE_KEY, self.high_score)
            logger.info("New high score: %d", self.high_score)
