import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

GRID_WIDTH = 20
GRID_HEIGHT = 20
START_LENGTH = 3
FOOD_SCORE = 1


class Direction(Enum):
    """Cardinal headings as (dx, dy) grid vectors; y grows downward."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self):
        dx, dy = self.value
        return Direction((-dx, -dy))


def is_valid_turn(current, proposed):
    """A heading change is allowed unless it reverses the snake in place."""
    return proposed is not current.opposite


def random_food_position(snake, width, height, rng=random):
    """Return a uniformly random free cell, or None if the snake fills the grid."""
    occupied = set(snake)
    free = [(x, y) for y in range(height) for x in range(width) if (x, y) not in occupied]
    if not free:
        return None
    return rng.choice(free)


@dataclass(frozen=True)
class GameState:
    """One snapshot of a game. Never mutated; move() returns the next value."""

    snake: tuple  # (x, y) cells, head first
    direction: Direction = Direction.RIGHT
    food: Optional[tuple] = None
    score: int = 0
    game_over: bool = False
    game_over_reason: Optional[str] = None  # "wall" | "self" | "full"
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT

    @property
    def head(self):
        return self.snake[0]

    @property
    def length(self):
        return len(self.snake)

    def in_bounds(self, cell):
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def with_direction(self, proposed):
        """Return a copy heading in *proposed*, or self if the turn is not allowed."""
        if self.game_over or not is_valid_turn(self.direction, proposed):
            return self
        return replace(self, direction=proposed)

    def move(self, heading=None, rng=random):
        """
        Advance the game by one tick.

        *heading* is an optional pending turn; it is dropped when it would
        reverse the snake. Hitting a wall or the body ends the game and
        leaves the body where it was. Eating food grows the snake by one
        cell and relocates the food to a random free cell.
        """
        if self.game_over:
            return self

        direction = self.direction
        if heading is not None and is_valid_turn(direction, heading):
            direction = heading

        hx, hy = self.head
        dx, dy = direction.value
        new_head = (hx + dx, hy + dy)
        will_grow = new_head == self.food

        if not self.in_bounds(new_head):
            return replace(self, direction=direction, game_over=True, game_over_reason="wall")

        # The tail cell frees up this tick unless the snake is growing.
        body_to_check = self.snake if will_grow else self.snake[:-1]
        if new_head in body_to_check:
            return replace(self, direction=direction, game_over=True, game_over_reason="self")

        if not will_grow:
            return replace(self, snake=(new_head,) + self.snake[:-1], direction=direction)

        snake = (new_head,) + self.snake
        food = random_food_position(snake, self.width, self.height, rng)
        score = self.score + FOOD_SCORE
        if food is None:
            logger.info("Board filled at score %d", score)
            return replace(
                self,
                snake=snake,
                direction=direction,
                food=None,
                score=score,
                game_over=True,
                game_over_reason="full",
            )
        return replace(self, snake=snake, direction=direction, food=food, score=score)


def new_game(width=GRID_WIDTH, height=GRID_HEIGHT, length=START_LENGTH, rng=random):
    """Create a horizontal snake centred on the board, heading right."""
    if width < 1 or height < 1:
        raise ValueError("Grid must be at least 1x1.")
    if length < 1 or length > width:
        raise ValueError("Snake length does not fit within the grid width.")

    # Centre the whole snake, with segments extending left from the head.
    tail_x = (width - length) // 2
    head_x = tail_x + length - 1
    head_y = height // 2

    snake = tuple((head_x - i, head_y) for i in range(length))
    food = random_food_position(snake, width, height, rng)
    return GameState(snake=snake, direction=Direction.RIGHT, food=food, width=width, height=height)
