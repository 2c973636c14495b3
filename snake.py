import argparse
import logging
import sys
from collections import namedtuple

import pygame

from game_state import GRID_HEIGHT, GRID_WIDTH, START_LENGTH, Direction
from preferences import HIGH_SCORE_KEY, Preferences
from session import COUNTDOWN_FROM, GameSession

logger = logging.getLogger(__name__)

# Window configuration (portrait, like a phone screen)
WINDOW_WIDTH = 420
WINDOW_HEIGHT = 720
TOP_BAR_HEIGHT = 56
MARGIN = 16
PAD_BUTTON = 64
PAD_GAP = 6
FPS = 60
TICK_MS = 200
COUNTDOWN_MS = 1000

TICK_EVENT = pygame.USEREVENT + 1
COUNTDOWN_EVENT = pygame.USEREVENT + 2

# Colors (R, G, B)
BG_COLOR = (27, 94, 32)
BOARD_COLOR = (20, 70, 24)
GRID_LINE = (34, 104, 40)
DIALOG_COLOR = (46, 125, 50)
HEAD_COLOR = (200, 240, 120)
BODY_COLOR = (139, 195, 74)
FOOD_COLOR = (255, 83, 95)
FOOD_INNER = (255, 178, 184)
PAD_COLOR = (56, 142, 60)
PAD_ARROW = (232, 245, 233)
WHITE = (240, 240, 240)
DIM_WHITE = (200, 210, 200)
SHADOW = (0, 0, 0)

Layout = namedtuple("Layout", ["top_bar", "back", "board", "cell_size", "pad"])

KEY_TO_DIRECTION = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}


def key_to_direction(key):
    """Map an arrow or WASD key to a heading, or None."""
    return KEY_TO_DIRECTION.get(key)


def build_layout(grid_width, grid_height, window_width=WINDOW_WIDTH, window_height=WINDOW_HEIGHT):
    """Compute screen rectangles for the top bar, board and direction pad."""
    top_bar = pygame.Rect(0, 0, window_width, TOP_BAR_HEIGHT)
    back = pygame.Rect(8, 8, TOP_BAR_HEIGHT - 16, TOP_BAR_HEIGHT - 16)

    pad_height = 3 * PAD_BUTTON + 2 * PAD_GAP + 2 * MARGIN
    board_area = pygame.Rect(
        MARGIN,
        TOP_BAR_HEIGHT + MARGIN,
        window_width - 2 * MARGIN,
        window_height - TOP_BAR_HEIGHT - pad_height - 2 * MARGIN,
    )
    cell_size = min(board_area.width // grid_width, board_area.height // grid_height)
    if cell_size < 1:
        raise ValueError("Grid is too large for the window.")
    board = pygame.Rect(0, 0, cell_size * grid_width, cell_size * grid_height)
    board.center = board_area.center

    cx = window_width // 2
    cy = window_height - pad_height // 2
    half = PAD_BUTTON // 2
    pad = {
        Direction.UP: pygame.Rect(cx - half, cy - half - PAD_GAP - PAD_BUTTON, PAD_BUTTON, PAD_BUTTON),
        Direction.DOWN: pygame.Rect(cx - half, cy + half + PAD_GAP, PAD_BUTTON, PAD_BUTTON),
        Direction.LEFT: pygame.Rect(cx - half - PAD_GAP - PAD_BUTTON, cy - half, PAD_BUTTON, PAD_BUTTON),
        Direction.RIGHT: pygame.Rect(cx + half + PAD_GAP, cy - half, PAD_BUTTON, PAD_BUTTON),
    }
    return Layout(top_bar, back, board, cell_size, pad)


def pad_direction_at(layout, pos):
    """Return the heading of the direction-pad button under *pos*, if any."""
    for direction, rect in layout.pad.items():
        if rect.collidepoint(pos):
            return direction
    return None


def dialog_rects(window_width=WINDOW_WIDTH, window_height=WINDOW_HEIGHT):
    """Return (panel, dismiss_button, confirm_button) for a centered dialog."""
    panel = pygame.Rect(0, 0, window_width - 64, 220)
    panel.center = (window_width // 2, window_height // 2)
    button_w, button_h = 120, 44
    confirm = pygame.Rect(panel.right - 20 - button_w, panel.bottom - 20 - button_h, button_w, button_h)
    dismiss = confirm.move(-(button_w + 12), 0)
    return panel, dismiss, confirm


def menu_button_rects(window_width=WINDOW_WIDTH, window_height=WINDOW_HEIGHT):
    """Return (play_button, quit_button) for the main menu."""
    play = pygame.Rect(0, 0, 200, 56)
    play.center = (window_width // 2, window_height // 2 + 40)
    quit_button = play.move(0, 76)
    return play, quit_button


def get_ui_font(size):
    """Load a preferred UI font, then fall back safely to pygame default."""
    preferred = ["Roboto", "Segoe UI", "Helvetica", "Arial"]
    for name in preferred:
        path = pygame.font.match_font(name, bold=True)
        if path:
            return pygame.font.Font(path, size)
    return pygame.font.Font(None, size)


def load_fonts():
    return {
        "hud": get_ui_font(20),
        "text": get_ui_font(18),
        "title": get_ui_font(26),
        "countdown": get_ui_font(72),
        "logo": get_ui_font(64),
    }


def grid_rect(board, cell_size, grid_pos, padding=0):
    """Return a pixel rectangle for a grid position."""
    x, y = grid_pos
    return pygame.Rect(
        board.left + x * cell_size + padding,
        board.top + y * cell_size + padding,
        cell_size - padding * 2,
        cell_size - padding * 2,
    )


def draw_background(surface, layout):
    """Fill the screen and draw the board with subtle grid lines."""
    surface.fill(BG_COLOR)
    board = layout.board
    pygame.draw.rect(surface, BOARD_COLOR, board)
    for x in range(board.left, board.right + 1, layout.cell_size):
        pygame.draw.line(surface, GRID_LINE, (x, board.top), (x, board.bottom), 1)
    for y in range(board.top, board.bottom + 1, layout.cell_size):
        pygame.draw.line(surface, GRID_LINE, (board.left, y), (board.right, y), 1)


def draw_food(surface, layout, grid_pos):
    """Draw a round, highlighted food pellet."""
    if grid_pos is None:
        return
    rect = grid_rect(layout.board, layout.cell_size, grid_pos, padding=2)
    center = rect.center
    radius = max(1, rect.width // 2)
    pygame.draw.circle(surface, FOOD_COLOR, center, radius)
    pygame.draw.circle(surface, FOOD_INNER, (center[0] - radius // 3, center[1] - radius // 3), max(2, radius // 3))


def draw_snake(surface, layout, snake, direction):
    """Draw snake body with rounded corners and a distinct head."""
    radius = max(1, layout.cell_size // 4)
    for i, segment in enumerate(snake):
        rect = grid_rect(layout.board, layout.cell_size, segment, padding=1)
        color = HEAD_COLOR if i == 0 else BODY_COLOR
        pygame.draw.rect(surface, color, rect, border_radius=radius)

    # Draw simple eyes so head direction is easy to read.
    head_rect = grid_rect(layout.board, layout.cell_size, snake[0], padding=1)
    cx, cy = head_rect.center
    eye_offset = layout.cell_size // 5
    spread = layout.cell_size // 6
    dx, dy = direction.value
    if dx == 1:
        eyes = [(cx + eye_offset, cy - spread), (cx + eye_offset, cy + spread)]
    elif dx == -1:
        eyes = [(cx - eye_offset, cy - spread), (cx - eye_offset, cy + spread)]
    elif dy == -1:
        eyes = [(cx - spread, cy - eye_offset), (cx + spread, cy - eye_offset)]
    else:
        eyes = [(cx - spread, cy + eye_offset), (cx + spread, cy + eye_offset)]
    for ex, ey in eyes:
        pygame.draw.circle(surface, SHADOW, (ex, ey), max(1, layout.cell_size // 10))


def draw_top_bar(surface, font, layout, score, best_score):
    """Draw the back arrow and the score / best labels."""
    back = layout.back
    cy = back.centery
    pygame.draw.line(surface, WHITE, (back.left + 8, cy), (back.right - 8, cy), 3)
    pygame.draw.polygon(
        surface,
        WHITE,
        [(back.left + 6, cy), (back.left + 18, cy - 10), (back.left + 18, cy + 10)],
    )

    score_text = font.render(f"Score: {score}", True, WHITE)
    best_text = font.render(f"Best: {best_score}", True, DIM_WHITE)
    total_w = score_text.get_width() + 16 + best_text.get_width()
    x = layout.top_bar.centerx - total_w // 2
    bar_cy = layout.top_bar.centery
    surface.blit(score_text, (x, bar_cy - score_text.get_height() // 2))
    surface.blit(best_text, (x + score_text.get_width() + 16, bar_cy - best_text.get_height() // 2))


def draw_pad(surface, layout, enabled):
    """Draw the on-screen direction pad."""
    color = PAD_COLOR if enabled else BOARD_COLOR
    for direction, rect in layout.pad.items():
        pygame.draw.rect(surface, color, rect, border_radius=12)
        cx, cy = rect.center
        s = PAD_BUTTON // 4
        dx, dy = direction.value
        if dx:
            points = [(cx + dx * s, cy), (cx - dx * s, cy - s), (cx - dx * s, cy + s)]
        else:
            points = [(cx, cy + dy * s), (cx - s, cy - dy * s), (cx + s, cy - dy * s)]
        pygame.draw.polygon(surface, PAD_ARROW, points)


def draw_countdown_overlay(surface, font, layout, countdown):
    """Dim the board and show the remaining countdown seconds."""
    board = layout.board
    shade = pygame.Surface((board.width, board.height), pygame.SRCALPHA)
    shade.fill((0, 0, 0, 180))
    surface.blit(shade, board.topleft)
    label = font.render(str(countdown), True, WHITE)
    surface.blit(label, label.get_rect(center=board.center))


def draw_button(surface, font, rect, text, fill=None):
    if fill is not None:
        pygame.draw.rect(surface, fill, rect, border_radius=10)
    label = font.render(text, True, WHITE)
    surface.blit(label, label.get_rect(center=rect.center))


def draw_dialog(surface, fonts, title, lines, dismiss_label, confirm_label):
    """Draw a modal dialog with a title, body lines and two text buttons."""
    width, height = surface.get_size()
    shade = pygame.Surface((width, height), pygame.SRCALPHA)
    shade.fill((0, 0, 0, 140))
    surface.blit(shade, (0, 0))

    panel, dismiss, confirm = dialog_rects(width, height)
    pygame.draw.rect(surface, DIALOG_COLOR, panel, border_radius=16)

    y = panel.top + 22
    title_surface = fonts["title"].render(title, True, WHITE)
    surface.blit(title_surface, (panel.left + 24, y))
    y += title_surface.get_height() + 14
    for line in lines:
        line_surface = fonts["text"].render(line, True, WHITE)
        surface.blit(line_surface, (panel.left + 24, y))
        y += fonts["text"].get_height() + 6

    draw_button(surface, fonts["text"], dismiss, dismiss_label)
    draw_button(surface, fonts["text"], confirm, confirm_label)


def draw_game(surface, fonts, layout, session):
    """Render one frame of the game screen from the session state."""
    state = session.state
    draw_background(surface, layout)
    draw_food(surface, layout, state.food)
    draw_snake(surface, layout, state.snake, session.heading)
    draw_top_bar(surface, fonts["hud"], layout, state.score, session.high_score)
    draw_pad(surface, layout, session.running)

    if session.counting_down:
        draw_countdown_overlay(surface, fonts["countdown"], layout, session.countdown)
    if session.show_game_over_dialog:
        draw_dialog(
            surface,
            fonts,
            "Game Over!",
            [f"Score: {state.score}", f"Best: {session.high_score}"],
            "Try Again",
            "Main Menu",
        )
    elif session.show_pause_dialog:
        draw_dialog(surface, fonts, "Pause", ["Do you want to quit the game?"], "Resume", "Quit")


def draw_menu(surface, fonts, best_score):
    """Draw the main menu with the stored best score."""
    width, height = surface.get_size()
    surface.fill(BG_COLOR)
    logo = fonts["logo"].render("SNAKE", True, WHITE)
    surface.blit(logo, logo.get_rect(center=(width // 2, height // 3)))
    best = fonts["hud"].render(f"Best: {best_score}", True, DIM_WHITE)
    surface.blit(best, best.get_rect(center=(width // 2, height // 3 + 60)))

    play, quit_button = menu_button_rects(width, height)
    draw_button(surface, fonts["title"], play, "Play", fill=DIALOG_COLOR)
    draw_button(surface, fonts["title"], quit_button, "Quit", fill=DIALOG_COLOR)


def start_countdown_timer():
    pygame.time.set_timer(COUNTDOWN_EVENT, COUNTDOWN_MS, loops=COUNTDOWN_FROM)


def stop_timers():
    pygame.time.set_timer(TICK_EVENT, 0)
    pygame.time.set_timer(COUNTDOWN_EVENT, 0)
    pygame.event.clear((TICK_EVENT, COUNTDOWN_EVENT))


def handle_click(session, layout, pos, window_size):
    """Route a mouse or touch press to the dialog, back button or pad."""
    panel, dismiss, confirm = dialog_rects(*window_size)

    if session.show_game_over_dialog:
        if confirm.collidepoint(pos):
            session.menu()
        elif dismiss.collidepoint(pos):
            session.restart()
            start_countdown_timer()
        return

    if session.show_pause_dialog:
        if confirm.collidepoint(pos):
            session.quit()
        elif dismiss.collidepoint(pos) or not panel.collidepoint(pos):
            session.resume()
        return

    if layout.back.collidepoint(pos):
        session.back()
        return

    direction = pad_direction_at(layout, pos)
    if direction is not None:
        session.request_direction(direction)


def handle_key(session, key):
    """Route a key press according to which dialog, if any, is showing."""
    if session.show_game_over_dialog:
        if key == pygame.K_r:
            session.restart()
            start_countdown_timer()
        elif key in (pygame.K_m, pygame.K_ESCAPE, pygame.K_BACKSPACE):
            session.menu()
        return

    if session.show_pause_dialog:
        if key == pygame.K_q:
            session.quit()
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_RETURN, pygame.K_SPACE, pygame.K_p):
            session.resume()
        return

    if key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
        session.back()
    elif key == pygame.K_p and session.running:
        session.back()
    else:
        direction = key_to_direction(key)
        if direction is not None:
            session.request_direction(direction)


def run_game(screen, fonts, prefs, config):
    """Run the game screen until the player leaves it; return 'menu' or 'quit'."""
    clock = pygame.time.Clock()
    layout = build_layout(config.grid_width, config.grid_height, *screen.get_size())
    navigation = {"target": None}

    def back_to_menu():
        navigation["target"] = "menu"

    def render(session):
        draw_game(screen, fonts, layout, session)
        pygame.display.flip()

    session = GameSession(
        prefs,
        back_to_menu,
        on_update=render,
        width=config.grid_width,
        height=config.grid_height,
    )
    render(session)

    pygame.time.set_timer(TICK_EVENT, config.tick_ms)
    start_countdown_timer()
    try:
        while navigation["target"] is None:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return "quit"
                if event.type == TICK_EVENT:
                    session.tick()
                elif event.type == COUNTDOWN_EVENT:
                    session.countdown_tick()
                elif event.type == pygame.KEYDOWN:
                    handle_key(session, event.key)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    handle_click(session, layout, event.pos, screen.get_size())
                elif event.type == pygame.WINDOWEXPOSED:
                    render(session)
                if navigation["target"] is not None:
                    break
            clock.tick(FPS)
    finally:
        stop_timers()
    return navigation["target"]


def run_menu(screen, fonts, prefs):
    """Show the main menu; return 'play' or 'quit'."""
    clock = pygame.time.Clock()
    play, quit_button = menu_button_rects(*screen.get_size())
    draw_menu(screen, fonts, prefs.get_int(HIGH_SCORE_KEY, 0))
    pygame.display.flip()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return "quit"
            if event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_RETURN, pygame.K_SPACE):
                    return "play"
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    return "quit"
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if play.collidepoint(event.pos):
                    return "play"
                if quit_button.collidepoint(event.pos):
                    return "quit"
        clock.tick(30)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play Snake with keyboard or an on-screen direction pad.")
    parser.add_argument("--grid-width", type=int, default=GRID_WIDTH, help="Board width in cells")
    parser.add_argument("--grid-height", type=int, default=GRID_HEIGHT, help="Board height in cells")
    parser.add_argument("--tick-ms", type=int, default=TICK_MS, help="Milliseconds between snake moves")
    parser.add_argument("--prefs", default=None, help="Path of the preferences JSON file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args(argv)

    if args.grid_width < START_LENGTH or args.grid_height < 1:
        parser.error(f"grid must be at least {START_LENGTH} cells wide and 1 cell high")
    if args.tick_ms < 1:
        parser.error("--tick-ms must be positive")
    try:
        build_layout(args.grid_width, args.grid_height)
    except ValueError:
        parser.error(
            f"a {args.grid_width}x{args.grid_height} grid does not fit the "
            f"{WINDOW_WIDTH}x{WINDOW_HEIGHT} window"
        )
    return args


def main(argv=None):
    config = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    prefs = Preferences(config.prefs)
    logger.info("Using preferences at %s", prefs.path)

    pygame.init()
    pygame.display.set_caption("Snake")
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    fonts = load_fonts()

    screen_name = "menu"
    while screen_name != "quit":
        if screen_name == "menu":
            screen_name = "game" if run_menu(screen, fonts, prefs) == "play" else "quit"
        else:
            screen_name = run_game(screen, fonts, prefs, config)

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
