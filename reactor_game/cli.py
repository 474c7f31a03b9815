#!/usr/bin/env python3
"""
Reactor Game - Command Line Interface

Runs autopilot rounds with a live gauge display, and manages the high score
and configuration files.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from reactor_game.autopilot import AutoOperator, play_round
from reactor_game.config import GameConfig, load_config, save_config
from reactor_game.exceptions import ReactorGameError
from reactor_game.game import ReactorGame, RoundResult
from reactor_game.high_score import create_store

logger = logging.getLogger("reactor_game")

BAND_STYLES = {"normal": "green", "warning": "yellow", "danger": "bold red"}


def _bar(percent: float, width: int = 30) -> str:
    filled = int(round(max(0.0, min(percent, 100.0)) / 100.0 * width))
    return "█" * filled + "░" * (width - filled)


def _velocity_bar(signed_half_percent: float, width: int = 30) -> str:
    half = width // 2
    cells = int(round(min(abs(signed_half_percent), 50.0) / 50.0 * half))
    if signed_half_percent >= 0:
        return "░" * half + "█" * cells + "░" * (half - cells)
    return "░" * (half - cells) + "█" * cells + "░" * half


def render_game(game: ReactorGame) -> Panel:
    """Gauge panel for the current state"""
    s = game.state
    r = game.readings()
    status = game.status()
    band_style = BAND_STYLES[r.temperature_band]

    table = Table(show_header=False, box=None, expand=False)
    table.add_column("Gauge", style="bold")
    table.add_column("Bar")
    table.add_column("Value", justify="right")

    table.add_row("Power", Text(_bar(r.power_bar), style="cyan"), f"{s.power:.1f}%")
    table.add_row("Temperature", Text(_bar(r.temperature_bar), style=band_style),
                  f"{int(s.temperature)}°C")
    velocity_style = "magenta" if s.power_velocity >= 0 else "blue"
    sign = "+" if s.power_velocity >= 0 else ""
    table.add_row("Velocity", Text(_velocity_bar(r.velocity_bar), style=velocity_style),
                  f"{sign}{s.power_velocity:.1f}/s")
    table.add_row("Rods", Text(_bar(s.rod_position), style="white"), f"{int(s.rod_position)}%")
    table.add_row("", "", "")
    table.add_row("Points", "", f"{int(s.points)}")
    table.add_row("Time", "", f"{s.time_running:.1f}s")
    table.add_row("High score", "", f"{game.high_score}")

    title = Text(status.value, style=BAND_STYLES[status.severity])
    return Panel(table, title=title, border_style=BAND_STYLES[status.severity])


def render_result(result: RoundResult) -> Panel:
    style = "green" if result.outcome.success else "red"
    body = Text()
    body.append(f"{result.message}\n", style="bold")
    body.append(f"{result.score_text}\n")
    body.append(f"Time running: {result.time_running:.1f}s")
    if result.new_high_score:
        body.append("\nNEW HIGH SCORE", style="bold yellow")
    return Panel(body, title=result.title, border_style=style)


def cmd_autoplay(args, config: GameConfig, console: Console) -> int:
    game = ReactorGame(config)
    operator = AutoOperator(
        config.reactor,
        target_temperature=args.target_temp,
        bank_at_points=args.bank_at,
    )

    if args.no_live:
        result = play_round(game, operator, dt=args.dt, max_time=args.max_time)
        console.print(render_game(game))
    else:
        with Live(render_game(game), console=console, refresh_per_second=20) as live:
            result = play_round(game, operator, dt=args.dt, max_time=args.max_time,
                                on_frame=lambda g: live.update(render_game(g)))

    console.print(render_result(result))
    return 0


def cmd_highscore(args, config: GameConfig, console: Console) -> int:
    if config.high_score_file is None:
        console.print("No high score file configured (use --high-score-file or the config file)")
        return 1

    store = create_store(config.high_score_file, config.high_score_key)
    if args.reset:
        store.save(0)
        console.print("High score reset")
        return 0
    console.print(f"High score: {store.load()}")
    return 0


def cmd_config(args, config: GameConfig, console: Console) -> int:
    path = save_config(config, args.output)
    console.print(f"Configuration written to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reactor-game",
        description="Reactor control arcade game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Let the autopilot play a round and bank at 5000 points
  reactor-game autoplay --bank-at 5000

  # Keep the high score in a file
  reactor-game --high-score-file ~/.reactor_score.json autoplay

  # Write the default configuration for editing
  reactor-game config --output reactor.yaml
        """
    )
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--high-score-file', help='JSON file holding the high score')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    autoplay_parser = subparsers.add_parser('autoplay', help='Play a round with the autopilot')
    autoplay_parser.add_argument('--dt', type=float, default=1 / 60,
                                 help='Frame time in seconds (default: 1/60)')
    autoplay_parser.add_argument('--max-time', type=float, default=120.0,
                                 help='Bank after this many seconds (default: 120)')
    autoplay_parser.add_argument('--target-temp', type=float, default=850.0,
                                 help='Core temperature the autopilot holds (default: 850)')
    autoplay_parser.add_argument('--bank-at', type=float, default=None,
                                 help='Bank once this many points are earned')
    autoplay_parser.add_argument('--no-live', action='store_true',
                                 help='Only print the final state')

    highscore_parser = subparsers.add_parser('highscore', help='Show the high score')
    highscore_parser.add_argument('--reset', action='store_true', help='Reset the high score to 0')

    config_parser = subparsers.add_parser('config', help='Write the configuration as YAML')
    config_parser.add_argument('--output', required=True, help='Destination file')

    return parser


COMMANDS = {
    'autoplay': cmd_autoplay,
    'highscore': cmd_highscore,
    'config': cmd_config,
}


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        if args.high_score_file:
            config.high_score_file = args.high_score_file
        return COMMANDS[args.command](args, config, console)
    except ReactorGameError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        console.print("\nOperation cancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
