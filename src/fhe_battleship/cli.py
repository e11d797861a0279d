# Area: Shared
"""
fhe_battleship.cli — Command-line interface
===========================================

Usage:
    python -m fhe_battleship --demo                 # Play and record the reference match
    python -m fhe_battleship --demo --db games.db   # ...in another feed file
    python -m fhe_battleship --list --db games.db   # List recorded games

Demo mode can be enabled via:
    1. CLI flag: --demo
    2. Config key: demo_mode: true
    3. Environment variable: DEMO_MODE=true
"""

import argparse
import sys
from typing import List, Optional

from ._registry import GameRecordRepository
from ._shared import log_rejection, setup_logging
from .board import cells_from_bitmask, render_bitmask
from .config import BattleshipConfig, load_config
from .demo import BOARD_SIZE, ReferenceMatchResult, play_reference_match
from .errors import BattleshipError
from .factory import GameFactory
from .mock import PlaintextCompute


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Confidential Battleship - encrypted two-player match engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fhe_battleship --demo
  python -m fhe_battleship --demo --db games.db
  python -m fhe_battleship --list --db games.db
  DEMO_MODE=true python -m fhe_battleship --config config.json
        """,
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Play the scripted 5x5 reference match on the plaintext mock",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List games recorded in the database",
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--db", type=str, help="SQLite file for the game-created feed (overrides config db_path)")
    parser.add_argument("--log-file", type=str, help="Log file path (overrides config)")
    return parser.parse_args(argv)


def is_demo_mode(args: argparse.Namespace, config: BattleshipConfig) -> bool:
    """Check if demo mode is enabled via CLI or config (which folds in DEMO_MODE)."""
    return bool(args.demo or config.demo_mode)


def winner_label(result: ReferenceMatchResult) -> str:
    """Name the decrypted winner, or "nobody" for the zero address."""
    if result.winner == result.alice:
        return "Alice"
    if result.winner == result.bob:
        return "Bob"
    return "nobody"


def run_demo(config: BattleshipConfig, db_path: Optional[str]) -> int:
    """Play the reference match, recording it to the feed at db_path if set."""
    compute = PlaintextCompute()
    factory = GameFactory(compute)
    if db_path:
        factory.subscribe(GameRecordRepository(db_path))

    result = play_reference_match(
        factory=factory,
        compute=compute,
        signature_duration_days=config.signature_duration_days,
    )

    print(f"Game:        {result.game_address}")
    print(f"State:       {result.state.name}")
    print(f"Moves:       {result.turns}")
    print(f"Bob's board as Alice sees it (targeted cells {cells_from_bitmask(result.bob_move_mask)}):")
    print(render_bitmask(result.bob_move_mask, BOARD_SIZE))
    print(f"Hits on Bob: {cells_from_bitmask(result.bob_hits_mask)} (mask {result.bob_hits_mask})")
    print(f"Winner:      {result.winner} ({winner_label(result)})")
    return 0


def list_games(db_path: str) -> int:
    records = GameRecordRepository(db_path).get_all_games()
    if not records:
        print("No games recorded.")
        return 0
    for row in records:
        print(
            f"{row['game_address']}  creator={row['creator']}  "
            f"{row['board_size']}x{row['board_size']}  ships={row['ship_count']}"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_file_path=args.log_file if args.log_file is not None else config.log_file,
        level=config.log_level,
    )
    db_path = args.db or config.db_path

    if args.list:
        return list_games(db_path)

    if not is_demo_mode(args, config):
        print("Error: nothing to do. Use --demo or --list.", file=sys.stderr)
        print("Embed GameFactory in your own service to host real matches.", file=sys.stderr)
        return 1

    try:
        return run_demo(config, db_path)
    except BattleshipError as e:
        log_rejection(e)
        return 1
