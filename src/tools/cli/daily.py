"""Command line helpers for the daily puzzles."""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Sequence, Tuple

from contracts import validate
from contracts.errors import GuessValidationError, make_error
from engine.chroma import HSL, evaluate_color
from engine.chain import evaluate_chain
from engine.hamiltonian import score_grid_attempt
from engine.mastermind import Mark, evaluate_code, signal_strength
from engine.possibility import FeedbackMode, GuessRecord, count_remaining_possibilities
from games import daily_path_puzzle, daily_puzzle, get_game, list_games
from games.registry import GameSpec, RegistryError, read_puzzle_table

_LOGGER = logging.getLogger(__name__)


def _parse_date(raw: str) -> _dt.date:
    try:
        return _dt.date.fromisoformat(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {raw!r}") from exc


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))


def _split_symbols(tokens: Sequence[str], game: GameSpec) -> List[str]:
    # "3816" is accepted for single-character alphabets.
    single_chars = bool(game.alphabet) and all(len(s) == 1 for s in game.alphabet)
    if len(tokens) == 1 and single_chars and len(tokens[0]) == game.code_length:
        return list(tokens[0])
    out: List[str] = []
    for token in tokens:
        out.extend(part for part in token.split(",") if part)
    return out


def _parse_cell(token: str) -> Tuple[int, int]:
    r, _, c = token.partition(",")
    return int(r), int(c)


def _parse_color(tokens: Sequence[str], game: GameSpec) -> HSL:
    values = _split_symbols(tokens, game)
    if len(values) != 3:
        raise GuessValidationError(
            "Colour rejected", [make_error("guess.length", "expected h,s,l", "$.guess")]
        )
    h, s, l = (int(v) for v in values)  # noqa: E741
    return HSL(h, s, l)


def cmd_path(args: argparse.Namespace) -> int:
    puzzle = daily_path_puzzle(args.date, profile=args.profile)
    _emit(puzzle.to_dict(reveal=args.reveal))
    return 0


def cmd_puzzle(args: argparse.Namespace) -> int:
    if get_game(args.game, profile=args.profile).kind == "path":
        return cmd_path(args)
    puzzle = daily_puzzle(args.game, args.date, profile=args.profile)
    _emit(puzzle.to_dict(reveal=args.reveal))
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    game = get_game(args.game, profile=args.profile)
    result: Dict[str, Any] = {"game": game.key}

    if game.kind == "path":
        puzzle = daily_path_puzzle(args.date, profile=args.profile)
        score = score_grid_attempt(puzzle.path, [_parse_cell(t) for t in args.guess])
        result.update(score.to_dict(), percent=score.percent, is_win=score.is_win)
    elif game.kind == "color":
        puzzle = daily_puzzle(game.key, args.date, profile=args.profile)
        result.update(evaluate_color(_parse_color(args.guess, game), puzzle.answer).to_dict())
    elif game.kind == "chain":
        puzzle = daily_puzzle(game.key, args.date, profile=args.profile)
        evaluation = evaluate_chain(_split_symbols(args.guess, game), puzzle.answer)
        result.update(evaluation.to_dict(), is_solved=evaluation.is_solved)
    else:
        puzzle = daily_puzzle(game.key, args.date, profile=args.profile)
        try:
            guess = [game.symbol_index(s) for s in _split_symbols(args.guess, game)]
        except ValueError as exc:
            raise GuessValidationError(str(exc)) from exc
        evaluation = evaluate_code(guess, puzzle.answer, game.alphabet_size, game.code_length)
        result.update(evaluation.to_dict(), is_solved=evaluation.is_solved)
        result["labels"] = [game.label(mark.value) for mark in evaluation.feedback]
        weights = game.config.get("signal", {})
        result["signal_strength"] = signal_strength(
            evaluation,
            exact_weight=int(weights.get("exact_weight", 25)),
            present_weight=int(weights.get("present_weight", 5)),
        )
    _emit(result)
    return 0


def _parse_history_entry(entry: str, alphabet_size: int, length: int) -> GuessRecord:
    guess_raw, sep, marks_raw = entry.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected guess:marks, got {entry!r}")
    if "," in guess_raw:
        guess = [int(v) for v in guess_raw.split(",")]
    elif alphabet_size <= 10:
        guess = [int(ch) for ch in guess_raw]
    else:
        raise argparse.ArgumentTypeError("separate symbols with commas for alphabets above ten")
    if "," in marks_raw:
        marks = [Mark.parse(m) for m in marks_raw.split(",")]
    else:
        marks = [Mark.parse(ch) for ch in marks_raw]
    if len(marks) != len(guess):
        raise argparse.ArgumentTypeError(f"{entry!r}: guess and marks differ in length")
    if len(guess) != length:
        raise GuessValidationError(
            "History entry rejected",
            [make_error("guess.length", f"expected {length} symbols, got {len(guess)}", "$.history")],
        )
    return GuessRecord.from_marks(guess, marks)


def cmd_count(args: argparse.Namespace) -> int:
    if args.game:
        game = get_game(args.game, profile=args.profile)
        alphabet_size, length, mode = game.alphabet_size, game.code_length, game.feedback_mode
    else:
        alphabet_size, length, mode = args.alphabet_size, args.length, FeedbackMode(args.mode)
    history = [_parse_history_entry(entry, alphabet_size, length) for entry in args.history]
    count = count_remaining_possibilities(history, alphabet_size, length, mode)
    _emit(
        {
            "alphabet_size": alphabet_size,
            "length": length,
            "mode": mode.value,
            "guesses": len(history),
            "remaining": count,
        }
    )
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    games = args.games or [key for key in list_games() if get_game(key).puzzles]
    summary: Dict[str, Any] = {}
    failed = False
    for key in games:
        game = get_game(key, profile=args.profile)
        table = read_puzzle_table(game)
        report = validate(table, game.kind, game.contract_context(), profile=args.profile)
        summary[key] = {
            "ok": report.ok,
            "errors": [asdict(issue) for issue in report.errors],
            "warnings": [asdict(issue) for issue in report.warnings],
        }
        failed = failed or not report.ok
    _emit(summary)
    return 1 if failed else 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daily deduction puzzle helpers")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics written to stderr",
    )
    parser.add_argument("--profile", default=None, help="Configuration profile (dev, ci, prod)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_date(p: argparse.ArgumentParser) -> None:
        p.add_argument("--date", type=_parse_date, default=None, help="Puzzle date, defaults to today")

    path = sub.add_parser("path", help="Show the grid path puzzle for a day")
    add_date(path)
    path.add_argument("--reveal", action="store_true", help="Include the full solution path")
    path.set_defaults(func=cmd_path)

    puzzle = sub.add_parser("puzzle", help="Show a game's puzzle for a day")
    puzzle.add_argument("game")
    add_date(puzzle)
    puzzle.add_argument("--reveal", action="store_true", help="Include the answer")
    puzzle.set_defaults(func=cmd_puzzle)

    score = sub.add_parser("score", help="Score a guess against a day's answer")
    score.add_argument("game")
    score.add_argument("guess", nargs="+", help="Symbols, words, 'h,s,l' or 'row,col' cells")
    add_date(score)
    score.set_defaults(func=cmd_score)

    count = sub.add_parser("count", help="Count codes consistent with a guess history")
    count.add_argument("history", nargs="*", help="Entries such as 0123:eapa")
    count.add_argument("--game", default=None, help="Take alphabet, length and mode from a game")
    count.add_argument("--alphabet-size", type=int, default=10)
    count.add_argument("--length", type=int, default=4)
    count.add_argument("--mode", choices=[m.value for m in FeedbackMode], default="positional")
    count.set_defaults(func=cmd_count)

    check = sub.add_parser("validate", help="Validate puzzle tables")
    check.add_argument("games", nargs="*", help="Games to check, defaults to all with tables")
    check.set_defaults(func=cmd_validate)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except (ValueError, RegistryError) as exc:
        _LOGGER.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
