from __future__ import annotations
import argparse, json, logging, sys
from typing import Any, Dict, List

from .config import ENV_PREFIX, apply_cli_overrides, env_overrides, load_configs, scoring_rules
from .errors import ScoringError
from .reports.results_report import ResultsReport
from .scoring import format_position
from .state.loaders import load_history, load_session

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m wingspan_score.cli",
        description="Wingspan score keeper CLI"
    )
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    sub = p.add_subparsers(dest="cmd")

    # rank
    rk = sub.add_parser("rank", help="Score and rank one game from a JSON/YAML file")
    rk.add_argument("game", help="Game file (.json or .yaml)")
    _add_config_args(rk)
    rk.add_argument("--json", action="store_true", help="Print the results as JSON")
    rk.add_argument("--report", type=str, default=None, help="Path to save report (.json or .md)")

    # stats
    st = sub.add_parser("stats", help="Player statistics from a history file")
    st.add_argument("history", help="History file with players and games")
    _add_config_args(st)
    st.add_argument("--player", type=str, default=None, help="Show one player's stats and head-to-head")

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _add_config_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    ap.add_argument("--env-prefix", type=str, default=ENV_PREFIX, help="Env prefix for overrides")


def _rules(args: argparse.Namespace):
    cfg = load_configs(args.config)
    cfg = apply_cli_overrides(cfg, env_overrides(args.env_prefix))
    return scoring_rules(cfg)


def _rank(args: argparse.Namespace) -> int:
    session = load_session(args.game, _rules(args))
    results = session.calculate_results()
    report = ResultsReport.from_results(results, session.game_id, session.mode, session.expansions)

    if args.report:
        if args.report.endswith(".json"):
            with open(args.report, "w", encoding="utf-8") as f:
                f.write(report.to_json())
        elif args.report.endswith(".md"):
            with open(args.report, "w", encoding="utf-8") as f:
                f.write(report.to_markdown())
        else:
            print("Report path must end with .json or .md", file=sys.stderr)
            return 2

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        for r in results:
            flag = " *" if r.is_winner else ""
            print(f"{format_position(r.position):>5}  {r.display_name or r.player_id:<20} {r.total_score:>4}  (food {r.tiebreaker_value}){flag}")
    return 0


def _stats(args: argparse.Namespace) -> int:
    store = load_history(args.history, _rules(args))
    if args.player:
        store.require_player(args.player)
        out: Dict[str, Any] = store.player_stats(args.player).to_dict()
        out["head_to_head"] = [h.to_dict() for h in store.all_head_to_head(args.player)]
        print(json.dumps(out, indent=2))
        return 0

    rows: List[Dict[str, Any]] = []
    for stats in store.leaderboard():
        player = store.get_player(stats.player_id)
        rows.append({
            "player": player.name if player else stats.player_id,
            "games": stats.total_games,
            "wins": stats.wins,
            "win_rate": stats.win_rate,
            "avg_score": stats.avg_score,
        })
    print(json.dumps(rows, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    try:
        if args.cmd == "rank":
            return _rank(args)
        if args.cmd == "stats":
            return _stats(args)
    except (ScoringError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
