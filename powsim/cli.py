# cli.py
#
# Console runner:
#   powsim-mine --data "Simulated Block Data" --difficulty 4
#   powsim-mine --single --difficulty 3        (single-hash batch scan)

import sys
import time
import argparse

from powsim.config import Settings
from powsim.kernel.digest import hash_once, hash_twice
from powsim.kernel.mining import FOUND, Miner, search
from powsim.logs import init_logging


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="powsim-mine", description="Proof-of-Work mining simulator")
    ap.add_argument("--data", default=settings.default_data, help="block payload")
    ap.add_argument("--difficulty", type=int, default=settings.default_difficulty,
                    help="leading hex zeros required (clamped to 1..8)")
    ap.add_argument("--timeout", type=float, default=None,
                    help="stop the interactive run after this many seconds (not valid with --single or --max-iters)")
    ap.add_argument("--single", action="store_true",
                    help="blocking single-SHA-256 scan instead of the interactive miner")
    ap.add_argument("--max-iters", type=int, default=None,
                    help="iteration ceiling for --single")
    return ap


def run_batch(args) -> int:
    hasher = hash_once if args.single else hash_twice
    t0 = time.time()
    res = search(args.data, args.difficulty, hasher=hasher, max_iters=args.max_iters)
    dt = time.time() - t0
    if res is None:
        print(f"[batch] no solution within {args.max_iters} iterations ({dt:.2f}s)")
        return 1
    print(f"[batch] nonce={res.nonce} hash={res.digest} time={dt:.2f}s")
    return 0


def run_interactive(args, settings: Settings) -> int:
    miner = Miner(
        report_interval=settings.report_interval,
        yield_every=settings.yield_every,
        log_limit=settings.log_limit,
    )

    def on_event(event, snap):
        if event == "report":
            print(snap["log"][-1])
        elif event == "found":
            print("\n".join(snap["log"][-2:]))
        elif event in ("stopped", "failed"):
            print(snap["log"][-1])

    miner.subscribe(on_event)
    miner.start(args.data, args.difficulty)
    try:
        finished = miner.wait(args.timeout)
    except KeyboardInterrupt:
        finished = False
    if not finished:
        miner.stop()
        miner.wait(5.0)
    return 0 if miner.snapshot()["state"] == FOUND else 1


def main(argv=None) -> int:
    settings = Settings.from_env()
    ap = build_parser(settings)
    args = ap.parse_args(argv)
    if args.timeout is not None and (args.single or args.max_iters is not None):
        ap.error("--timeout applies only to interactive runs")
    init_logging(settings.log_level)
    if args.single or args.max_iters is not None:
        return run_batch(args)
    return run_interactive(args, settings)


if __name__ == "__main__":
    sys.exit(main())
