"""
Load students from a CSV (columns: id, first_name, last_name[, birthday]).

With --reset the students table is dropped and re-created first.

Usage:
  python -m roster.scripts.seed_students --csv seeds/students.csv [--reset]
"""
from __future__ import annotations

import argparse
from roster.logs import LogContext, ensure_log_schema
from roster.services.student_svc import seed_load


def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True)
    ap.add_argument("--reset", action="store_true")
    args = ap.parse_args(argv)

    ensure_log_schema()
    log = LogContext("SEED_STUDENTS")
    try:
        res = seed_load(args.csv, log, reset=args.reset)
    except Exception as e:
        log.write("ERROR", str(e))
        raise
    log.write("OK")
    print({"message": "ok", **res})
    return res


if __name__ == "__main__":
    main()
