#!/usr/bin/env python3
import argparse, json, sys

def load_json(path, default):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except Exception:
        return default

def count_severity(payload, severity):
    n = 0
    for outcome in (payload.get("results") or {}).values():
        n += int((outcome.get("summary") or {}).get(severity, 0) or 0)
    return n

def failed_tools(payload):
    return sorted(t for t, o in (payload.get("results") or {}).items() if o.get("status") != "COMPLETED")

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--result", required=True, help="saved callback payload (JSON)")

    ap.add_argument("--max_critical", type=int, default=0)
    ap.add_argument("--max_high", type=int, default=0)
    ap.add_argument("--allow_failed_tools", action="store_true")
    args = ap.parse_args()

    payload = load_json(args.result, {})

    c = count_severity(payload, "critical")
    h = count_severity(payload, "high")
    broken = failed_tools(payload)

    print(f"[gate] status={payload.get('status')}")
    print(f"[gate] critical={c} (max {args.max_critical})")
    print(f"[gate] high={h} (max {args.max_high})")
    print(f"[gate] failed_tools={','.join(broken) or '-'}")

    failed = (c > args.max_critical) or (h > args.max_high) or (bool(broken) and not args.allow_failed_tools)
    if payload.get("status") is None:
        failed = True
    if failed:
        print("[gate] FAILED")
        sys.exit(1)
    print("[gate] PASSED")
    sys.exit(0)

if __name__ == "__main__":
    main()
