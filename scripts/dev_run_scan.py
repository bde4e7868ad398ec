"""Run one scan inline (no web server) and print the callback payload.

    python scripts/dev_run_scan.py http://localhost:8080 nuclei zap --callback http://localhost:9000/cb
"""
import argparse
import json

from scanworker.core.containers import build_orchestrator
from scanworker.core.logging import setup_logging
from scanworker.domain.models import ScanRequest

ap = argparse.ArgumentParser()
ap.add_argument("target")
ap.add_argument("tools", nargs="+")
ap.add_argument("--scan-id", default="dev-scan")
ap.add_argument("--callback", default="http://localhost:9000/callback")
ap.add_argument("--params", default="{}", help="JSON per-tool parameter bags")
args = ap.parse_args()

setup_logging()

request = ScanRequest.create(
    scan_id=args.scan_id,
    target_url=args.target,
    tools=args.tools,
    callback_url=args.callback,
    parameters=json.loads(args.params),
)
result = build_orchestrator().run(request)

print(json.dumps(result.to_payload(), indent=2, default=str))
