#!/usr/bin/env python
"""Lightweight smoke test for the issue classifier service.

What it does:
1. Hit /health/live and /health/ready
2. Hit /version to confirm a work log history was loaded
3. Classify an issue against the startup history
4. Classify an issue against an inline history via /classify/with-history

Exit codes:
 0 success, non-zero if any check fails.

Use:  python scripts/smoke_test.py --base-url https://<domain>
Defaults to http://localhost:8000 if not provided.
"""
from __future__ import annotations
import argparse
import time
import json
from typing import Any

import requests

RESET = "\x1b[0m"
COLORS = {
    "green": "\x1b[32m",
    "red": "\x1b[31m",
    "cyan": "\x1b[36m",
    "bold": "\x1b[1m",
}

SEVERITIES = {"LOW", "MEDIUM", "HIGH", "CRITICAL"}

INLINE_HISTORY = [
    {"status": "HARDWARE", "issueSummary": "screen broken on laptop"},
    {"status": "HARDWARE", "issueSummary": "desktop power supply dead"},
    {"status": "NETWORK", "issueSummary": "wifi keeps dropping"},
    {"status": "NETWORK", "issueSummary": "no internet on second floor"},
]


def color(txt: str, c: str) -> str:
    return f"{COLORS.get(c,'')}{txt}{RESET}"


def status_line(label: str, ok: bool, detail: str = ""):
    symbol = "✔" if ok else "✘"
    line = f"{symbol} {label}"
    if detail:
        line += f" - {detail}"
    print(color(line, "green" if ok else "red"))


def request_json(method: str, base: str, path: str, payload: dict[str, Any] | None = None,
                 timeout: float = 15.0) -> tuple[bool, Any, int | None]:
    url = base.rstrip("/") + path
    try:
        r = requests.request(method, url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        return False, str(e), None
    try:
        data: Any = r.json()
    except ValueError:
        data = r.text
    return r.status_code == 200, data, r.status_code


def valid_classification(body: Any) -> bool:
    if not isinstance(body, dict):
        return False
    return (
        body.get("severity") in SEVERITIES
        and 0.0 <= float(body.get("confidence", -1)) <= 1.0
        and float(body.get("estimatedResolutionTime", 0)) > 0
        and isinstance(body.get("escalation"), dict)
    )


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:8000", help="Base URL of service")
    parser.add_argument("--show-json", action="store_true", help="Print raw JSON bodies")
    args = parser.parse_args()
    base = args.base_url

    print(color(f"Smoke Test Target: {base}", "cyan"))
    overall_ok = True

    ok_live, _, live_code = request_json("GET", base, "/health/live")
    status_line("/health/live", ok_live, f"code={live_code}")
    overall_ok &= ok_live

    # readiness can lag while the history is being trained
    ok_ready, ready_code = False, None
    for _ in range(3):
        ok_ready, _, ready_code = request_json("GET", base, "/health/ready")
        if ok_ready:
            break
        time.sleep(1.0)
    status_line("/health/ready", ok_ready, f"code={ready_code}")
    overall_ok &= ok_ready

    ok_version, version_json, version_code = request_json("GET", base, "/version")
    loaded = isinstance(version_json, dict) and bool(version_json.get("model_loaded"))
    status_line("/version", ok_version and loaded, f"code={version_code} loaded={loaded}")
    overall_ok &= ok_version and loaded

    sample = {"issueDescription": "Laptop will not boot, screen dead", "itemType": "Laptop"}
    ok_cls, cls_json, cls_code = request_json("POST", base, "/classify", sample)
    ok_cls = ok_cls and valid_classification(cls_json)
    status_line("/classify", ok_cls, f"code={cls_code}")
    if isinstance(cls_json, dict):
        print(color("Prediction: ", "bold") + json.dumps({
            k: cls_json.get(k) for k in ("category", "confidence", "severity", "suggestedTechnician", "priority")
        }, indent=2))
    overall_ok &= ok_cls

    inline = dict(sample, workLogs=INLINE_HISTORY)
    ok_hist, hist_json, hist_code = request_json("POST", base, "/classify/with-history", inline)
    ok_hist = ok_hist and valid_classification(hist_json) and hist_json.get("category") == "HARDWARE"
    status_line("/classify/with-history", ok_hist, f"code={hist_code}")
    if args.show_json:
        print(json.dumps(hist_json, indent=2))
    overall_ok &= ok_hist

    print()
    if overall_ok:
        print(color("ALL SMOKE TESTS PASSED", "green"))
        return 0
    print(color("SMOKE TESTS FAILED", "red"))
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
