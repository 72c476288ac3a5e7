"""Line-delimited JSON adapter over stdin/stdout for editor and agent tooling."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, TextIO

from jsxtv.service import safe_dispatch


logger = logging.getLogger(__name__)


def run_stdio(input_stream: TextIO | None = None, output_stream: TextIO | None = None) -> int:
    """Answer one request per input line until end of input.

    A request is `{"id": ..., "method": "transform", "params": {...}}`; the
    reply echoes `id` with either `"ok": true, "result": {...}` or
    `"ok": false, "error": {"code", "message", "hint"}`. Blank lines are
    ignored and every reply is flushed immediately.
    """
    input_stream = input_stream or sys.stdin
    output_stream = output_stream or sys.stdout

    for raw_line in input_stream:
        line = raw_line.strip()
        if not line:
            continue
        reply = _handle_line(line)
        output_stream.write(json.dumps(reply, ensure_ascii=True, separators=(",", ":")) + "\n")
        output_stream.flush()
    return 0


def _failure(request_id: Any, code: str, message: str, hint: str) -> dict[str, Any]:
    return {"id": request_id, "ok": False, "error": {"code": code, "message": message, "hint": hint}}


def _handle_line(line: str) -> dict[str, Any]:
    try:
        request = json.loads(line)
    except ValueError:
        return _failure(None, "AGT400", "Request line is not valid JSON.", "Write exactly one JSON object per line.")

    if not isinstance(request, dict):
        return _failure(None, "AGT401", "Request must be a JSON object.", "Send {\"id\", \"method\", \"params\"}.")

    request_id = request.get("id")
    method = request.get("method")
    params = request.get("params", {})

    if not isinstance(method, str) or not method:
        return _failure(
            request_id,
            "AGT402",
            "Request has no usable 'method'.",
            "Use one of transform, check, explain, languages, runtime, capabilities.",
        )
    if not isinstance(params, dict):
        return _failure(request_id, "AGT403", "'params' must be a JSON object.", "Send {} when there are no params.")

    ok, payload = safe_dispatch(method, params)
    if not ok:
        logger.debug("Request %s (%s) failed with %s.", request_id, method, payload["error"].get("code"))
        return {"id": request_id, "ok": False, **payload}
    return {"id": request_id, "ok": True, "result": payload}


def run(argv: list[str] | None = None) -> int:
    """Entry point for `jsxtv-agent`; logs go to stderr so stdout stays protocol-only."""
    parser = argparse.ArgumentParser(prog="jsxtv-agent", description="jsxtv line-delimited JSON adapter")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr output (default: WARNING)",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    return run_stdio()


if __name__ == "__main__":
    raise SystemExit(run())
