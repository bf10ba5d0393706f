#!/usr/bin/env python3
# CUI // SP-PROPIN
"""RFP Analyzer startup script.

Checks the things that break a local run before starting the dashboard:
  1. An invalid args/rfp_analyzer_config.yaml (or --config file)
  2. A stale process still holding the dashboard port

The dashboard subprocess is started against the same config file that was
validated, on dashboard.port unless --port overrides it.

Usage:
  python start.py                   # validate + start dashboard
  python start.py --port 5002       # override port
  python start.py --config my.yaml  # validate and run with another config
  python start.py --validate-only   # check without starting the dashboard
"""

import argparse
import os
import signal
import socket
import subprocess
import sys
import time
import urllib.error
import urllib.request
from pathlib import Path

from dotenv import dotenv_values

from rfp_analyzer.config.app_config import CONFIG_PATH, ConfigError, load_config, validate_config

BASE_DIR = Path(__file__).resolve().parent
APP_MODULE = "rfp_analyzer.dashboard.app"

GREEN  = "\033[32m"
RED    = "\033[31m"
YELLOW = "\033[33m"
CYAN   = "\033[36m"
RESET  = "\033[0m"
BOLD   = "\033[1m"


def _ok(msg):   print(f"{GREEN}  ✓{RESET} {msg}")
def _warn(msg): print(f"{YELLOW}  ⚠{RESET} {msg}")
def _err(msg):  print(f"{RED}  ✗{RESET} {msg}")
def _info(msg): print(f"{CYAN}  →{RESET} {msg}")


# ── Port ───────────────────────────────────────────────────────────────────────

def port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(1)
        return sock.connect_ex(("127.0.0.1", port)) == 0


def port_holders(port: int) -> list[int]:
    """PIDs listening on ``port`` according to lsof; empty if lsof is missing."""
    try:
        out = subprocess.check_output(
            ["lsof", "-t", "-sTCP:LISTEN", "-i", f"tcp:{port}"],
            text=True, stderr=subprocess.DEVNULL,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return []
    return sorted({int(p) for p in out.split() if p.isdigit()})


def release_port(port: int, attempts: int = 6) -> bool:
    """SIGTERM whatever holds ``port`` and wait for it to close."""
    holders = port_holders(port)
    if not holders:
        _err(f"Port {port} is busy but no owning process was found")
        return False
    for pid in holders:
        _warn(f"Stopping PID {pid} on port {port}")
        try:
            os.kill(pid, signal.SIGTERM)
        except (ProcessLookupError, PermissionError) as e:
            _err(f"Could not stop PID {pid}: {e}")
            return False

    for _ in range(attempts):
        time.sleep(0.5)
        if not port_in_use(port):
            _ok(f"Port {port} released")
            return True
    _err(f"Port {port} still busy")
    return False


# ── Dashboard Startup ──────────────────────────────────────────────────────────

def wait_for_dashboard(port: int, timeout: float = 15.0) -> bool:
    """Poll /api/health until the dashboard answers."""
    url = f"http://127.0.0.1:{port}/api/health"
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with urllib.request.urlopen(url, timeout=2) as resp:
                return resp.status == 200
        except (urllib.error.URLError, OSError):
            time.sleep(0.5)
    return False


def start_dashboard(port: int, config_path) -> subprocess.Popen:
    """Launch the dashboard on ``port`` reading settings from ``config_path``."""
    env = os.environ.copy()
    env_file = BASE_DIR / ".env"
    if env_file.exists():
        for k, v in dotenv_values(env_file).items():
            if v is not None:
                env.setdefault(k, v)
    env["RFP_ANALYZER_CONFIG"] = str(Path(config_path).resolve())
    env["FLASK_PORT"] = str(port)

    return subprocess.Popen(
        [sys.executable, "-m", APP_MODULE, "--port", str(port)],
        cwd=str(BASE_DIR),
        env=env,
    )


# ── Main ───────────────────────────────────────────────────────────────────────

def run(args):
    config_path = Path(args.config) if args.config else CONFIG_PATH

    print(f"\n{BOLD}RFP Analyzer Startup{RESET}  ({config_path})\n")

    # ── Step 1: Config validation ──────────────────────────────────────────────
    print(f"{BOLD}[1/3] Config validation{RESET}")
    try:
        config = load_config(config_path)
    except ConfigError as e:
        _err(str(e))
        return 1
    issues = validate_config(config)
    if issues:
        for issue in issues:
            _err(issue)
        return 1
    _ok("Config valid")
    _info(f"Upload types: {', '.join(config['upload']['allowed_extensions'])}")

    port = args.port or config["dashboard"]["port"]

    # ── Step 2: Port check ─────────────────────────────────────────────────────
    print(f"\n{BOLD}[2/3] Port {port}{RESET}")
    if not port_in_use(port):
        _ok("Free")
    elif args.no_kill:
        _warn(f"In use by PID(s) {port_holders(port)}. Drop --no-kill to stop them.")
    elif not release_port(port):
        return 1

    if args.validate_only:
        print(f"\n{BOLD}Validation complete.{RESET} (--validate-only, not starting dashboard)\n")
        return 0

    # ── Step 3: Start dashboard ────────────────────────────────────────────────
    print(f"\n{BOLD}[3/3] Starting dashboard{RESET}")
    proc = start_dashboard(port, config_path)
    _info(f"Dashboard PID {proc.pid} started, waiting for /api/health...")

    if wait_for_dashboard(port, timeout=20.0):
        _ok(f"RFP Analyzer is ready at http://127.0.0.1:{port}/api/health")
    else:
        _warn("No health response within 20s; the dashboard may still be starting")

    print(f"  Press {BOLD}Ctrl+C{RESET} to stop.\n")

    try:
        proc.wait()
    except KeyboardInterrupt:
        _info("Shutting down dashboard...")
        proc.terminate()
        proc.wait(timeout=5)
        _ok("Stopped")

    return 0


def main():
    # Windows cp1252 consoles can't render the status glyphs
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    parser = argparse.ArgumentParser(description="RFP Analyzer startup")
    parser.add_argument("--port", type=int, help="Dashboard port (default: dashboard.port)")
    parser.add_argument("--config", help="Alternate YAML config file")
    parser.add_argument("--validate-only", action="store_true",
                        help="Validate config and exit without starting the dashboard")
    parser.add_argument("--no-kill", action="store_true",
                        help="Don't stop existing processes on the port")
    args = parser.parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
