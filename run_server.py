#!/usr/bin/env python
"""
Production Server Entry Point

Starts the dashboard API with settings taken from the environment.
Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py
    Demo data:    python run_server.py --dev --seed

    Or with Gunicorn:
    gunicorn mfg_dashboard.main:app -c gunicorn.conf.py
"""

import argparse
import asyncio
import subprocess

import uvicorn

from mfg_dashboard.config import get_settings

APP_PATH = "mfg_dashboard.main:app"


def run_dev_server(port: int) -> None:
    """Run development server with auto-reload."""
    settings = get_settings()
    uvicorn.run(
        APP_PATH,
        host=settings.api_host,
        port=port,
        reload=True,
        reload_dirs=["mfg_dashboard"],
        log_level="debug",
        access_log=False,
    )


def run_prod_server(port: int) -> None:
    """Run production server with Uvicorn directly."""
    settings = get_settings()
    uvicorn.run(
        APP_PATH,
        host=settings.api_host,
        port=port,
        workers=settings.api_workers,
        log_level=settings.monitoring.log_level.lower(),
        access_log=False,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
        date_header=True,
    )


def run_gunicorn() -> None:
    """Run with Gunicorn (recommended for production)."""
    subprocess.run(["gunicorn", APP_PATH, "-c", "gunicorn.conf.py"], check=True)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manufacturing Dashboard API Server")
    parser.add_argument("--dev", action="store_true", help="Run in development mode with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run with Gunicorn (production)")
    parser.add_argument("--seed", action="store_true", help="Load demo data before starting")
    parser.add_argument("--port", type=int, default=None, help="Port to run on (default: API_PORT)")
    args = parser.parse_args()

    port = args.port or get_settings().api_port

    if args.seed:
        from mfg_dashboard.ingestion.seed_db import main as seed_main
        asyncio.run(seed_main())

    if args.dev:
        print("Starting development server...")
        run_dev_server(port)
    elif args.gunicorn:
        print("Starting production server with Gunicorn...")
        run_gunicorn()
    else:
        print("Starting production server with Uvicorn...")
        run_prod_server(port)
