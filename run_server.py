#!/usr/bin/env python3
"""
Whiteboard AI Uvicorn Server Launcher
=====================================

Async server launcher using Uvicorn for the FastAPI application.
"""

import os
import sys
import logging
import importlib.util
import multiprocessing

# Configure logging early to catch uvicorn startup messages
logging.basicConfig(
    level=logging.INFO,
    format='%(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)


def check_package_installed(package_name):
    """Check if a package is installed"""
    spec = importlib.util.find_spec(package_name)
    return spec is not None


def run_uvicorn():
    """Run Whiteboard AI with Uvicorn (FastAPI async server)"""
    if not check_package_installed('uvicorn'):
        print("[ERROR] Uvicorn not installed. Install with: pip install uvicorn[standard]>=0.24.0")
        sys.exit(1)

    try:
        # Ensure we're in the correct directory
        script_dir = os.path.dirname(os.path.abspath(__file__))
        os.chdir(script_dir)
        os.makedirs("logs", exist_ok=True)

        import uvicorn
        from config.settings import config

        host = config.HOST
        port = config.PORT
        debug = config.DEBUG
        log_level = config.LOG_LEVEL.lower()
        reload = debug

        # Async workers: 1 per CPU core up to 4, override with UVICORN_WORKERS
        default_workers = 1 if sys.platform == 'win32' else min(multiprocessing.cpu_count(), 4)
        workers = int(os.getenv('UVICORN_WORKERS', default_workers))

        print("=" * 80)
        print(f"    Whiteboard AI | Version {config.VERSION}")
        print("=" * 80)
        print(f"Environment: {'development' if debug else 'production'} (DEBUG={debug})")
        print(f"Host: {host}")
        print(f"Port: {port}")
        print(f"Workers: {1 if reload else workers}")
        print(f"Log Level: {log_level.upper()}")
        print(f"Auto-reload: {reload}")
        print("=" * 80)
        print(f"Server ready at: http://localhost:{port}")
        if debug:
            print(f"API Docs: http://localhost:{port}/docs")
        print("Press Ctrl+C to stop the server")
        print()

        try:
            uvicorn.run(
                "main:app",
                host=host,
                port=port,
                workers=1 if reload else workers,  # Use 1 worker in dev mode for reload
                reload=reload,
                log_level=log_level,
                use_colors=False,  # UnifiedFormatter colors instead
                timeout_graceful_shutdown=5,
                access_log=False,
            )
        except KeyboardInterrupt:
            print("\n" + "=" * 80)
            print("Shutting down gracefully...")
            print("=" * 80)

    except KeyboardInterrupt:
        print("\n" + "=" * 80)
        print("Startup interrupted by user")
        print("=" * 80)
        sys.exit(0)
    except Exception as e:
        print(f"[ERROR] Failed to start Uvicorn: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


def main():
    """Main entry point"""
    run_uvicorn()


if __name__ == '__main__':
    main()
