#!/usr/bin/env python
"""
Run the storefront pricing API with uvicorn.

Usage:
    python scripts/run_api.py [catalog.json] [--no-reload]

PORT and HOST come from the environment (default 0.0.0.0:8000). A catalog
path argument is passed to the app as STOREFRONT_CATALOG.
"""
import os
import sys
from pathlib import Path

import uvicorn

project_root = Path(__file__).parent.parent
src_path = project_root / 'src'
sys.path.insert(0, str(src_path))


def main():
    args = [a for a in sys.argv[1:] if not a.startswith('--')]
    if args:
        catalog = Path(args[0]).resolve()
        if not catalog.exists():
            print(f"ERROR: catalog not found at {catalog}")
            sys.exit(1)
        os.environ['STOREFRONT_CATALOG'] = str(catalog)

    # The reloader spawns a fresh interpreter that needs src on its path too
    os.environ['PYTHONPATH'] = os.pathsep.join(
        p for p in (str(src_path), os.environ.get('PYTHONPATH')) if p
    )

    port = int(os.environ.get('PORT', 8000))
    print(f"Starting Storefront Pricing API on port {port}...")
    uvicorn.run(
        "storefront_pricing.api.main:app",
        host=os.environ.get('HOST', '0.0.0.0'),
        port=port,
        reload='--no-reload' not in sys.argv,
        reload_dirs=[str(src_path)],
        log_level=os.environ.get('STOREFRONT_LOG_LEVEL', 'info').lower(),
    )


if __name__ == "__main__":
    main()
