#!/usr/bin/env python
"""
Run the Streamlit product page preview.

Usage:
    python scripts/run_app.py [catalog.json] [palette.csv]

Optional paths override the packaged sample catalog and color palette.
"""
import os
import subprocess
import sys
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'storefront_pricing' / 'ui' / 'app_streamlit.py'

    env = os.environ.copy()
    for var, arg in zip(('STOREFRONT_CATALOG', 'STOREFRONT_PALETTE'), sys.argv[1:3]):
        path = Path(arg).resolve()
        if not path.exists():
            print(f"ERROR: {path} not found")
            sys.exit(1)
        env[var] = str(path)
        print(f"  {var}={path}")

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nPreview stopped.")


if __name__ == "__main__":
    main()
