"""
Entry Point Script (Bootstrap)
==============================
Development runner that works without installing the package.

It is located outside the 'src' package and puts 'src' on sys.path so that
imports like 'from scrollscene.model...' resolve.

Usage:
    $ python run.py [--scene path/to/scene.json] [--log-level DEBUG]
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from scrollscene.main import main

if __name__ == "__main__":
    main()
