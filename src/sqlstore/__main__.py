# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Entry point for running sqlstore as a module.

Usage:
    python -m sqlstore tables /data/app.db
"""

from .cli import main

if __name__ == "__main__":
    main()
