#!/usr/bin/env python3
# filename: install.py
# -*- coding: utf-8 -*-
"""
Entry point for the Tenstorrent stack installer.

Run with root privileges or as a user with sudo rights:

    python3 install.py [--nobuda] [--yes] [--arch ARCH] ...

See 'python3 install.py --help' for every option.
"""

import sys

from tt_installer.main_installer import main_installer_entry

if __name__ == "__main__":
    sys.exit(main_installer_entry())
