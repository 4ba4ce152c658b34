# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""Provisioner release metadata."""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "Workstation Provisioner Contributors"
__codename__ = "Bootstrap"

# Version info tuple for programmatic comparison
VERSION_INFO = (0, 3, 0)
