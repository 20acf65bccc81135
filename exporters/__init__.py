#!/usr/bin/env python3
"""
Exporters Module
Output writers working on SceneGraph data
"""

from .base_exporter import BaseExporter
from .ngt_exporter import AngularThreeExporter

__all__ = [
    'BaseExporter',
    'AngularThreeExporter',
]
