"""
Project-level analysis for semdiff.

This module ties the normalization, statistics and clustering components
together for one project and its sessions.
"""

from semdiff.analysis.project import ProjectAnalysis
