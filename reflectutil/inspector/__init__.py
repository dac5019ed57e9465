"""Developer tooling for inspecting classes with the reflection helpers."""

from .report import TypeReport as TypeReport
from .report import build_report as build_report
