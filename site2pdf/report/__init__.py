# File: site2pdf/report/__init__.py
"""site2pdf.report: отчёты о запуске (JSON и HTML), используемые CLI и тестами."""

from __future__ import annotations

from site2pdf.report.html_report import render_html
from site2pdf.report.json_report import render_json, report_to_dict, write_section_commands

__all__ = ["render_json", "render_html", "report_to_dict", "write_section_commands"]
