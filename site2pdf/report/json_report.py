# site2pdf/report/json_report.py

"""
Генерация JSON-отчёта для проекта site2pdf.

Сериализация RunReport (или одного дерева разделов) в файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from site2pdf.crawler.models import SectionNode
from site2pdf.engine import RunReport


def report_to_dict(report: RunReport) -> Dict[str, Any]:
    """Превращает RunReport в словарь, пригодный для json.dump."""
    return {
        'main_url': report.main_url,
        'pattern': report.pattern,
        'split_sections': report.split,
        'tree': report.tree.to_dict(),
        'artifacts': [
            {
                'slug': record.slug,
                'root_url': record.root_url,
                'path': str(record.path),
                'urls': record.urls,
                'page_count': record.page_count,
            }
            for record in report.artifacts
        ],
        'skipped_sections': report.skipped_sections,
        'failed_urls': report.failed_urls,
    }


def render_json(report: Union[RunReport, SectionNode], output_path: Path | str) -> Path:
    """
    Сохраняет отчёт в формате JSON по указанному пути.

    :param report: RunReport после сборки или SectionNode после обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from site2pdf.report.json_report import render_json
    report_path = render_json(report, 'out/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(report, SectionNode):
        data: Dict[str, Any] = report.to_dict()
    else:
        data = report_to_dict(report)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output


def write_section_commands(commands: List[str], output_path: Path | str) -> Path:
    """Записывает команды сборки разделов, по одной на строку."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text('\n'.join(commands), encoding='utf-8')
    return output
