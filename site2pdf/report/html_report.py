# File: site2pdf/report/html_report.py
"""site2pdf.report.html_report: HTML-оглавление артефактов с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape

from site2pdf.engine import RunReport

TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: RunReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект RunReport.
        output_path: путь к итоговому HTML-файлу.
        template_dir: своя директория с ``report.html.j2``; по умолчанию шаблон пакета.

    Returns:
        Path до сохранённого HTML-файла.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if template_dir is None:
        loader: Any = PackageLoader("site2pdf", "templates")
    else:
        loader = FileSystemLoader(str(template_dir))
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))
    template = env.get_template(TEMPLATE_NAME)

    # Ссылки на PDF относительно самого отчёта, если они лежат рядом.
    artifacts = []
    for record in report.artifacts:
        try:
            href = record.path.resolve().relative_to(output_path.parent.resolve()).as_posix()
        except ValueError:
            href = record.path.resolve().as_uri()
        artifacts.append({"record": record, "href": href})

    context: dict[str, Any] = {
        "main_url": report.main_url,
        "pattern": report.pattern,
        "split": report.split,
        "artifacts": artifacts,
        "skipped_sections": report.skipped_sections,
        "failed_urls": report.failed_urls,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
