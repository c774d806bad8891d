"""url_spider.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from url_spider.aggregator import CrawlReport
from url_spider.errors import PersistenceFailure

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: CrawlReport,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект CrawlReport.
        template_dir: директория с Jinja2-шаблонами (None - встроенный шаблон).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )

    context: dict[str, Any] = {
        "seed": report.seed,
        "started_at": report.started_at,
        "finished_at": report.finished_at,
        "stats": report.stats,
        "sitemap": report.sitemap,
        "skipped": report.skipped,
        "invalid": report.invalid,
    }

    try:
        html_content = env.get_template(TEMPLATE_NAME).render(**context)
    except TemplateError as exc:
        raise PersistenceFailure(f"Ошибка шаблона {TEMPLATE_NAME}: {exc}") from exc

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html_content, encoding="utf-8")
    except OSError as exc:
        raise PersistenceFailure(f"Не удалось сохранить HTML-отчёт: {exc}") from exc

    return output_path
