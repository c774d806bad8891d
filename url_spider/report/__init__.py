"""url_spider.report: сохранение отчёта обхода (JSON и HTML)."""

from url_spider.report.html_report import render_html
from url_spider.report.json_report import render_json

__all__ = ["render_json", "render_html"]
