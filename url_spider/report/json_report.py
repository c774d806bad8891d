# url_spider/report/json_report.py

"""
Генерация JSON-отчёта для url_spider.

Сериализация объекта CrawlReport в файл.
"""
import tempfile
from pathlib import Path
from typing import Optional, Union

from url_spider.aggregator import CrawlReport
from url_spider.errors import PersistenceFailure


def render_json(
    report: CrawlReport,
    output_path: Optional[Union[Path, str]] = None,
    *,
    report_dir: Optional[Union[Path, str]] = None,
    pretty: bool = True,
) -> Path:
    """
    Сохраняет отчёт report в формате JSON.

    Без output_path создаётся временный файл ``url-spider-*.json`` в report_dir
    (или в системном каталоге временных файлов).

    :param report: объект CrawlReport с результатами обхода
    :param output_path: путь к JSON-файлу
    :param report_dir: каталог для временного файла
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    :raises PersistenceFailure: файл не удалось записать

    Пример:
    ```python
    from url_spider.report.json_report import render_json
    report_path = render_json(report)
    print(f"JSON report saved to: {report_path}")
    ```
    """
    payload = report.json(pretty=pretty)
    try:
        if output_path is None:
            directory = Path(report_dir) if report_dir else None
            if directory is not None:
                directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                prefix="url-spider-",
                suffix=".json",
                dir=directory,
                delete=False,
            ) as f:
                f.write(payload)
            return Path(f.name)

        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        return output
    except OSError as exc:
        raise PersistenceFailure(f"Не удалось сохранить JSON-отчёт: {exc}") from exc
