#!/usr/bin/env python3
"""
Точка входа для запуска url_spider через командную строку.

Команды:
  crawl SEED  Обойти сайт начиная с SEED и сохранить отчёт
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только консоль, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --json PATH          Сохранить JSON-отчёт в файл (иначе во временный файл)
  --html PATH          Сохранить HTML-отчёт в файл
  --template DIR       Папка с Jinja2-шаблонами
  --pretty             Преформатировать JSON (отступ 2)
  --delay SEC          Пауза между страницами (override politeness_delay)
  --crawl-timeout SEC  Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию url_spider

Пример:
  url-spider crawl https://example.com/ --json report.json --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from url_spider import __version__
from url_spider.config import load_config
from url_spider.engine import start_crawl
from url_spider.errors import MalformedURL, PersistenceFailure
from url_spider.logger import DEFAULT_FORMAT, init_logging, logger
from url_spider.report.html_report import render_html
from url_spider.report.json_report import render_json
from url_spider.utils import normalize_url

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='url-spider, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только консоль, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд url-spider."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл (по умолчанию временный файл)'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--delay', 'delay',
    type=click.FloatRange(min=0),
    default=None,
    help='Пауза между страницами, секунд (override politeness_delay)'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, seed, json_output, html_output, template_dir, pretty, delay, crawl_timeout):
    """Обойти сайт начиная с SEED и сохранить отчёт."""
    cfg = ctx.obj['config']
    if delay is not None:
        cfg = cfg.model_copy(update={'politeness_delay': delay})

    try:
        root = normalize_url(seed, seed)
    except MalformedURL as e:
        print_error(f'Некорректный seed URL: {e}')

    click.echo(f'Starting crawl: {root}', err=True)
    try:
        if crawl_timeout:
            report = asyncio.run(
                asyncio.wait_for(start_crawl(cfg, root), timeout=crawl_timeout)
            )
        else:
            report = asyncio.run(start_crawl(cfg, root))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')

    failed = False
    try:
        saved_json = render_json(report, json_output, report_dir=cfg.report_dir, pretty=pretty)
        click.echo(f'JSON report: {saved_json}')
    except PersistenceFailure as e:
        logger.error('Ошибка при сохранении JSON: %s', e)
        failed = True

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except PersistenceFailure as e:
            logger.error('Ошибка при сохранении HTML: %s', e)
            failed = True

    stats = report.stats
    click.echo(
        f"Visited {stats['visited']}, skipped {stats['skipped']}, invalid {stats['invalid']}"
    )
    if failed:
        sys.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
