# === FILE: site2pdf/cli.py ===
#!/usr/bin/env python3
"""
Точка входа site2pdf: сайт документации в PDF, по одному файлу на раздел.

Команды:
  build     Обойти сайт и собрать PDF (один общий или по разделам)
  sections  Только обход: дерево разделов и команды сборки для каждого раздела
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда build:
  MAIN_URL [URL_PATTERN]
  --content-selector  CSS-селектор основного контента
  --nav-selector      CSS-селектор ссылок навигации
  --split-sections    Отдельный PDF для каждого раздела
  --out-dir DIR       Каталог для PDF
  --json PATH         Сохранить JSON-отчёт
  --html PATH         Сохранить HTML-оглавление

Пример:
  site2pdf build https://developer.apple.com/documentation/virtualization --split-sections
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site2pdf import __version__
from site2pdf.config import load_config
from site2pdf.engine import run_build, run_discovery, section_commands
from site2pdf.errors import NavigationFailed, PatternInvalid
from site2pdf.logger import DEFAULT_FORMAT, init_logging
from site2pdf.report.html_report import render_html
from site2pdf.report.json_report import render_json, write_section_commands
from site2pdf.utils import canonicalize_url, generate_slug

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _overrides(**values):
    return {key: value for key, value in values.items() if value is not None}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='site2pdf, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
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
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """site2pdf: документация сайта в PDF-артефакты."""
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


@cli.command('build', context_settings=CONTEXT_SETTINGS)
@click.argument('main_url')
@click.argument('url_pattern', required=False, default=None)
@click.option('--content-selector', 'content_selector', default=None,
              help='CSS-селектор основного контента')
@click.option('--nav-selector', 'nav_selector', default=None,
              help='CSS-селектор ссылок навигации')
@click.option('--split-sections', 'split_sections', is_flag=True,
              help='Отдельный PDF для главной страницы и каждого раздела')
@click.option('--out-dir', '-o', 'out_dir', default=None,
              type=click.Path(file_okay=False, path_type=Path),
              help='Каталог для PDF (override out_dir)')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--html', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить HTML-оглавление в файл')
@click.pass_context
def build(ctx, main_url, url_pattern, content_selector, nav_selector, split_sections,
          out_dir, json_output, html_output):
    """Обойти MAIN_URL и собрать PDF по ссылкам, подходящим под URL_PATTERN."""
    cfg = ctx.obj['config'].model_copy(update=_overrides(
        content_selector=content_selector,
        nav_selector=nav_selector,
        out_dir=out_dir,
    ))
    try:
        report = asyncio.run(run_build(cfg, main_url, url_pattern, split=split_sections))
    except PatternInvalid as e:
        print_error(f'Неверный шаблон URL: {e}')
    except NavigationFailed as e:
        print_error(f'Не удалось загрузить корневую страницу: {e}')

    for record in report.artifacts:
        click.echo(f'PDF: {record.path} ({record.page_count} pages)')
    for url in report.skipped_sections:
        click.secho(f'Skipped section: {url}', fg='yellow')

    if json_output:
        try:
            click.echo(f'JSON report: {render_json(report, json_output)}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    if html_output:
        try:
            click.echo(f'HTML report: {render_html(report, html_output)}')
        except OSError as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('sections', context_settings=CONTEXT_SETTINGS)
@click.argument('main_url')
@click.argument('url_pattern', required=False, default=None)
@click.option('--static', 'static', is_flag=True,
              help='Обход без браузера (aiohttp), для сайтов без JavaScript')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить дерево разделов в JSON')
@click.option('--commands', 'commands_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Файл для команд сборки (default: <out_dir>/<slug>-section-commands.txt)')
@click.pass_context
def sections(ctx, main_url, url_pattern, static, json_output, commands_output):
    """Построить дерево разделов MAIN_URL и команды сборки для каждого раздела."""
    cfg = ctx.obj['config']
    try:
        tree = asyncio.run(run_discovery(cfg, main_url, url_pattern, static=static))
    except PatternInvalid as e:
        print_error(f'Неверный шаблон URL: {e}')
    except NavigationFailed as e:
        print_error(f'Не удалось загрузить корневую страницу: {e}')

    click.echo(json.dumps(tree.to_dict(), ensure_ascii=False, indent=2))
    if json_output:
        try:
            render_json(tree, json_output)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    commands = section_commands(tree)
    if commands_output is None:
        slug = generate_slug(canonicalize_url(main_url))
        commands_output = Path(cfg.out_dir) / f'{slug}-section-commands.txt'
    try:
        saved = write_section_commands(commands, commands_output)
    except OSError as e:
        print_error(f'Ошибка при сохранении команд: {e}')
    click.echo(f'Section commands saved to {saved}')
    click.echo('\n'.join(commands))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
