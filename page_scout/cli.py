# === FILE: page_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска PageScout через командную строку.

Команды:
  resolve SOURCE       Найти конфигурацию страницы (productId + locked)
  control-flag SOURCE  Показать управляющий флаг страницы
  config               Показать текущую конфигурацию

SOURCE — URL (http/https), путь к файлу или "-" для stdin.

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --timeout SEC       Таймаут одного HTTP-запроса (override timeout)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда resolve опции:
  --json PATH            Сохранить JSON-результат в файл
  --pretty               Преформатировать JSON-вывод (отступ 2)
  --resolve-timeout SEC  Таймаут всего поиска (секунд)

Дополнительно:
  --version, -v       Показать версию PageScout

Пример:
  page-scout resolve https://example.com/article --pretty
"""
import sys
import asyncio
import json
from pathlib import Path

import click

from page_scout import __version__
from page_scout.config import load_config
from page_scout.exceptions import ConfigNotFoundError, DocumentLoadError
from page_scout.logger import init_logging
from page_scout.report import render_json
from page_scout.scanner import scan_control_flag, scan_page

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)

def echo_json(data, pretty: bool = False):
    indent = 2 if pretty else None
    click.echo(json.dumps(data, ensure_ascii=False, indent=indent))

@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--timeout', 'timeout',
    type=float,
    default=None,
    help='Таймаут одного HTTP-запроса, секунд (override timeout)'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, timeout, log_level, log_file, log_format):
    """Группа команд PageScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if timeout is not None:
        if timeout <= 0:
            print_error('Таймаут должен быть больше нуля')
        cfg = cfg.model_copy(update={'timeout': timeout})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg

@cli.command('resolve', context_settings=CONTEXT_SETTINGS)
@click.argument('source')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-результат в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--resolve-timeout', 'resolve_timeout',
    type=float,
    default=None,
    help='Таймаут всего поиска (секунд)'
)
@click.pass_context
def resolve(ctx, source, json_output, pretty, resolve_timeout):
    """Найти конфигурацию страницы в SOURCE."""
    cfg = ctx.obj['config']
    try:
        if resolve_timeout:
            page_config = asyncio.run(
                asyncio.wait_for(scan_page(source, cfg), timeout=resolve_timeout)
            )
        else:
            page_config = asyncio.run(scan_page(source, cfg))
    except asyncio.TimeoutError:
        print_error(f'Поиск не завершён за {resolve_timeout} секунд')
    except ConfigNotFoundError as e:
        print_error(f'Конфигурация страницы не найдена: {e}')
    except DocumentLoadError as e:
        print_error(f'Ошибка загрузки документа: {e}')

    result = page_config.to_dict()

    if json_output:
        try:
            saved_json = render_json(result, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    echo_json(result, pretty)

@cli.command('control-flag', context_settings=CONTEXT_SETTINGS)
@click.argument('source')
@click.pass_context
def control_flag(ctx, source):
    """Показать управляющий флаг страницы SOURCE."""
    cfg = ctx.obj['config']
    try:
        flag = asyncio.run(scan_control_flag(source, cfg))
    except DocumentLoadError as e:
        print_error(f'Ошибка загрузки документа: {e}')
    echo_json({'controlFlag': flag})

@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))

# expose these names at module level for test monkey-patching
cli.scan_page = scan_page
cli.scan_control_flag = scan_control_flag
cli.render_json = render_json

if __name__ == "__main__":
    cli()
