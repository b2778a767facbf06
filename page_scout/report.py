# page_scout/report.py

"""
Генерация JSON-отчёта для проекта PageScout.
"""
import json
from pathlib import Path
from typing import Any


def render_json(data: Any, output_path: Path | str) -> Path:
    """
    Сохраняет data в формате JSON по указанному пути.

    :param data: сериализуемые данные (например, PageConfig.to_dict())
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from page_scout.report import render_json
    report_path = render_json(config.to_dict(), 'reports/config.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output


__all__ = ["render_json"]
