#!/usr/bin/env python3
"""
Точка входа: синхронизация рецептов с позициями меню.

Создаёт позицию меню для каждого рецепта без неё
(или привязывает уже существующую непривязанную позицию "menu_<id>").
Повторный запуск ничего не создаёт.

Использование:
    python scripts/sync_recipes_to_menu.py
    python scripts/sync_recipes_to_menu.py --repo data/repository --json
"""

import argparse
import json
import sys
from pathlib import Path

from config.settings import REPOSITORY_DIR
from src.recipe_import.application.factory import RecipeImportComponentFactory
from src.recipe_import.domain.exceptions import RepositoryError


def main():
    parser = argparse.ArgumentParser(description="Синхронизация рецептов с меню")
    parser.add_argument("--repo", type=Path, default=REPOSITORY_DIR, help="Директория репозитория")
    parser.add_argument("--json", action="store_true", help="Вывести отчёт в JSON")
    args = parser.parse_args()

    repository = RecipeImportComponentFactory.create_repository(args.repo)
    reconciler = RecipeImportComponentFactory.create_reconciler(repository)

    try:
        report = reconciler.reconcile()
    except RepositoryError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(
            f"[SYNC] Создано: {report.created}/{report.attempted}, "
            f"привязано существующих: {report.linked}, ошибок: {report.failed}"
        )
        for failure in report.failures:
            print(f"  [ERROR] {failure.recipe_id}: {failure}")

    sys.exit(0 if report.failed == 0 else 1)


if __name__ == "__main__":
    main()
