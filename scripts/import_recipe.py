#!/usr/bin/env python3
"""
Точка входа: импорт рецепта из текста или фото.

Использование:
    # Импорт из текстового файла (каталог берётся из репозитория)
    python scripts/import_recipe.py path/to/recipe.txt

    # Импорт из фото (нужны Google credentials)
    python scripts/import_recipe.py path/to/recipe.jpg

    # Свой каталог и директория репозитория
    python scripts/import_recipe.py recipe.txt --catalog catalog.json --repo data/repository

    # Ревалидация всех сохранённых рецептов против текущего каталога
    python scripts/import_recipe.py --revalidate
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from config.settings import REPOSITORY_DIR, SUPPORTED_IMAGE_FORMATS, validate_config
from contracts.pos_dto import CatalogEntry
from src.recipe_import.application.factory import RecipeImportComponentFactory
from src.recipe_import.domain.exceptions import RecipeImportError
from src.recipe_import.pipeline import ImportOrchestrator
from src.recipe_import.progress import ProgressEvent


def print_progress(event: ProgressEvent) -> None:
    print(f"  [{event.progress:3d}%] {event.stage.value}: {event.message}")


def load_catalog(catalog_file: Path) -> List[CatalogEntry]:
    """Загружает каталог из JSON: список позиций или объект {id: позиция}."""
    with open(catalog_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    records = data.values() if isinstance(data, dict) else data
    return [CatalogEntry.model_validate(record) for record in records]


def import_file(path: Path, repo_dir: Path, catalog_file: Optional[Path]) -> bool:
    """
    Импортирует один файл рецепта.

    Returns:
        True если успешно, False если ошибка
    """
    is_image = path.suffix.lower() in SUPPORTED_IMAGE_FORMATS
    validate_config(require_vision=is_image, require_structurer=True)

    repository = RecipeImportComponentFactory.create_repository(repo_dir)
    orchestrator = RecipeImportComponentFactory.create_orchestrator(
        text_extractor=RecipeImportComponentFactory.create_text_extractor() if is_image else None,
        repository=repository,
    )
    catalog = load_catalog(catalog_file) if catalog_file else None

    print(f"\n[IMPORT] {path.name}")
    try:
        if is_image:
            result = orchestrator.import_from_image(path, catalog, on_progress=print_progress)
        else:
            text = path.read_text(encoding="utf-8")
            result = orchestrator.import_from_text(text, catalog, on_progress=print_progress)
    except RecipeImportError as e:
        print(f"  [ERROR] {e}")
        return False

    recipe = result.recipe
    print(f"  [SAVED] {recipe.id}: '{recipe.name}'")
    print(f"  [INFO]  status={recipe.status}, confidence={recipe.confidence}")
    for issue in recipe.issues:
        print(f"  [ISSUE] {issue.kind}: {issue.message}")
    return True


def revalidate_all(repo_dir: Path) -> bool:
    """
    Ревалидирует все сохранённые рецепты.

    Ошибка одного рецепта печатается и не прерывает остальные.

    Returns:
        True если все рецепты ревалидированы, False если были ошибки
    """
    validate_config(require_vision=False, require_structurer=False)

    repository = RecipeImportComponentFactory.create_repository(repo_dir)
    # Для ревалидации структурировщик не нужен
    orchestrator = ImportOrchestrator(repository=repository)

    try:
        recipes = repository.list_recipes()
    except RecipeImportError as e:
        print(f"[ERROR] {e}")
        return False

    print(f"\n[REVALIDATE] Рецептов: {len(recipes)}")
    failed = 0
    for recipe in recipes:
        try:
            updated = orchestrator.revalidate(recipe)
        except RecipeImportError as e:
            failed += 1
            print(f"  [ERROR] {recipe.id}: {e}")
            continue
        print(f"  {updated.id}: {recipe.status} → {updated.status} ({len(updated.issues)} issues)")

    print(f"[REVALIDATE] Успешно: {len(recipes) - failed}/{len(recipes)}, ошибок: {failed}")
    return failed == 0


def main():
    parser = argparse.ArgumentParser(description="Импорт рецепта в репозиторий")
    parser.add_argument("path", nargs="?", type=Path, help="Текстовый файл или фото рецепта")
    parser.add_argument("--catalog", type=Path, help="JSON с каталогом (иначе из репозитория)")
    parser.add_argument("--repo", type=Path, default=REPOSITORY_DIR, help="Директория репозитория")
    parser.add_argument("--revalidate", action="store_true", help="Ревалидировать сохранённые рецепты")
    parser.add_argument("--debug", action="store_true", help="Подробные логи")
    args = parser.parse_args()

    if not args.debug:
        logger.remove()
        logger.add(sys.stderr, level="WARNING")

    try:
        if args.revalidate:
            ok = revalidate_all(args.repo)
        elif args.path:
            if not args.path.exists():
                print(f"[ERROR] Файл не найден: {args.path}")
                sys.exit(1)
            ok = import_file(args.path, args.repo, args.catalog)
        else:
            parser.print_help()
            sys.exit(1)
    except ValueError as e:
        print(f"[ERROR] Конфигурация: {e}")
        sys.exit(1)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
