"""Recipe Import - импорт рецептов и сверка ингредиентов с каталогом POS."""
