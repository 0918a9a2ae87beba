from dataclasses import replace
from datetime import UTC, date, datetime, timedelta

import pytest

from meal_tracker.errors import NotFoundError, ValidationError
from meal_tracker.services.favorites import FavoriteFoodService
from tests.conftest import (
    OTHER_USER_ID,
    TODAY,
    USER_ID,
    InMemoryFavoriteFoodRepository,
    InMemoryFoodEntryRepository,
    make_food_service,
)


def _service() -> tuple[FavoriteFoodService, InMemoryFavoriteFoodRepository]:
    entries = InMemoryFoodEntryRepository()
    repository = InMemoryFavoriteFoodRepository(entries=entries)
    service = FavoriteFoodService(
        repository=repository, food_entries=make_food_service(entries)
    )
    return service, repository


def _favorite(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "name": "Greek yogurt",
        "calories": 150,
        "protein_g": 15,
        "carbs_g": 8,
        "fat_g": 4.5,
        "serving_size": "170 g",
        "category": "dairy",
    }
    data.update(overrides)
    return data


def test_create_starts_unused() -> None:
    service, _ = _service()

    favorite = service.create(USER_ID, _favorite())

    assert favorite.usage_count == 0
    assert favorite.last_used_at is None
    assert service.get(favorite.id, USER_ID) == favorite


def test_create_validates_name() -> None:
    service, _ = _service()

    with pytest.raises(ValidationError):
        service.create(USER_ID, _favorite(name=""))


def test_add_to_log_copies_nutrition_and_bumps_usage() -> None:
    service, repository = _service()
    favorite = service.create(USER_ID, _favorite())
    repository.favorites[favorite.id] = replace(favorite, usage_count=3)
    before = datetime.now(tz=UTC)

    entry = service.add_to_log(favorite.id, USER_ID, "breakfast")

    stored = service.get(favorite.id, USER_ID)
    assert stored.usage_count == 4
    assert stored.last_used_at is not None
    assert stored.last_used_at >= before
    assert entry.food_name == favorite.name
    assert (entry.calories, entry.protein_g, entry.carbs_g, entry.fat_g) == (
        150,
        15,
        8,
        4.5,
    )
    assert entry.meal_type == "breakfast"
    assert entry.entry_date == TODAY
    assert entry.source == "manual"


def test_add_to_log_uses_requested_date() -> None:
    service, _ = _service()
    favorite = service.create(USER_ID, _favorite())

    entry = service.add_to_log(favorite.id, USER_ID, "dinner", "2024-03-01")

    assert entry.entry_date == date(2024, 3, 1)


def test_add_to_log_requires_valid_meal_type() -> None:
    service, repository = _service()
    favorite = service.create(USER_ID, _favorite())

    with pytest.raises(ValidationError):
        service.add_to_log(favorite.id, USER_ID, "brunch")

    assert repository.entries.entries == {}


def test_add_to_log_for_other_user_is_not_found() -> None:
    service, repository = _service()
    favorite = service.create(USER_ID, _favorite())

    with pytest.raises(NotFoundError):
        service.add_to_log(favorite.id, OTHER_USER_ID, "lunch")

    assert repository.entries.entries == {}


def test_list_orders_by_usage_then_recency_then_name() -> None:
    service, repository = _service()
    now = datetime(2024, 3, 1, tzinfo=UTC)
    rows = {
        "Banana": (5, now),
        "Apple": (5, now + timedelta(days=1)),
        "Cherry": (2, None),
        "Bagel": (2, None),
        "Date": (0, None),
    }
    for name, (usage, last_used) in rows.items():
        favorite = service.create(USER_ID, _favorite(name=name))
        repository.update_favorite(
            favorite.id, USER_ID, {"usage_count": usage, "last_used_at": last_used}
        )

    names = [favorite.name for favorite in service.list_favorites(USER_ID)]

    assert names == ["Apple", "Banana", "Bagel", "Cherry", "Date"]


def test_list_filters_by_category() -> None:
    service, _ = _service()
    service.create(USER_ID, _favorite(name="Yogurt"))
    service.create(USER_ID, _favorite(name="Toast", category="bakery"))

    favorites = service.list_favorites(USER_ID, {"category": "bakery"})

    assert [favorite.name for favorite in favorites] == ["Toast"]


def test_search_is_case_insensitive_and_scoped() -> None:
    service, _ = _service()
    service.create(USER_ID, _favorite(name="Chicken salad"))
    service.create(USER_ID, _favorite(name="Rice"))
    service.create(OTHER_USER_ID, _favorite(name="Chicken wrap"))

    results = service.search(USER_ID, "CHICK")

    assert [favorite.name for favorite in results] == ["Chicken salad"]


def test_blank_search_lists_favorites() -> None:
    service, _ = _service()
    service.create(USER_ID, _favorite(name="Rice"))

    assert len(service.search(USER_ID, "   ")) == 1


def test_search_rejects_long_text() -> None:
    service, _ = _service()

    with pytest.raises(ValidationError):
        service.search(USER_ID, "x" * 201)


def test_update_and_delete() -> None:
    service, _ = _service()
    favorite = service.create(USER_ID, _favorite())

    updated = service.update(favorite.id, USER_ID, {"calories": 180})

    assert updated.calories == 180
    assert updated.name == favorite.name
    assert service.delete(favorite.id, USER_ID) is True
    assert service.delete(favorite.id, USER_ID) is False
    with pytest.raises(NotFoundError):
        service.update(favorite.id, USER_ID, {"calories": 200})


def test_bulk_delete() -> None:
    service, _ = _service()
    first = service.create(USER_ID, _favorite(name="A"))
    second = service.create(USER_ID, _favorite(name="B"))

    assert service.bulk_delete(USER_ID, [first.id, second.id, "missing"]) == 2
