import os
from collections.abc import AsyncGenerator, Sequence
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing application modules
os.environ.setdefault("DATABASE_URL", "postgresql+asyncpg://recipes:recipes@db:5432/recipes_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")


class FakeRecipeStore:
    """In-memory stand-in for the recipe store.

    Returns canned data and records every call so tests can inspect the
    predicates, orderings and pagination the engine asked for.
    """

    def __init__(self) -> None:
        self.ranked = []
        self.rank_error: Exception | None = None
        self.find_error: Exception | None = None
        self.recipes = []
        self.total = 0
        self.cuisines: list[str] = []
        self.dietary_tags = []
        self.calls: list[tuple[str, dict]] = []

    def calls_to(self, name: str) -> list[dict]:
        return [kwargs for call_name, kwargs in self.calls if call_name == name]

    async def rank_matches(self, tsquery, where):
        self.calls.append(("rank_matches", {"tsquery": tsquery, "where": where}))
        if self.rank_error is not None:
            raise self.rank_error
        return list(self.ranked)

    async def find_recipes(
        self,
        where,
        order_by: Sequence | None = None,
        skip: int = 0,
        take: int | None = None,
        user_id: str | None = None,
    ):
        self.calls.append(
            ("find_recipes", {"where": where, "order_by": order_by, "skip": skip, "take": take, "user_id": user_id})
        )
        if self.find_error is not None:
            raise self.find_error
        return list(self.recipes)

    async def count_recipes(self, where) -> int:
        self.calls.append(("count_recipes", {"where": where}))
        return self.total

    async def list_cuisines(self) -> list[str]:
        self.calls.append(("list_cuisines", {}))
        return list(self.cuisines)

    async def list_dietary_tags(self):
        self.calls.append(("list_dietary_tags", {}))
        return list(self.dietary_tags)


def build_recipe(
    recipe_id: str = "recipe-1",
    name: str = "Chicken Pasta",
    *,
    with_image: bool = True,
    saved_by_user: bool = False,
    tag_statuses: Sequence[str] = (),
    **overrides,
):
    """Build a transient ``Recipe`` with every relation search results use."""
    from recipe_search.models import (
        DietaryTag,
        Recipe,
        RecipeDietaryTag,
        RecipeImage,
        SavedRecipe,
        User,
        UserRecipeTag,
    )

    fields = {
        "id": recipe_id,
        "name": name,
        "description": "Delicious pasta",
        "prep_time": 15,
        "cook_time": 30,
        "servings": 4,
        "difficulty": "EASY",
        "cuisine_type": "Italian",
        "visibility": "PUBLIC",
        "author_id": "author-1",
        "avg_rating": 4.5,
        "rating_count": 10,
        "created_at": datetime(2025, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)

    recipe = Recipe(**fields)
    recipe.author = User(id=fields["author_id"], name="Chef", username="chef", image=None)
    recipe.images = (
        [RecipeImage(id=f"{recipe_id}-img", url="https://example.com/img.jpg", is_primary=True, order=0)]
        if with_image
        else []
    )
    recipe.dietary_tags = [
        RecipeDietaryTag(
            recipe_id=recipe_id,
            dietary_tag_id="dt-1",
            dietary_tag=DietaryTag(id="dt-1", name="Gluten-Free"),
        )
    ]
    recipe.saved_by = (
        [SavedRecipe(id=f"{recipe_id}-save", user_id="user-1", recipe_id=recipe_id)] if saved_by_user else []
    )
    recipe.user_tags = [
        UserRecipeTag(id=f"{recipe_id}-tag-{i}", user_id="user-1", recipe_id=recipe_id, status=status)
        for i, status in enumerate(tag_statuses)
    ]
    return recipe


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_store() -> FakeRecipeStore:
    return FakeRecipeStore()


@pytest.fixture
def recipe_factory():
    """Return the transient recipe builder."""
    return build_recipe


@pytest_asyncio.fixture(scope="function")
async def test_app(fake_store: FakeRecipeStore):
    """Provide the FastAPI app with the recipe store swapped for the fake."""
    from recipe_search.api.search import get_recipe_store
    from recipe_search.main import app

    app.dependency_overrides[get_recipe_store] = lambda: fake_store
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client bound to the test app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_auth_headers(user_id: str = "user-1", sub: str = "alice") -> dict[str, str]:
    """Create Authorization headers with a valid access token."""
    from recipe_search.services.auth_service import create_access_token

    token = create_access_token(user_id, sub)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return make_auth_headers()


@pytest.fixture
def make_headers():
    """Return the Authorization header builder for arbitrary users."""
    return make_auth_headers
