"""Category domain service."""

from typing import Optional

from bucketsort.database.base import SERVER_TIMESTAMP, DocumentStore, document_path, join_path
from bucketsort.database.mappers import category_to_document, document_to_category
from bucketsort.domain.entities import Category as CategoryEntity
from bucketsort.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_category_name,
)
from bucketsort.logging_setup import get_logger

logger = get_logger(__name__)

# (name, color) pairs seeded for a user without any buckets
DEFAULT_CATEGORIES = [
    ("Personal", "#3b82f6"),
    ("Mom & Dad", "#10b981"),
    ("Family", "#f59e0b"),
]


def categories_path(user_id: str) -> str:
    """Return the collection path of a user's categories."""
    return join_path("users", user_id, "categories")


class CategoryService:
    """Service for managing a user's buckets."""

    def __init__(self, store: DocumentStore):
        """Initialize category service.

        Args:
            store: Document store instance
        """
        self.store = store

    def _path(self, user_id: str, category_id: str) -> str:
        return document_path(categories_path(user_id), category_id)

    async def create_category(
        self, user_id: str, name: str, color: Optional[str] = None, is_default: bool = False
    ) -> str:
        """Create a category.

        Args:
            user_id: Owner of the category
            name: Category name
            color: Optional display color (e.g., "#3b82f6")
            is_default: Whether this is one of the seeded categories

        Returns:
            Store-generated category ID

        Raises:
            ValidationError: If name is empty
            ConflictError: If a category with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if await self.get_category_by_name(user_id, name) is not None:
            raise ConflictError(duplicate_category_name(name))

        category_id = self.store.new_document_id()
        await self.store.set_document(
            self._path(user_id, category_id), category_to_document(name, color, is_default)
        )
        logger.debug("Created category %s (%s)", name, category_id)
        return category_id

    async def get_category(self, user_id: str, category_id: str) -> Optional[CategoryEntity]:
        """Get category by ID.

        Returns:
            Category entity or None if not found
        """
        document = await self.store.get_document(self._path(user_id, category_id))
        if document is None:
            return None
        return document_to_category(document)

    async def get_category_by_name(self, user_id: str, name: str) -> Optional[CategoryEntity]:
        """Get category by name, ignoring case."""
        wanted = name.strip().lower()
        for category in await self.get_categories(user_id):
            if category.name.lower() == wanted:
                return category
        return None

    async def get_categories(self, user_id: str) -> list[CategoryEntity]:
        """List categories in creation order."""
        documents = await self.store.list_documents(categories_path(user_id), order_by="createdAt")
        return [document_to_category(document) for document in documents]

    async def update_category(
        self,
        user_id: str,
        category_id: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        """Rename or recolor a category.

        Raises:
            NotFoundError: If category doesn't exist
            ConflictError: If the new name is used by another category
        """
        category = await self.get_category(user_id, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))

        updates: dict = {"updatedAt": SERVER_TIMESTAMP}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Category name cannot be empty")
            existing = await self.get_category_by_name(user_id, name)
            if existing is not None and existing.id != category_id:
                raise ConflictError(duplicate_category_name(name))
            updates["name"] = name
        if color is not None:
            updates["color"] = color

        await self.store.update_document(self._path(user_id, category_id), updates)

    async def delete_category(self, user_id: str, category_id: str) -> None:
        """Delete a category.

        Transactions sorted into the category keep their category ID.

        Raises:
            NotFoundError: If category doesn't exist
        """
        if await self.get_category(user_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        await self.store.delete_document(self._path(user_id, category_id))

    async def ensure_default_categories(self, user_id: str) -> list[CategoryEntity]:
        """Seed the default categories when the user has none.

        Returns:
            The user's categories after seeding
        """
        if not await self.get_categories(user_id):
            for name, color in DEFAULT_CATEGORIES:
                await self.create_category(user_id, name, color=color, is_default=True)
            logger.info("Seeded %d default categories for user %s", len(DEFAULT_CATEGORIES), user_id)
        return await self.get_categories(user_id)
