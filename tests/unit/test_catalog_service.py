"""Unit tests for CatalogService."""

from unittest.mock import MagicMock

import pytest

from restaurant_pos_service.errors import DuplicateKeyError, NotFoundError
from restaurant_pos_service.models.menu_models import MenuItem, MenuItemPatch
from restaurant_pos_service.repositories.pos_repositories import MenuItemRepository
from restaurant_pos_service.services.catalog_service import CatalogService


@pytest.mark.unit
class TestCatalogService:
    """Test suite for CatalogService."""

    @pytest.fixture
    def mock_repository(self) -> MagicMock:
        """Create a mock MenuItemRepository."""
        return MagicMock(spec=MenuItemRepository)

    @pytest.fixture
    def catalog_service(self, mock_repository: MagicMock) -> CatalogService:
        """Create a CatalogService with mocked repository."""
        return CatalogService(mock_repository)

    @pytest.mark.asyncio
    async def test_create_stamps_timestamps(
        self,
        catalog_service: CatalogService,
        mock_repository: MagicMock,
        mock_menu_item: MenuItem,
    ) -> None:
        """Test that created items carry createdAt and updatedAt."""
        mock_repository.create.side_effect = lambda item: item

        created = await catalog_service.create(mock_menu_item)

        assert created.created_at is not None
        assert created.updated_at == created.created_at
        assert mock_menu_item.created_at is None

    @pytest.mark.asyncio
    async def test_create_duplicate_item_id(
        self,
        catalog_service: CatalogService,
        mock_repository: MagicMock,
        mock_menu_item: MenuItem,
    ) -> None:
        """Test that a second item with the same id is refused."""
        mock_repository.create.side_effect = DuplicateKeyError("Item with itemId 'BEER1' exists")

        with pytest.raises(DuplicateKeyError):
            await catalog_service.create(mock_menu_item)

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(
        self, catalog_service: CatalogService, mock_repository: MagicMock
    ) -> None:
        """Test that a missing item raises NotFoundError."""
        mock_repository.get.return_value = None

        with pytest.raises(NotFoundError, match="Item not found"):
            await catalog_service.get_by_id("NOPE")

    @pytest.mark.asyncio
    async def test_get_by_type(
        self,
        catalog_service: CatalogService,
        mock_repository: MagicMock,
        mock_menu_item: MenuItem,
    ) -> None:
        """Test listing bar items."""
        mock_repository.list_by_type.return_value = [mock_menu_item]

        items = await catalog_service.get_by_type(is_kitchen=False)

        mock_repository.list_by_type.assert_called_once_with(False)
        assert items == [mock_menu_item]

    @pytest.mark.asyncio
    async def test_update_passes_patch(
        self,
        catalog_service: CatalogService,
        mock_repository: MagicMock,
        mock_menu_item: MenuItem,
    ) -> None:
        """Test that updates go straight to the repository."""
        patch = MenuItemPatch(name="Kingfisher Ultra")
        mock_repository.update.return_value = mock_menu_item

        await catalog_service.update("BEER1", patch)

        mock_repository.update.assert_called_once_with("BEER1", patch)

    @pytest.mark.asyncio
    async def test_update_stock_allows_negative_result(
        self,
        catalog_service: CatalogService,
        mock_repository: MagicMock,
        mock_menu_item: MenuItem,
    ) -> None:
        """Test that stock may be drawn below zero."""
        mock_repository.increment_stock.return_value = mock_menu_item.model_copy(
            update={"stock": -1}
        )

        item = await catalog_service.update_stock("BEER1", -25)

        mock_repository.increment_stock.assert_called_once_with("BEER1", -25)
        assert item.stock == -1

    @pytest.mark.asyncio
    async def test_update_stock_missing_item(
        self, catalog_service: CatalogService, mock_repository: MagicMock
    ) -> None:
        """Test that adjusting an unknown item raises NotFoundError."""
        mock_repository.increment_stock.side_effect = NotFoundError("itemId 'X' not found")

        with pytest.raises(NotFoundError):
            await catalog_service.update_stock("X", 1)

    @pytest.mark.asyncio
    async def test_delete_missing_item(
        self, catalog_service: CatalogService, mock_repository: MagicMock
    ) -> None:
        """Test that deleting an unknown item raises NotFoundError."""
        mock_repository.delete.return_value = None

        with pytest.raises(NotFoundError):
            await catalog_service.delete("X")

    @pytest.mark.asyncio
    async def test_get_low_stock(
        self,
        catalog_service: CatalogService,
        mock_repository: MagicMock,
        mock_menu_item: MenuItem,
    ) -> None:
        """Test that only items at or below their threshold are returned."""
        low = mock_menu_item.model_copy(update={"item_id": "BEER2", "stock": 3})
        mock_repository.list_all.return_value = [mock_menu_item, low]

        items = await catalog_service.get_low_stock()

        assert [item.item_id for item in items] == ["BEER2"]
