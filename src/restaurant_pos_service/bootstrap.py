"""Wiring of the DynamoDB resource, repositories and services.

Shared by the uvicorn entry point and the Lambda handler.
"""

import logging
from dataclasses import dataclass
from typing import Any

import boto3

from restaurant_pos_service.config import Settings
from restaurant_pos_service.repositories.dynamodb_store import DynamoDBStore
from restaurant_pos_service.repositories.pos_repositories import (
    BillRepository,
    InventoryRepository,
    MenuItemRepository,
    UserRepository,
)
from restaurant_pos_service.services.billing_service import BillingService
from restaurant_pos_service.services.catalog_service import CatalogService
from restaurant_pos_service.services.identity_service import IdentityService
from restaurant_pos_service.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """The four POS components, ready to hand to ``create_app``."""

    catalog_service: CatalogService
    billing_service: BillingService
    inventory_service: InventoryService
    identity_service: IdentityService


def create_dynamodb_resource(settings: Settings) -> Any:
    """Create a DynamoDB resource for the configured environment.

    Args:
        settings: Service settings

    Returns:
        Boto3 DynamoDB resource
    """
    if settings.dynamodb_endpoint:
        # Local DynamoDB - explicit credentials, usually dummies
        logger.info(f"Using local DynamoDB at {settings.dynamodb_endpoint}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=settings.dynamodb_endpoint,
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id or "dummy",
            aws_secret_access_key=settings.aws_secret_access_key or "dummy",
        )

    logger.info(f"Using AWS DynamoDB in region {settings.aws_region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=settings.aws_region)


def build_services(settings: Settings, dynamodb_resource: Any) -> ServiceContainer:
    """Create repositories and services on top of one DynamoDB resource.

    Args:
        settings: Service settings (table names)
        dynamodb_resource: Boto3 DynamoDB resource

    Returns:
        ServiceContainer with every component wired
    """
    store = DynamoDBStore(dynamodb_resource)
    tables = settings.tables

    catalog_service = CatalogService(MenuItemRepository(store, tables.menu_items))
    billing_service = BillingService(
        bill_repository=BillRepository(store, tables.billing),
        catalog_service=catalog_service,
    )
    inventory_service = InventoryService(InventoryRepository(store, tables.kitchen_inventory))
    identity_service = IdentityService(UserRepository(store, tables.users))

    logger.info(
        f"Services configured - menu: {tables.menu_items}, billing: {tables.billing}, "
        f"users: {tables.users}, inventory: {tables.kitchen_inventory}"
    )

    return ServiceContainer(
        catalog_service=catalog_service,
        billing_service=billing_service,
        inventory_service=inventory_service,
        identity_service=identity_service,
    )
