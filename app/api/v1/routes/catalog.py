from typing import List

from fastapi import APIRouter

from infrastructure.persistence import CatalogItem
from infrastructure.services import CatalogDep

router = APIRouter(tags=["Catalog"])


@router.get("/categories", response_model=List[CatalogItem])
def list_categories(catalog: CatalogDep):
    return catalog.list_categories()


@router.get("/channels", response_model=List[CatalogItem])
def list_channels(catalog: CatalogDep):
    return catalog.list_channels()
