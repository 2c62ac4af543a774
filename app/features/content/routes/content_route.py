from typing import List

from fastapi import APIRouter, Depends, Request, status

from app.database.account_store import AccountStore
from app.errors import ContentAccessDenied, ContentNotFound
from app.features.auth.dependencies import get_store, require_auth
from app.features.auth.schemas.auth_schema import CurrentUser
from app.features.content.models.content_model import ContentItem
from app.features.content.schemas.content_schema import (
    ContentCreate,
    ContentGenerationRequest,
    ContentOut,
    ContentPatch,
    ContentSaveRequest,
    GeneratedContent,
)
from app.features.content.utils.generator import ContentGenerator

router = APIRouter(prefix="/api/content", tags=["Content"])


def get_generator(request: Request) -> ContentGenerator:
    return request.app.state.generator


def get_owned_item(item_id: int, current_user: CurrentUser, store: AccountStore) -> ContentItem:
    item = store.get_content_item(item_id)
    if not item:
        raise ContentNotFound()
    if item.user_id != current_user.user_id:
        raise ContentAccessDenied()
    return item


@router.post("/generate", response_model=GeneratedContent)
async def generate_content(
    payload: ContentGenerationRequest,
    current_user: CurrentUser = Depends(require_auth),
    generator: ContentGenerator = Depends(get_generator),
):
    return await generator.generate(payload)


@router.post("/save", response_model=ContentOut, status_code=status.HTTP_201_CREATED)
def save_content(
    payload: ContentSaveRequest,
    current_user: CurrentUser = Depends(require_auth),
    store: AccountStore = Depends(get_store),
):
    item = store.create_content_item(
        ContentCreate(user_id=current_user.user_id, **payload.model_dump())
    )
    return ContentOut.model_validate(item)


@router.get("/items", response_model=List[ContentOut])
def list_content(
    current_user: CurrentUser = Depends(require_auth),
    store: AccountStore = Depends(get_store),
):
    items = store.get_content_items_by_user_id(current_user.user_id)
    return [ContentOut.model_validate(item) for item in items]


@router.get("/item/{item_id}", response_model=ContentOut)
def get_content(
    item_id: int,
    current_user: CurrentUser = Depends(require_auth),
    store: AccountStore = Depends(get_store),
):
    return ContentOut.model_validate(get_owned_item(item_id, current_user, store))


@router.patch("/item/{item_id}", response_model=ContentOut)
def update_content(
    item_id: int,
    patch: ContentPatch,
    current_user: CurrentUser = Depends(require_auth),
    store: AccountStore = Depends(get_store),
):
    get_owned_item(item_id, current_user, store)
    item = store.update_content_item(item_id, patch)
    if not item:
        raise ContentNotFound()
    return ContentOut.model_validate(item)


@router.delete("/item/{item_id}")
def delete_content(
    item_id: int,
    current_user: CurrentUser = Depends(require_auth),
    store: AccountStore = Depends(get_store),
):
    get_owned_item(item_id, current_user, store)
    if not store.delete_content_item(item_id):
        raise ContentNotFound()
    return {"success": True, "message": "Content item deleted"}
