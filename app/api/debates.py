import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import (
    get_current_user,
    get_debate_generator,
    get_debate_store,
    get_lifecycle_controller,
)
from app.caching import CacheGateway, get_cache
from app.models import Debate, User
from app.models.debate import DebateType, VoteType
from app.schemas.common import OkResponse
from app.schemas.debate import (
    CommentCreate,
    CommentResponse,
    DebateCardCreate,
    DebateCardResponse,
    DebateCreate,
    DebateResponse,
    GenerateDebateRequest,
    GenerationHealthResponse,
    GenerationPreviewResponse,
    GenerationResponse,
    VoteCreate,
    VoteResponse,
)
from app.services.debate_generator import DebateGenerator
from app.services.debate_lifecycle import DebateLifecycleController
from app.services.debate_store import SqlDebateStore
from app.services.engagement import recalculate_engagement
from app.services.football_client import FootballClient, get_football_client
from app.utils.errors import ConflictError, ContentGenerationError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debates", tags=["debates"])


async def _debate_response(store: SqlDebateStore, debate: Debate) -> DebateResponse:
    response = DebateResponse.model_validate(debate)
    counts = await store.vote_counts([card.id for card in response.cards])
    for card in response.cards:
        card.vote_counts = counts[card.id]
    return response


async def _get_active_debate(store: SqlDebateStore, debate_id: int) -> Debate:
    debate = await store.get_debate(debate_id)
    if debate is None:
        raise HTTPException(status_code=404, detail="Debate not found")
    return debate


@router.post("", response_model=DebateResponse, status_code=status.HTTP_201_CREATED)
async def create_debate(
    body: DebateCreate,
    store: SqlDebateStore = Depends(get_debate_store),
):
    """Create a debate by hand (no cards)."""
    try:
        debate = await store.create_debate(
            match_id=body.match_id,
            debate_type=body.debate_type,
            headline=body.headline,
            description=body.description,
            ai_generated=body.ai_generated,
        )
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return await _debate_response(store, debate)


@router.get("/top", response_model=list[DebateResponse])
async def get_top_debates(
    limit: int = Query(10, ge=1, le=100),
    store: SqlDebateStore = Depends(get_debate_store),
):
    """Active debates ordered by engagement score."""
    debates = await store.list_top(limit)
    return [await _debate_response(store, debate) for debate in debates]


@router.get("/generate", response_model=GenerationPreviewResponse)
async def preview_debate(
    match_id: str = Query(..., min_length=1),
    debate_type: DebateType = Query(..., alias="type"),
    controller: DebateLifecycleController = Depends(get_lifecycle_controller),
):
    """Generate debate content for a match without saving it."""
    try:
        decision, content = await controller.preview(match_id, debate_type)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (UpstreamError, ContentGenerationError) as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    if content is None:
        return GenerationPreviewResponse(status="skipped", message=decision.reason)
    return GenerationPreviewResponse(status="preview", content=content)


@router.post("/generate", response_model=GenerationResponse)
async def generate_debate(
    body: GenerateDebateRequest,
    controller: DebateLifecycleController = Depends(get_lifecycle_controller),
):
    """
    Generate and store the debate for a match, or return the existing one.

    - `force_regenerate` replaces an active debate (the old one is soft-deleted)
    - a debate type that does not fit the match status is skipped, not an error
    """
    try:
        outcome = await controller.generate(
            body.match_id,
            body.debate_type,
            regenerate=body.force_regenerate,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (UpstreamError, ContentGenerationError) as e:
        logger.warning("Debate generation failed for match %s: %s", body.match_id, e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    debate = None
    if outcome.debate is not None:
        debate = await _debate_response(controller.store, outcome.debate)
    return GenerationResponse(status=outcome.status.value, message=outcome.message, debate=debate)


@router.get("/health", response_model=GenerationHealthResponse)
async def debate_generation_health(
    generator: DebateGenerator = Depends(get_debate_generator),
    client: FootballClient = Depends(get_football_client),
    cache: CacheGateway = Depends(get_cache),
):
    openai_configured = generator.is_configured
    football_configured = client.is_configured
    return GenerationHealthResponse(
        status="healthy" if openai_configured and football_configured else "degraded",
        openai_configured=openai_configured,
        football_api_configured=football_configured,
        cache_available=await cache.health_check(),
    )


@router.get("/match", response_model=list[DebateResponse])
async def get_debates_by_match(
    match_id: str = Query(..., min_length=1),
    store: SqlDebateStore = Depends(get_debate_store),
):
    debates = await store.list_active(match_id)
    return [await _debate_response(store, debate) for debate in debates]


# ==================== Cards ====================


@router.post("/cards", response_model=DebateCardResponse, status_code=status.HTTP_201_CREATED)
async def create_debate_card(
    body: DebateCardCreate,
    store: SqlDebateStore = Depends(get_debate_store),
):
    await _get_active_debate(store, body.debate_id)
    card = await store.create_card(
        debate_id=body.debate_id,
        stance=body.stance,
        title=body.title,
        description=body.description,
        ai_generated=body.ai_generated,
    )
    return DebateCardResponse.model_validate(card)


# ==================== Votes ====================


@router.post("/votes", response_model=VoteResponse, status_code=status.HTTP_201_CREATED)
async def create_vote(
    body: VoteCreate,
    store: SqlDebateStore = Depends(get_debate_store),
    user: User = Depends(get_current_user),
):
    card = await store.get_card(body.debate_card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Debate card not found")
    await _get_active_debate(store, card.debate_id)

    try:
        vote = await store.create_vote(card.id, user.id, body.vote_type, body.emoji)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    await recalculate_engagement(store, card.debate_id)
    return VoteResponse.model_validate(vote)


@router.delete("/votes", response_model=OkResponse)
async def delete_vote(
    debate_card_id: int = Query(...),
    vote_type: VoteType = Query(...),
    emoji: str | None = Query(None),
    store: SqlDebateStore = Depends(get_debate_store),
    user: User = Depends(get_current_user),
):
    card = await store.get_card(debate_card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Debate card not found")

    if vote_type != VoteType.emoji:
        emoji = None
    deleted = await store.delete_vote(card.id, user.id, vote_type, emoji)
    if not deleted:
        raise HTTPException(status_code=404, detail="Vote not found")

    await recalculate_engagement(store, card.debate_id)
    return OkResponse(ok=True)


# ==================== Comments ====================


@router.post("/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    body: CommentCreate,
    store: SqlDebateStore = Depends(get_debate_store),
    user: User = Depends(get_current_user),
):
    await _get_active_debate(store, body.debate_id)

    if body.parent_comment_id is not None:
        parent = await store.get_comment(body.parent_comment_id)
        if parent is None or parent.debate_id != body.debate_id:
            raise HTTPException(status_code=400, detail="parent_comment_id does not belong to this debate")

    comment = await store.create_comment(
        debate_id=body.debate_id,
        user_id=user.id,
        content=body.content,
        parent_comment_id=body.parent_comment_id,
    )
    await recalculate_engagement(store, body.debate_id)
    return CommentResponse(
        id=comment.id,
        debate_id=comment.debate_id,
        parent_comment_id=comment.parent_comment_id,
        user_id=user.id,
        user_first_name=user.firstname,
        user_last_name=user.lastname,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


@router.delete("/comments/{comment_id}", response_model=OkResponse)
async def delete_comment(
    comment_id: int,
    store: SqlDebateStore = Depends(get_debate_store),
    user: User = Depends(get_current_user),
):
    comment = await store.get_comment(comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user_id != user.id:
        raise HTTPException(status_code=403, detail="Only the author can delete a comment")

    debate_id = comment.debate_id
    await store.delete_comment(comment)
    await recalculate_engagement(store, debate_id)
    return OkResponse(ok=True)


# ==================== Single debate ====================


@router.get("/{debate_id}", response_model=DebateResponse)
async def get_debate(
    debate_id: int,
    store: SqlDebateStore = Depends(get_debate_store),
):
    debate = await _get_active_debate(store, debate_id)
    return await _debate_response(store, debate)


@router.get("/{debate_id}/comments", response_model=list[CommentResponse])
async def get_comments(
    debate_id: int,
    store: SqlDebateStore = Depends(get_debate_store),
):
    await _get_active_debate(store, debate_id)
    rows = await store.list_comments(debate_id)
    return [
        CommentResponse(
            id=comment.id,
            debate_id=comment.debate_id,
            parent_comment_id=comment.parent_comment_id,
            user_id=comment.user_id,
            user_first_name=author.firstname,
            user_last_name=author.lastname,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
        for comment, author in rows
    ]


@router.delete("/{debate_id}", response_model=OkResponse)
async def soft_delete_debate(
    debate_id: int,
    store: SqlDebateStore = Depends(get_debate_store),
):
    debate = await _get_active_debate(store, debate_id)
    await store.soft_delete(debate)
    logger.info("Soft-deleted debate %s", debate_id)
    return OkResponse(ok=True)


@router.delete("/{debate_id}/hard", response_model=OkResponse)
async def hard_delete_debate(
    debate_id: int,
    store: SqlDebateStore = Depends(get_debate_store),
):
    """Permanently delete a debate with its cards, votes, comments and analytics."""
    debate = await store.get_debate(debate_id, include_deleted=True)
    if debate is None:
        raise HTTPException(status_code=404, detail="Debate not found")
    await store.hard_delete(debate_id)
    logger.info("Hard-deleted debate %s", debate_id)
    return OkResponse(ok=True)


@router.post("/{debate_id}/restore", response_model=DebateResponse)
async def restore_debate(
    debate_id: int,
    store: SqlDebateStore = Depends(get_debate_store),
):
    debate = await store.get_debate(debate_id, include_deleted=True)
    if debate is None:
        raise HTTPException(status_code=404, detail="Debate not found")
    if debate.deleted_at is None:
        return await _debate_response(store, debate)

    try:
        debate = await store.restore(debate)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return await _debate_response(store, debate)
