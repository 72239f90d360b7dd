import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.posts.schemas import CommentRequest, DeleteResponse, PostRequest, PostResponse
from api.security import CurrentUser, get_current_user
from errors import DevConnectorError, NotFoundError
from utils import error_response
from .service import (
    add_comment,
    create_post,
    delete_post,
    get_post,
    like_post,
    list_posts,
    remove_comment,
    unlike_post,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts")


def _server_error(action: str, exc: Exception) -> HTTPException:
    logger.exception("Failed to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"server": f"Failed to {action}: {exc}"},
    )


@router.get("", response_model=list[PostResponse])
def list_posts_route():
    try:
        return list_posts()
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("load posts", exc) from exc


@router.get("/{post_id}", response_model=PostResponse)
def get_post_route(post_id: str):
    try:
        return get_post(post_id)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("load post", exc) from exc


@router.delete("/{post_id}", response_model=DeleteResponse)
def delete_post_route(post_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return delete_post(current_user.id, post_id)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("delete post", exc) from exc


@router.post("", response_model=PostResponse)
def create_post_route(request: PostRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return create_post(current_user.id, current_user.name, current_user.avatar, request.text)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("create post", exc) from exc


@router.post("/like/{post_id}", response_model=PostResponse)
def like_post_route(post_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return like_post(current_user.id, post_id)
    except NotFoundError as exc:
        raise error_response(exc, status.HTTP_400_BAD_REQUEST) from exc
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("like post", exc) from exc


@router.post("/unlike/{post_id}", response_model=PostResponse)
def unlike_post_route(post_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return unlike_post(current_user.id, post_id)
    except NotFoundError as exc:
        raise error_response(exc, status.HTTP_400_BAD_REQUEST) from exc
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("unlike post", exc) from exc


@router.post("/comment/{post_id}", response_model=PostResponse)
def add_comment_route(
    post_id: str,
    request: CommentRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        return add_comment(current_user.id, current_user.name, current_user.avatar, post_id, request.text)
    except NotFoundError as exc:
        raise error_response(exc, status.HTTP_400_BAD_REQUEST) from exc
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("add comment", exc) from exc


@router.delete("/comment/{post_id}/{comment_id}", response_model=PostResponse)
def remove_comment_route(
    post_id: str,
    comment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        return remove_comment(post_id, comment_id)
    except NotFoundError as exc:
        raise error_response(exc, status.HTTP_400_BAD_REQUEST) from exc
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("remove comment", exc) from exc
