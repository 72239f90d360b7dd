import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.profile.schemas import (
    DeleteResponse,
    EducationRequest,
    ExperienceRequest,
    ProfileRequest,
    ProfileResponse,
)
from api.security import CurrentUser, get_current_user
from errors import DevConnectorError, NotFoundError, ProfileNotFoundError
from utils import error_response
from .service import (
    add_education,
    add_experience,
    delete_profile_and_user,
    get_all_profiles,
    get_own_profile,
    get_profile_by_handle,
    get_profile_by_user_id,
    remove_education,
    remove_experience,
    upsert_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile")


def _server_error(action: str, exc: Exception) -> HTTPException:
    logger.exception("Failed to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"server": f"Failed to {action}: {exc}"},
    )


@router.get("", response_model=ProfileResponse)
def get_own_profile_route(current_user: CurrentUser = Depends(get_current_user)):
    try:
        return get_own_profile(current_user.id)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("load profile", exc) from exc


@router.get("/all", response_model=list[ProfileResponse])
def get_all_profiles_route():
    try:
        return get_all_profiles()
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("load profiles", exc) from exc


@router.get("/user/{user_id}", response_model=ProfileResponse)
def get_profile_by_user_route(user_id: str):
    try:
        return get_profile_by_user_id(user_id)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("load profile", exc) from exc


@router.get("/handle/{handle}", response_model=ProfileResponse)
def get_profile_by_handle_route(handle: str):
    try:
        return get_profile_by_handle(handle)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("load profile", exc) from exc


@router.post("", response_model=ProfileResponse)
def upsert_profile_route(request: ProfileRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return upsert_profile(current_user.id, request.model_dump())
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("save profile", exc) from exc


@router.post("/experience", response_model=ProfileResponse)
def add_experience_route(request: ExperienceRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return add_experience(current_user.id, request.model_dump(by_alias=True))
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("add experience", exc) from exc


@router.delete("/experience/{exp_id}", response_model=ProfileResponse)
def remove_experience_route(exp_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return remove_experience(current_user.id, exp_id)
    except ProfileNotFoundError as exc:
        raise error_response(exc) from exc
    except NotFoundError as exc:
        raise error_response(exc, status.HTTP_400_BAD_REQUEST) from exc
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("remove experience", exc) from exc


@router.post("/education", response_model=ProfileResponse)
def add_education_route(request: EducationRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return add_education(current_user.id, request.model_dump(by_alias=True))
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("add education", exc) from exc


@router.delete("/education/{edu_id}", response_model=ProfileResponse)
def remove_education_route(edu_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return remove_education(current_user.id, edu_id)
    except ProfileNotFoundError as exc:
        raise error_response(exc) from exc
    except NotFoundError as exc:
        raise error_response(exc, status.HTTP_400_BAD_REQUEST) from exc
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("remove education", exc) from exc


@router.delete("", response_model=DeleteResponse)
def delete_profile_route(current_user: CurrentUser = Depends(get_current_user)):
    try:
        return delete_profile_and_user(current_user.id)
    except DevConnectorError as exc:
        raise error_response(exc) from exc
    except Exception as exc:
        raise _server_error("delete profile", exc) from exc
