"""
사용자 시크릿 API
- MCP 서버 인증에 쓰는 토큰/키 저장 (암호화)
- 응답에는 마스킹된 값만 포함
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.api.errors import storage_error
from app.core.encryption import decrypt_value, mask_value
from app.crud import user_secret as crud_secret
from app.db.session import get_db
from app.models.user import User
from app.models.user_secret import UserSecret
from app.schemas.common import ApiResponse, MessageData
from app.schemas.user_secret import SecretCreate, SecretData, SecretListData, SecretResponse

logger = logging.getLogger(__name__)

router = APIRouter()

SECRET_NAME_TAKEN = "같은 이름의 시크릿이 이미 있습니다."


def _to_response(secret: UserSecret) -> SecretResponse:
    return SecretResponse(
        id=secret.id,
        name=secret.name,
        masked_value=mask_value(decrypt_value(secret.encrypted_value)),
        created_at=secret.created_at,
    )


@router.get("", response_model=ApiResponse[SecretListData])
async def list_secrets(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        secrets = await crud_secret.list_secrets(db, current_user.id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "시크릿 목록 조회", e, user=current_user.id)
    return ApiResponse(data=SecretListData(secrets=[_to_response(s) for s in secrets]))


@router.post("", response_model=ApiResponse[SecretData], status_code=status.HTTP_201_CREATED)
async def create_secret(
    body: SecretCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        if await crud_secret.get_secret_by_name(db, current_user.id, body.name):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SECRET_NAME_TAKEN)
        secret = await crud_secret.create_secret(db, current_user.id, body.name, body.value)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SECRET_NAME_TAKEN)
    except SQLAlchemyError as e:
        raise storage_error(logger, "시크릿 저장", e, user=current_user.id)
    return ApiResponse(data=SecretData(secret=_to_response(secret), message="시크릿이 저장되었습니다."))


@router.delete("/{secret_id}", response_model=ApiResponse[MessageData])
async def delete_secret(
    secret_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """시크릿 삭제. 이를 참조하던 MCP 서버의 authSecretId는 null이 됩니다."""
    try:
        deleted = await crud_secret.delete_secret(db, current_user.id, secret_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "시크릿 삭제", e, user=current_user.id, secret=secret_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="시크릿을 찾을 수 없습니다.")
    return ApiResponse(data=MessageData(message="시크릿이 삭제되었습니다."))
