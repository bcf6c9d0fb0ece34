"""
공통 CRUD 헬퍼
- 소유권 범위 조회 (존재하지 않음 == 남의 것)
- 부분 업데이트 패치 적용
"""
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


async def get_owned(
    db: AsyncSession,
    model: Type[ModelT],
    entity_id: Any,
    user_id: int,
    id_column: str = "id",
    owner_column: str = "user_id",
) -> Optional[ModelT]:
    """
    id와 소유자 id가 모두 일치하는 행만 반환합니다.

    다른 사용자의 행은 존재하지 않는 행과 똑같이 None으로 취급합니다.
    DB 레벨 CASCADE / SET NULL 결과가 보이도록 identity map의 캐시된 속성을 갱신합니다.
    """
    stmt = (
        select(model)
        .where(
            getattr(model, id_column) == entity_id,
            getattr(model, owner_column) == user_id,
        )
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


def apply_patch(obj: Any, updates: Mapping[str, Any], allowed: Iterable[str]) -> List[str]:
    """updates에 존재하는 허용 키만 obj에 반영하고, 반영된 키 목록을 반환합니다."""
    applied = []
    for key in allowed:
        if key in updates:
            setattr(obj, key, updates[key])
            applied.append(key)
    return applied
