from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.dependencies import get_db_session, require_admin
from app.schemas import QuestionCreate, QuestionRead, QuestionUpdate
from app.services import questions as catalog

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("", response_model=Union[QuestionRead, List[QuestionRead]])
async def read_questions(
    id: Optional[str] = None,
    number: Optional[int] = None,
    db: AsyncSession = Depends(get_db_session),
):
    if id:
        return QuestionRead.model_validate(await catalog.load_question(db, id))
    if number is not None:
        return QuestionRead.model_validate(await catalog.load_question_by_number(db, number))
    return [QuestionRead.model_validate(q) for q in await catalog.list_questions(db)]


@router.post("", response_model=QuestionRead, dependencies=[Depends(require_admin)])
async def create_question(payload: QuestionCreate, db: AsyncSession = Depends(get_db_session)):
    return await catalog.create_question(db, payload)


@router.put("", response_model=QuestionRead, dependencies=[Depends(require_admin)])
async def update_question(
    payload: QuestionUpdate,
    id: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
):
    if not id:
        raise HTTPException(status_code=400, detail=messages.QUESTION_ID_REQUIRED)
    return await catalog.update_question(db, id, payload)


@router.delete("", dependencies=[Depends(require_admin)])
async def delete_question(id: Optional[str] = None, db: AsyncSession = Depends(get_db_session)):
    if not id:
        raise HTTPException(status_code=400, detail=messages.QUESTION_ID_REQUIRED)
    await catalog.delete_question(db, id)
    return {"success": True}
