"""
Code analysis endpoint.

Forwards a command snippet to the configured AI provider. Provider
errors are returned verbatim in the 500 detail; this is an internal
tool.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from botdash.api.deps import get_analyzer, get_current_user
from botdash.core.entities import User
from botdash.core.errors import AnalysisFailedError
from botdash.services.analysis_service import CodeAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


class AnalyzeCodeRequest(BaseModel):
    code: Optional[str] = None


class AnalysisResponse(BaseModel):
    suggestions: List[str]
    security: List[str]
    performance: List[str]

    class Config:
        from_attributes = True


@router.post("/analyze-code", response_model=AnalysisResponse)
async def analyze_code(
    request: AnalyzeCodeRequest,
    user: User = Depends(get_current_user),
    analyzer: CodeAnalyzer = Depends(get_analyzer),
):
    """
    Analyze a code snippet.

    Raises:
        400: No code supplied
        401: Not authenticated
        500: Provider call or response parsing failed
    """
    if not request.code or not request.code.strip():
        raise HTTPException(status_code=400, detail="Code is required")

    try:
        return await analyzer.analyze(request.code)
    except AnalysisFailedError as e:
        logger.warning(f"Analysis failed for user {user.id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
