from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from ..schemas import AnalysisResult
from .deps import AnalysisDep

router = APIRouter()


@router.post("/chart", response_model=AnalysisResult)
async def analyze_chart(service: AnalysisDep, image: UploadFile = File(...)) -> AnalysisResult:
    """
    Analyse an uploaded chart screenshot with the AI model.
    """
    content = await image.read()
    return await run_in_threadpool(
        service.analyze_chart_image, content, image.content_type or "image/png"
    )
